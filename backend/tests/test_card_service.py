"""
TaskBoard Backend — Card Service Tests
========================================

What:  Card creation and moves against an in-memory SQLite database.
How:   Services run on the ``db_session`` fixture; the ordering rules are
       observed through the stored positions.

What we test:
    ✅ append keys 1000, 2000, 3000
    ✅ drag within a list, to the front and with a forced rebalance
    ✅ cross-list move: destination key only, source keys untouched
    ✅ cross-board move drops the old board's labels
    ✅ foreign lists and out-of-range indexes leave everything unchanged
    ✅ full-order reorder
    ✅ a move locks list rows in id order before the card row
    ✅ board maintenance restarts when a list appears before its locks are held
"""

from uuid import uuid4

import pytest
import pytest_asyncio

from taskboard.exceptions import IncompleteScopeError, IndexOutOfBoundsError, NotFoundError
from taskboard.models import Card
from taskboard.schemas.board import BoardCreate
from taskboard.schemas.card import CardCreate
from taskboard.schemas.label import LabelCreate
from taskboard.schemas.task_list import ListCreate
from taskboard.schemas.user import UserCreate
from taskboard.services.board_service import _BoardListsChanged, board_service
from taskboard.services.card_service import _SourceListChanged, card_service
from taskboard.services.label_service import label_service
from taskboard.services.list_service import list_service
from taskboard.services.ownership_service import ownership_service
from taskboard.services.scope_snapshot import load_scope
from taskboard.services.user_service import user_service


async def make_user(db, name="Ada"):
    user = await user_service.create_user(
        db, UserCreate(email=f"{uuid4().hex[:8]}@example.com", display_name=name)
    )
    return user.id


async def make_list(db, user_id, board_id, title, cards=()):
    task_list = await list_service.create_list(db, user_id, board_id, ListCreate(title=title))
    ids = {}
    for card_title in cards:
        card = await card_service.create_card(db, user_id, task_list.id, CardCreate(title=card_title))
        ids[card_title] = card.id
    return task_list.id, ids


async def contents(db, list_id):
    cards = await load_scope(db, Card, Card.list_id, list_id)
    return [(card.title, card.position) for card in cards]


@pytest_asyncio.fixture
async def board_setup(db_session):
    user_id = await make_user(db_session)
    board = await board_service.create_board(db_session, user_id, BoardCreate(title="Sprint"))
    list_a, cards_a = await make_list(db_session, user_id, board.id, "A", ["a1", "a2"])
    list_b, cards_b = await make_list(db_session, user_id, board.id, "B", ["b1", "b2", "b3"])
    return {
        "user_id": user_id,
        "board_id": board.id,
        "list_a": list_a,
        "list_b": list_b,
        "cards": {**cards_a, **cards_b},
    }


class TestCreateCard:

    @pytest.mark.asyncio
    async def test_append_keys(self, db_session, board_setup):
        assert await contents(db_session, board_setup["list_b"]) == [
            ("b1", 1000.0),
            ("b2", 2000.0),
            ("b3", 3000.0),
        ]

    @pytest.mark.asyncio
    async def test_create_in_foreign_list(self, db_session, board_setup):
        stranger = await make_user(db_session, "Eve")
        with pytest.raises(NotFoundError):
            await card_service.create_card(
                db_session, stranger, board_setup["list_a"], CardCreate(title="x")
            )


class TestMoveWithinList:

    @pytest.mark.asyncio
    async def test_drag_third_card_to_top(self, db_session, board_setup):
        s = board_setup
        result = await card_service.move_card(db_session, s["user_id"], s["cards"]["b3"], 0)

        assert result.position == 500.0
        assert not result.rebalanced
        assert await contents(db_session, s["list_b"]) == [
            ("b3", 500.0),
            ("b1", 1000.0),
            ("b2", 2000.0),
        ]

    @pytest.mark.asyncio
    async def test_crowded_neighbours_rebalance_the_list(self, db_session, board_setup):
        s = board_setup
        cards = await load_scope(db_session, Card, Card.list_id, s["list_b"])
        cards[1].position = 1000.0000000001
        await db_session.commit()

        result = await card_service.move_card(db_session, s["user_id"], s["cards"]["b3"], 1)

        assert result.rebalanced
        assert await contents(db_session, s["list_b"]) == [
            ("b1", 1000.0),
            ("b3", 2000.0),
            ("b2", 3000.0),
        ]

    @pytest.mark.asyncio
    async def test_index_out_of_range(self, db_session, board_setup):
        s = board_setup
        with pytest.raises(IndexOutOfBoundsError):
            await card_service.move_card(db_session, s["user_id"], s["cards"]["b1"], 3)
        await db_session.rollback()
        assert [title for title, _ in await contents(db_session, s["list_b"])] == [
            "b1",
            "b2",
            "b3",
        ]


class TestMoveAcrossLists:

    @pytest.mark.asyncio
    async def test_move_to_end_of_other_list(self, db_session, board_setup):
        s = board_setup
        result = await card_service.move_card(
            db_session, s["user_id"], s["cards"]["a1"], 3, list_id=s["list_b"]
        )

        assert result.position == 4000.0
        assert await contents(db_session, s["list_a"]) == [("a2", 2000.0)]
        assert await contents(db_session, s["list_b"]) == [
            ("b1", 1000.0),
            ("b2", 2000.0),
            ("b3", 3000.0),
            ("a1", 4000.0),
        ]

    @pytest.mark.asyncio
    async def test_move_into_empty_list(self, db_session, board_setup):
        s = board_setup
        empty, _ = await make_list(db_session, s["user_id"], s["board_id"], "Done")

        result = await card_service.move_card(
            db_session, s["user_id"], s["cards"]["b2"], 0, list_id=empty
        )

        assert result.position == 1000.0
        assert await contents(db_session, empty) == [("b2", 1000.0)]

    @pytest.mark.asyncio
    async def test_move_to_foreign_list(self, db_session, board_setup):
        s = board_setup
        stranger = await make_user(db_session, "Eve")
        other_board = await board_service.create_board(db_session, stranger, BoardCreate(title="Eve"))
        foreign_list, _ = await make_list(db_session, stranger, other_board.id, "Theirs")

        with pytest.raises(NotFoundError):
            await card_service.move_card(
                db_session, s["user_id"], s["cards"]["a1"], 0, list_id=foreign_list
            )

    @pytest.mark.asyncio
    async def test_move_to_other_board_drops_its_labels(self, db_session, board_setup):
        s = board_setup
        label = await label_service.create_label(
            db_session, s["user_id"], s["board_id"], LabelCreate(name="Bug", color="#EB5A46")
        )
        await label_service.attach_label(db_session, s["user_id"], s["cards"]["a1"], label.id)
        second = await board_service.create_board(db_session, s["user_id"], BoardCreate(title="Ops"))
        target, _ = await make_list(db_session, s["user_id"], second.id, "Inbox")

        await card_service.move_card(db_session, s["user_id"], s["cards"]["a1"], 0, list_id=target)

        detail = await card_service.get_card(db_session, s["user_id"], s["cards"]["a1"])
        assert detail.list_id == target
        assert detail.labels == []

    @pytest.mark.asyncio
    async def test_card_that_left_its_list_is_detected(self, db_session, board_setup):
        s = board_setup
        with pytest.raises(_SourceListChanged) as exc_info:
            await card_service._move_locked(
                db_session,
                s["user_id"],
                s["cards"]["a1"],
                s["list_b"],
                s["list_b"],
                0,
            )
        assert exc_info.value.list_id == s["list_a"]


class TestReorderCards:

    @pytest.mark.asyncio
    async def test_full_order(self, db_session, board_setup):
        s = board_setup
        order = [s["cards"]["b3"], s["cards"]["b1"], s["cards"]["b2"]]

        result = await card_service.reorder_cards(db_session, s["user_id"], s["list_b"], order)

        assert list(result.positions.values()) == [1000.0, 2000.0, 3000.0]
        assert [title for title, _ in await contents(db_session, s["list_b"])] == [
            "b3",
            "b1",
            "b2",
        ]

    @pytest.mark.asyncio
    async def test_order_with_card_from_other_list(self, db_session, board_setup):
        s = board_setup
        order = [s["cards"]["b1"], s["cards"]["b2"], s["cards"]["a1"]]
        with pytest.raises(IncompleteScopeError):
            await card_service.reorder_cards(db_session, s["user_id"], s["list_b"], order)


class TestRowLockOrder:

    @pytest.mark.asyncio
    async def test_lists_locked_in_id_order_before_card(self, db_session, board_setup, monkeypatch):
        s = board_setup
        locks = []
        task_list = ownership_service.task_list
        card = ownership_service.card

        async def record_list(db, user_id, list_id, for_update=False, **kwargs):
            if for_update:
                locks.append(("list", list_id))
            return await task_list(db, user_id, list_id, for_update=for_update, **kwargs)

        async def record_card(db, user_id, card_id, for_update=False, **kwargs):
            if for_update:
                locks.append(("card", card_id))
            return await card(db, user_id, card_id, for_update=for_update, **kwargs)

        monkeypatch.setattr(ownership_service, "task_list", record_list)
        monkeypatch.setattr(ownership_service, "card", record_card)

        await card_service.move_card(
            db_session, s["user_id"], s["cards"]["b1"], 0, list_id=s["list_a"]
        )
        await card_service.move_card(
            db_session, s["user_id"], s["cards"]["a2"], 0, list_id=s["list_b"]
        )

        first, second = sorted([s["list_a"], s["list_b"]])
        expected = [("list", first), ("list", second)]
        assert locks == [
            *expected,
            ("card", s["cards"]["b1"]),
            *expected,
            ("card", s["cards"]["a2"]),
        ]


class TestBoardMaintenance:

    @pytest.mark.asyncio
    async def test_forced_pass_respaces_every_scope(self, db_session, board_setup):
        s = board_setup

        result = await board_service.rebalance_board(
            db_session, s["user_id"], s["board_id"], force=True
        )

        assert result.scopes_rebalanced == 3
        assert await contents(db_session, s["list_b"]) == [
            ("b1", 1000.0),
            ("b2", 2000.0),
            ("b3", 3000.0),
        ]

    @pytest.mark.asyncio
    async def test_list_created_before_locking_restarts_the_pass(self, db_session, board_setup):
        s = board_setup
        with pytest.raises(_BoardListsChanged):
            await board_service._rebalance_locked(
                db_session, s["user_id"], s["board_id"], {s["list_a"]}, True
            )
