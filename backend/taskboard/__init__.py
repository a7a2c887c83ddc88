"""
TaskBoard Backend — Application Package Initializer
=====================================================

What: The ``taskboard`` package: a Kanban board API (boards → lists → cards,
      with labels and checklists) whose core is the ordering of siblings.
Who:  Imported by uvicorn (``taskboard.main:app``), Alembic and pytest.

Architecture Note:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns, X-User-ID
    ├─────────────────────────────────────┤
    │   Resource services + ownership     │  ← 404 on foreign targets,
    │                                     │    scope locks, transactions
    ├─────────────────────────────────────┤
    │  Positioning service / rebalancer   │  ← pure key arithmetic on
    │  / order keys                       │    [(id, key)] snapshots
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    The ordering core never touches the database, so it is unit-tested
    without one.
"""

__version__ = "1.0.0"
