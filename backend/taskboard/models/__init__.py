"""
TaskBoard Backend — ORM Models
================================

Containment chain (every arrow is a CASCADE foreign key):

    User ─▶ Board ─▶ TaskList ─▶ Card ─▶ Checklist ─▶ ChecklistItem
               └───▶ Label ◀──── card_labels ────┘

Importing this package registers every model with ``Base.metadata`` so
string-based relationships resolve regardless of which module is used first.
"""

from taskboard.models.user import User
from taskboard.models.board import Board
from taskboard.models.task_list import TaskList
from taskboard.models.card import Card, card_labels
from taskboard.models.label import Label
from taskboard.models.checklist import Checklist, ChecklistItem

__all__ = [
    "User",
    "Board",
    "TaskList",
    "Card",
    "card_labels",
    "Label",
    "Checklist",
    "ChecklistItem",
]
