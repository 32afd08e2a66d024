"""
SQLModel models for SP Share.

This module exports all database models so that ``SQLModel.metadata`` knows
every table before ``create_all`` runs.
"""

from .enums import WorkflowStatus, ItemType
from .user import User
from .group import Group
from .membership import Membership
from .item import Item
from .comment import Comment
from .item_type import ItemTypeLimit

__all__ = [
    "WorkflowStatus",
    "ItemType",
    "User",
    "Group",
    "Membership",
    "Item",
    "Comment",
    "ItemTypeLimit",
]
