from enum import Enum

from sqlalchemy import Integer
from sqlalchemy.types import TypeDecorator


class WorkflowStatus(int, Enum):
    """Admin moderation state of users, groups and memberships."""

    PENDING = 0
    APPROVED = 1
    REJECTED = 2

    @property
    def label(self) -> str:
        return _WORKFLOW_LABELS[self]


_WORKFLOW_LABELS = {
    WorkflowStatus.PENDING: "Pending for approval",
    WorkflowStatus.APPROVED: "Approved",
    WorkflowStatus.REJECTED: "Rejected",
}


class ItemType(int, Enum):
    """Kinds of media an item can hold."""

    UNKNOWN = 0
    PICTURE = 1
    VIDEO = 2

    @property
    def label(self) -> str:
        return _ITEM_TYPE_LABELS[self]


_ITEM_TYPE_LABELS = {
    ItemType.UNKNOWN: "Unknown",
    ItemType.PICTURE: "Picture",
    ItemType.VIDEO: "Video",
}


class IntEnumType(TypeDecorator):
    """Stores an ``int`` enum by value instead of by member name."""

    impl = Integer
    cache_ok = True

    def __init__(self, enum_class, *args, **kwargs):
        self.enum_class = enum_class
        super().__init__(*args, **kwargs)

    def process_bind_param(self, value, dialect):
        # Python -> SQL
        if value is None:
            return None
        return int(value)

    def process_result_value(self, value, dialect):
        # SQL -> Python
        if value is None:
            return None
        return self.enum_class(value)
