from sqlmodel import SQLModel, Field, Column
from datetime import datetime

from .enums import IntEnumType, WorkflowStatus


class Membership(SQLModel, table=True):
    """Membership model for user-group relationships.

    A row is Approved when a leader adds a member directly and Pending while it
    carries a request for group-leader access.
    """

    # Composite key: one row per user-group pair
    user_id: int = Field(foreign_key="user.id", primary_key=True)
    group_id: int = Field(foreign_key="group.id", primary_key=True)

    # Membership details
    is_leader: bool = Field(default=False)
    workflow_status: WorkflowStatus = Field(
        default=WorkflowStatus.APPROVED,
        sa_column=Column(IntEnumType(WorkflowStatus), nullable=False),
    )
    created_by: int = Field(foreign_key="user.id")

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
