from sqlmodel import SQLModel, Field, Column
from datetime import datetime
from typing import Optional

from .enums import IntEnumType, WorkflowStatus


class Group(SQLModel, table=True):
    """Group of users sharing pictures and videos."""

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(unique=True, index=True, max_length=60)

    # Ownership
    created_by: int = Field(foreign_key="user.id")

    workflow_status: WorkflowStatus = Field(
        default=WorkflowStatus.PENDING,
        sa_column=Column(IntEnumType(WorkflowStatus), nullable=False),
    )

    # Upload limits (space in MB)
    max_item_count: int
    max_item_space: float

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
