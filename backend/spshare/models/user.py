from sqlmodel import SQLModel, Field, Column
from datetime import datetime
from typing import Optional

from .enums import IntEnumType, WorkflowStatus


class User(SQLModel, table=True):
    """Application user with credentials, upload limits and approval state."""

    id: Optional[int] = Field(default=None, primary_key=True)
    first_name: str = Field(max_length=50)
    last_name: str = Field(max_length=50)
    email: str = Field(max_length=50)
    username: str = Field(unique=True, index=True, max_length=12)

    # Authentication
    hashed_password: str
    is_admin: bool = Field(default=False)
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

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
