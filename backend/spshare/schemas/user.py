from datetime import datetime

from pydantic import BaseModel, computed_field

from ..models.enums import WorkflowStatus


class UserResponse(BaseModel):
    """User response model."""

    id: int
    first_name: str
    last_name: str
    email: str
    username: str
    is_admin: bool
    workflow_status: WorkflowStatus
    max_item_count: int
    max_item_space: float
    created_at: datetime

    class Config:
        from_attributes = True

    @computed_field
    @property
    def workflow_status_label(self) -> str:
        return self.workflow_status.label
