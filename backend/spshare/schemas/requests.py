from pydantic import BaseModel


class ApprovalDecision(BaseModel):
    """Admin disposition of a pending request."""

    approve: bool
