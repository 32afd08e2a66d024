import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, computed_field, field_validator

from ..models.enums import WorkflowStatus

GROUP_NAME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9_.' ]+$")
MEMBER_USERNAME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9_.]+$")


class GroupCreate(BaseModel):
    """Group creation request."""

    name: str = Field(max_length=60)

    @field_validator("name")
    @classmethod
    def name_format(cls, v: str) -> str:
        if not GROUP_NAME_PATTERN.fullmatch(v):
            raise ValueError(
                "Group name should start with an alphabet and must include only "
                "alphabets (a-z, A-Z), numbers (0-9) and symbols (. and _)"
            )
        return v


class GroupResponse(BaseModel):
    """Group response model."""

    id: int
    name: str
    created_by: int
    workflow_status: WorkflowStatus
    max_item_count: int
    max_item_space: float
    created_at: datetime

    class Config:
        from_attributes = True


class GroupView(BaseModel):
    """A group as listed to a user, with its creator and the user's leader flag."""

    id: int
    name: str
    created_by: int
    created_by_name: str
    workflow_status: WorkflowStatus
    created_at: datetime
    is_leader: bool = False

    @computed_field
    @property
    def workflow_status_label(self) -> str:
        return self.workflow_status.label

    @classmethod
    def from_models(cls, group, creator, is_leader: bool = False) -> "GroupView":
        return cls(
            id=group.id,
            name=group.name,
            created_by=group.created_by,
            created_by_name=creator.full_name,
            workflow_status=group.workflow_status,
            created_at=group.created_at,
            is_leader=is_leader,
        )


class MembershipView(BaseModel):
    """A user-group mapping joined with the member and whoever added them."""

    user_id: int
    group_id: int
    username: str
    first_name: str
    last_name: str
    created_by_name: str
    is_leader: bool
    workflow_status: WorkflowStatus
    created_at: datetime
    group_name: Optional[str] = None

    @computed_field
    @property
    def workflow_status_label(self) -> str:
        return self.workflow_status.label

    @classmethod
    def from_models(cls, membership, member, creator, group_name: Optional[str] = None) -> "MembershipView":
        return cls(
            user_id=membership.user_id,
            group_id=membership.group_id,
            username=member.username,
            first_name=member.first_name,
            last_name=member.last_name,
            created_by_name=creator.full_name,
            is_leader=membership.is_leader,
            workflow_status=membership.workflow_status,
            created_at=membership.created_at,
            group_name=group_name,
        )


class GroupDetails(BaseModel):
    """Group page: the group, the caller's standing in it and its members."""

    id: int
    name: str
    created_by: int
    created_by_name: str
    workflow_status: WorkflowStatus
    created_at: datetime
    max_item_count: int
    max_item_space: float
    is_leader: bool
    membership_status: WorkflowStatus
    tagged_users: list[MembershipView] = []


class AddMemberRequest(BaseModel):
    """Tag an existing user to a group."""

    username: str = Field(max_length=12)

    @field_validator("username")
    @classmethod
    def username_format(cls, v: str) -> str:
        if not MEMBER_USERNAME_PATTERN.fullmatch(v):
            raise ValueError(
                "Username should start with an alphabet and must include only "
                "alphabets (a-z, A-Z), numbers (0-9) and symbols (. and _)"
            )
        return v


class MembershipResponse(BaseModel):
    user_id: int
    group_id: int
    is_leader: bool
    workflow_status: WorkflowStatus
    created_at: datetime

    class Config:
        from_attributes = True
