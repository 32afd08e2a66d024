from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from ..core.database import get_db
from ..core.deps import get_current_active_user
from ..models.user import User
from ..schemas.group import (
    AddMemberRequest,
    GroupCreate,
    GroupDetails,
    GroupResponse,
    GroupView,
    MembershipResponse,
)
from ..services import groups as group_service
from ..services import memberships as membership_service

router = APIRouter()


@router.get("", response_model=list[GroupView])
async def list_groups(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """Groups the current user belongs to."""
    return group_service.list_groups_for_user(db, current_user)


@router.post("", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
async def create_group(
    group_data: GroupCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """Request a new group; the creator becomes its leader."""
    return group_service.create_group(db, group_data.name, current_user)


@router.get("/{group_id}", response_model=GroupDetails)
async def get_group(
    group_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    return group_service.get_group_details(db, current_user, group_id)


@router.post("/{group_id}/members", response_model=MembershipResponse, status_code=status.HTTP_201_CREATED)
async def add_member(
    group_id: int,
    request_data: AddMemberRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """Tag a user to the group. Only an approved leader may do this."""
    return membership_service.add_member(db, request_data.username, group_id, current_user)


@router.post("/{group_id}/lead-request", response_model=MembershipResponse)
async def request_lead_access(
    group_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """Ask an admin to make the current user a leader of the group."""
    return membership_service.request_lead_access(db, current_user.id, group_id)
