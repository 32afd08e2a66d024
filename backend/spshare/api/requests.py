from fastapi import APIRouter, Depends
from sqlmodel import Session

from ..core.database import get_db
from ..core.deps import get_current_admin
from ..models.user import User
from ..schemas.group import GroupResponse, GroupView, MembershipResponse, MembershipView
from ..schemas.requests import ApprovalDecision
from ..schemas.user import UserResponse
from ..services import groups as group_service
from ..services import memberships as membership_service
from ..services import users as user_service

router = APIRouter()


@router.get("/users", response_model=list[UserResponse])
async def pending_users(
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    """Registrations waiting for an admin decision."""
    return user_service.list_users_pending_approval(db)


@router.post("/users/{user_id}", response_model=UserResponse)
async def decide_user(
    user_id: int,
    decision: ApprovalDecision,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    return user_service.approve_or_reject_user(db, user_id, decision.approve)


@router.get("/groups", response_model=list[GroupView])
async def pending_groups(
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    """Group creation requests waiting for an admin decision."""
    return group_service.list_groups_pending_approval(db)


@router.post("/groups/{group_id}", response_model=GroupResponse)
async def decide_group(
    group_id: int,
    decision: ApprovalDecision,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    return group_service.approve_or_reject_group(db, group_id, decision.approve)


@router.get("/memberships", response_model=list[MembershipView])
async def pending_memberships(
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    """Group leader access requests waiting for an admin decision."""
    return membership_service.list_memberships_pending_approval(db)


@router.post("/memberships/{group_id}/{user_id}", response_model=MembershipResponse)
async def decide_membership(
    group_id: int,
    user_id: int,
    decision: ApprovalDecision,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    return membership_service.approve_or_reject_membership(db, user_id, group_id, decision.approve)
