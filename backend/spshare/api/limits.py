from fastapi import APIRouter, Depends
from sqlmodel import Session

from ..core.database import get_db
from ..core.deps import get_current_admin
from ..models.user import User
from ..schemas.group import GroupResponse
from ..schemas.limits import ItemTypeLimits, LimitsResponse, LimitsUpdate
from ..schemas.user import UserResponse
from ..services import limits as limit_service
from ..services import users as user_service

router = APIRouter()


@router.get("/users", response_model=list[UserResponse])
async def list_users(
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    """Approved members whose limits can be edited."""
    return user_service.list_approved_members(db)


@router.get("/users/{user_id}", response_model=LimitsResponse)
async def get_user_limits(
    user_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    return limit_service.get_user_limits(db, user_id)


@router.put("/users/{user_id}", response_model=LimitsResponse)
async def update_user_limits(
    user_id: int,
    limits: LimitsUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    return limit_service.update_user_limits(db, user_id, limits.max_item_count, limits.max_item_space)


@router.get("/groups", response_model=list[GroupResponse])
async def list_groups(
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    return limit_service.list_approved_groups(db)


@router.get("/groups/{group_id}", response_model=LimitsResponse)
async def get_group_limits(
    group_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    return limit_service.get_group_limits(db, group_id)


@router.put("/groups/{group_id}", response_model=LimitsResponse)
async def update_group_limits(
    group_id: int,
    limits: LimitsUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    return limit_service.update_group_limits(db, group_id, limits.max_item_count, limits.max_item_space)


@router.get("/item-types", response_model=ItemTypeLimits)
async def get_item_type_limits(
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    """Single-file size ceilings for pictures and videos."""
    return limit_service.get_item_type_limits(db)


@router.put("/item-types", response_model=ItemTypeLimits)
async def update_item_type_limits(
    limits: ItemTypeLimits,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    return limit_service.update_item_type_limits(db, limits.max_size_picture, limits.max_size_video)
