"""Admin editing of user, group and item-type upload limits."""

import logging
from datetime import datetime

from sqlmodel import Session, select

from ..core.database import commit_or_raise
from ..core.exceptions import NotFoundError
from ..models.enums import ItemType, WorkflowStatus
from ..models.group import Group
from ..models.item_type import ItemTypeLimit
from ..schemas.limits import ItemTypeLimits, LimitsResponse
from .groups import get_group
from .users import get_user

logger = logging.getLogger(__name__)


def get_user_limits(db: Session, user_id: int) -> LimitsResponse:
    user = get_user(db, user_id)
    return LimitsResponse(id=user.id, name=user.full_name,
                          max_item_count=user.max_item_count, max_item_space=user.max_item_space)


def update_user_limits(db: Session, user_id: int, max_item_count: int, max_item_space: float) -> LimitsResponse:
    user = get_user(db, user_id)
    user.max_item_count = max_item_count
    user.max_item_space = max_item_space
    user.updated_at = datetime.utcnow()
    db.add(user)
    commit_or_raise(db, "Unable to update user limits", f"Unable to update limits of user {user_id}")

    logger.info(f"User {user_id} limits set to {max_item_count} items / {max_item_space} MB")
    return get_user_limits(db, user_id)


def list_approved_groups(db: Session) -> list[Group]:
    return list(
        db.exec(
            select(Group)
            .where(Group.workflow_status == WorkflowStatus.APPROVED)
            .order_by(Group.name)
        ).all()
    )


def get_group_limits(db: Session, group_id: int) -> LimitsResponse:
    group = get_group(db, group_id)
    return LimitsResponse(id=group.id, name=group.name,
                          max_item_count=group.max_item_count, max_item_space=group.max_item_space)


def update_group_limits(db: Session, group_id: int, max_item_count: int, max_item_space: float) -> LimitsResponse:
    group = get_group(db, group_id)
    group.max_item_count = max_item_count
    group.max_item_space = max_item_space
    group.updated_at = datetime.utcnow()
    db.add(group)
    commit_or_raise(db, "Unable to update group limits", f"Unable to update limits of group {group_id}")

    logger.info(f"Group {group_id} limits set to {max_item_count} items / {max_item_space} MB")
    return get_group_limits(db, group_id)


def _item_type_limit(db: Session, item_type: ItemType) -> ItemTypeLimit:
    limit = db.get(ItemTypeLimit, item_type)
    if limit is None:
        logger.error(f"Item-type limit row missing for {item_type.label}")
        raise NotFoundError("Unable to get the item types")
    return limit


def get_item_type_limits(db: Session) -> ItemTypeLimits:
    return ItemTypeLimits(
        max_size_picture=_item_type_limit(db, ItemType.PICTURE).max_item_space,
        max_size_video=_item_type_limit(db, ItemType.VIDEO).max_item_space,
    )


def update_item_type_limits(db: Session, max_size_picture: float, max_size_video: float) -> ItemTypeLimits:
    for item_type, max_space in (
        (ItemType.PICTURE, max_size_picture),
        (ItemType.VIDEO, max_size_video),
    ):
        limit = _item_type_limit(db, item_type)
        limit.max_item_space = max_space
        db.add(limit)

    commit_or_raise(db, "Unable to update item limits", "Unable to update item-type limits")

    logger.info(f"Item-type limits set to {max_size_picture} MB (pictures) / {max_size_video} MB (videos)")
    return get_item_type_limits(db)
