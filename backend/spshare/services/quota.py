"""
Upload quota evaluation.

Checks run in a fixed order (user, group, item type) and the first failure is
raised. Utilisation is aggregated from the item table on every call; there is
no running total and no lock, so two concurrent uploads can both pass before
either is written.
"""

import logging

from sqlmodel import Session, select, func

from ..core.exceptions import NotFoundError, QuotaExceededError
from ..models.group import Group
from ..models.item import Item
from ..models.item_type import ItemTypeLimit
from ..models.user import User

logger = logging.getLogger(__name__)

# Decimal megabytes: 1 MB = 1e6 bytes
MB = 1e-06


def bytes_to_mb(size_bytes: int) -> float:
    return size_bytes * MB


def _utilization(db: Session, *criteria) -> tuple[int, float]:
    count, total_bytes = db.exec(
        select(func.count(Item.id), func.coalesce(func.sum(Item.size_bytes), 0)).where(
            Item.uploaded == True,  # noqa: E712
            *criteria,
        )
    ).one()
    return count, bytes_to_mb(int(total_bytes))


def user_utilization(db: Session, user_id: int) -> tuple[int, float]:
    """Number of uploaded items and MB used by a user."""
    return _utilization(db, Item.created_by == user_id)


def group_utilization(db: Session, group_id: int) -> tuple[int, float]:
    """Number of uploaded items and MB used in a group."""
    return _utilization(db, Item.group_id == group_id)


def check_user_limits(db: Session, user_id: int, file_size_mb: float) -> None:
    user = db.get(User, user_id)
    if user is None:
        logger.error(f"Unable to get upload limits for user {user_id}")
        raise NotFoundError("Unable to fetch upload limits for the user")

    count, size = user_utilization(db, user_id)
    logger.info(f"[User Limits] Count = {count}, Size = {size:f}, Uploaded file size = {file_size_mb:f} MB")

    if not count < user.max_item_count:
        raise QuotaExceededError(
            f"User is limited to {user.max_item_count} items",
            scope="user",
            kind="count",
            limit=user.max_item_count,
            attempted=count + 1,
        )

    if not size + file_size_mb < user.max_item_space:
        raise QuotaExceededError(
            f"User is limited to {user.max_item_space:.3f} MB of space for uploads",
            scope="user",
            kind="space",
            limit=user.max_item_space,
            attempted=size + file_size_mb,
        )


def check_group_limits(db: Session, group_id: int, file_size_mb: float) -> None:
    group = db.get(Group, group_id)
    if group is None:
        logger.error(f"Unable to get upload limits for group {group_id}")
        raise NotFoundError("Unable to fetch upload limits for the group")

    count, size = group_utilization(db, group_id)
    logger.info(f"[Group Limits] Count = {count}, Size = {size:f}, Uploaded file size = {file_size_mb:f} MB")

    if not count < group.max_item_count:
        raise QuotaExceededError(
            f"Only {group.max_item_count} items can be uploaded in the group",
            scope="group",
            kind="count",
            limit=group.max_item_count,
            attempted=count + 1,
        )

    if not size + file_size_mb < group.max_item_space:
        raise QuotaExceededError(
            f"The group is limited to {group.max_item_space:.3f} MB of space for uploads",
            scope="group",
            kind="space",
            limit=group.max_item_space,
            attempted=size + file_size_mb,
        )


def check_item_type_limit(db: Session, item_type, file_size_mb: float) -> None:
    limit = db.get(ItemTypeLimit, item_type)
    if limit is None:
        logger.error(f"Unable to get upload limits for item type {item_type!r}")
        raise NotFoundError("Unable to fetch upload limits for the item type")

    logger.info(f"[Item Type Limits] Max = {limit.max_item_space:f}, Uploaded file size = {file_size_mb:f} MB")

    # Single-file ceiling, inclusive
    if file_size_mb > limit.max_item_space:
        raise QuotaExceededError(
            f"Maximum allowed file size for item-type '{limit.name}' is {limit.max_item_space:.3f} MB",
            scope="item_type",
            kind="space",
            limit=limit.max_item_space,
            attempted=file_size_mb,
        )


def check_limits(db: Session, item: Item) -> None:
    """Raise ``QuotaExceededError`` if ``item`` may not be uploaded."""
    file_size_mb = bytes_to_mb(item.size_bytes)

    check_user_limits(db, item.created_by, file_size_mb)
    check_group_limits(db, item.group_id, file_size_mb)
    check_item_type_limit(db, item.item_type, file_size_mb)
