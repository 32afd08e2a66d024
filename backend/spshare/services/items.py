import logging
from datetime import datetime
from typing import Optional

from sqlmodel import Session, select

from ..core.database import commit_or_raise
from ..core.exceptions import NotFoundError, StoreError, UnauthorizedError
from ..core.storage import LocalStorage, detect_item_type
from ..models.enums import ItemType
from ..models.comment import Comment
from ..models.item import Item
from ..models.user import User
from ..schemas.item import HomeFeed, ItemDetails, ItemResponse
from .comments import list_comments
from .groups import ensure_group_access, list_accessible_groups
from .quota import check_limits

logger = logging.getLogger(__name__)


def get_item(db: Session, item_id: int) -> Item:
    item = db.get(Item, item_id)
    if item is None:
        raise NotFoundError("Item details unavailable", details={"item_id": item_id})
    return item


def upload_item(
    db: Session,
    storage: LocalStorage,
    caller: User,
    group_id: int,
    name: str,
    description: str,
    filename: str,
    data: bytes,
    now: Optional[datetime] = None,
) -> Item:
    """Check limits, record the item, then persist its bytes.

    The row is inserted with ``uploaded=False`` and only flipped once the bytes
    are on disk, so a failed write never counts toward any limit.
    """
    item_type = detect_item_type(filename)
    ensure_group_access(db, caller, group_id)

    now = now or datetime.utcnow()
    timestamp = int(now.timestamp())
    path = storage.item_path(filename, timestamp)
    logger.info(f"Storing '{filename}' for user {caller.id} at {path}")

    item = Item(
        name=name,
        description=description,
        item_type=item_type,
        size_bytes=len(data),
        group_id=group_id,
        path=path,
        uploaded=False,
        created_by=caller.id,
        created_at=now,
    )

    check_limits(db, item)

    db.add(item)
    commit_or_raise(db, "Unable to add the item at the moment", "Unable to insert item into database")
    db.refresh(item)

    try:
        storage.write(path, data)
    except OSError as e:
        logger.error(f"Unable to write item {item.id} to {path}. Error: {e}")
        raise StoreError("Unable to upload the file at the moment") from e

    item.uploaded = True
    db.add(item)
    commit_or_raise(
        db,
        "Unable to process the request",
        f"Unable to update the upload status of the item (ID: {item.id})",
    )
    db.refresh(item)

    logger.info(f"Item {item.id} uploaded to group {group_id} ({item.size_bytes} bytes)")
    return item


def get_item_with_comments(db: Session, caller: User, item_id: int) -> ItemDetails:
    item = get_item(db, item_id)
    group = ensure_group_access(db, caller, item.group_id)

    item.last_accessed = datetime.utcnow()
    db.add(item)
    commit_or_raise(db, "Unable to process the request", f"Unable to touch item {item_id}")
    db.refresh(item)

    uploader = db.get(User, item.created_by)
    details = ItemDetails.model_validate(item)
    details.group_name = group.name
    details.created_by_name = uploader.full_name if uploader else ""
    details.comments = list_comments(db, item_id)
    return details


def read_item_bytes(db: Session, storage: LocalStorage, caller: User, item_id: int) -> tuple[Item, bytes]:
    item = get_item(db, item_id)
    ensure_group_access(db, caller, item.group_id)
    if not item.uploaded:
        raise NotFoundError("Item details unavailable", details={"item_id": item_id})

    try:
        data = storage.read(item.path)
    except OSError as e:
        logger.error(f"Unable to read item {item_id} from {item.path}. Error: {e}")
        raise StoreError("Unable to process the request") from e
    return item, data


def get_home_feed(db: Session, caller: User) -> HomeFeed:
    """Uploaded pictures and videos of every group the caller can see."""
    feed = HomeFeed()
    groups = {group.id: group for group in list_accessible_groups(db, caller)}
    if not groups:
        return feed

    items = db.exec(
        select(Item)
        .where(Item.group_id.in_(list(groups)), Item.uploaded == True)  # noqa: E712
        .order_by(Item.created_at.desc())
    ).all()

    for item in items:
        entry = ItemResponse.model_validate(item)
        entry.group_name = groups[item.group_id].name
        if item.item_type == ItemType.PICTURE:
            feed.pictures.append(entry)
        elif item.item_type == ItemType.VIDEO:
            feed.videos.append(entry)
    return feed


def delete_item(db: Session, storage: LocalStorage, item_id: int, caller: User) -> None:
    """Delete an item: hide it from quota counting, remove the bytes, drop the row.

    If the bytes cannot be removed the row stays with ``uploaded=False``; that
    state is not rolled back.
    """
    item = get_item(db, item_id)

    if item.created_by != caller.id and not caller.is_admin:
        raise UnauthorizedError("Unauthorized. You do not have enough permissions to delete the item.")

    item.uploaded = False
    db.add(item)
    commit_or_raise(
        db,
        "Unable to delete the item at the moment",
        f"Unable to update the upload status of the item (ID: {item_id})",
    )

    try:
        storage.delete(item.path)
    except OSError as e:
        logger.error(f"Unable to delete the bytes of item {item_id} at {item.path}. Error: {e}")
        raise StoreError("Unable to delete the item at the moment") from e

    for comment in db.exec(select(Comment).where(Comment.item_id == item_id)).all():
        db.delete(comment)
    db.delete(item)
    commit_or_raise(
        db,
        "Unable to delete the item at the moment",
        f"Unable to delete item {item_id} from the database",
    )
    logger.info(f"Item {item_id} deleted by user {caller.id}")
