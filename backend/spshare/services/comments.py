import html
import logging

from sqlmodel import Session, select

from ..core.database import commit_or_raise
from ..core.exceptions import NotFoundError
from ..models.comment import Comment
from ..models.item import Item
from ..models.user import User
from ..schemas.comment import CommentResponse
from .groups import ensure_group_access

logger = logging.getLogger(__name__)


def list_comments(db: Session, item_id: int) -> list[CommentResponse]:
    """Comments on an item, oldest first, with author names."""
    rows = db.exec(
        select(Comment, User)
        .join(User, User.id == Comment.author_id)
        .where(Comment.item_id == item_id)
        .order_by(Comment.created_at, Comment.id)
    ).all()
    return [CommentResponse.from_models(comment, author) for comment, author in rows]


def add_comment(db: Session, caller: User, item_id: int, text: str) -> CommentResponse:
    item = db.get(Item, item_id)
    if item is None:
        raise NotFoundError("Item details unavailable", details={"item_id": item_id})
    ensure_group_access(db, caller, item.group_id)

    comment = Comment(
        item_id=item_id,
        author_id=caller.id,
        text=html.escape(text),
    )
    db.add(comment)
    commit_or_raise(
        db,
        "Unable to process the request",
        f"Unable to insert the comment for item {item_id}",
    )
    db.refresh(comment)

    logger.info(f"User {caller.id} commented on item {item_id}")
    return CommentResponse.from_models(comment, caller)
