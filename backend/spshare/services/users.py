import logging
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ..core.config import settings
from ..core.database import commit_or_raise
from ..core.exceptions import ConflictError, NotFoundError, UnauthorizedError
from ..core.security import get_password_hash, verify_password
from ..models.enums import WorkflowStatus
from ..models.user import User
from ..schemas.auth import UserRegister

logger = logging.getLogger(__name__)


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("Invalid user", details={"user_id": user_id})
    return user


def get_user_by_username(db: Session, username: str) -> User:
    user = db.exec(select(User).where(User.username == username.lower())).first()
    if user is None:
        raise NotFoundError("Invalid username")
    return user


def register_user(db: Session, data: UserRegister) -> User:
    """Create a Pending, non-admin account with the default upload limits."""
    user = User(
        first_name=data.first_name,
        last_name=data.last_name,
        email=data.email,
        username=data.username.lower(),
        hashed_password=get_password_hash(data.password),
        max_item_count=settings.USER_MAX_ALLOWED_ITEMS,
        max_item_space=settings.USER_MAX_ALLOWED_SPACE,
    )

    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info(f"Registration rejected, username '{user.username}' already taken")
        raise ConflictError("Unable to add user at the moment. Please try after some time.")
    db.refresh(user)

    logger.info(f"Registered user {user.id} ({user.username}), pending approval")
    return user


def authenticate(db: Session, username: str, password: str) -> User:
    user = db.exec(select(User).where(User.username == username.lower())).first()
    if user is None or not verify_password(password, user.hashed_password):
        raise UnauthorizedError("Invalid username and/or password")
    return user


def list_users_pending_approval(db: Session) -> list[User]:
    return list(
        db.exec(
            select(User).where(User.workflow_status == WorkflowStatus.PENDING)
        ).all()
    )


def list_approved_members(db: Session) -> list[User]:
    """Approved non-admin users, ordered by name."""
    return list(
        db.exec(
            select(User)
            .where(
                User.workflow_status == WorkflowStatus.APPROVED,
                User.is_admin == False,  # noqa: E712
            )
            .order_by(User.first_name, User.last_name)
        ).all()
    )


def approve_or_reject_user(db: Session, user_id: int, approve: bool) -> User:
    """Move a Pending account to Approved or Rejected. The caller is an admin."""
    user = get_user(db, user_id)
    if user.workflow_status != WorkflowStatus.PENDING:
        raise ConflictError(
            f"The user request is already {user.workflow_status.label.lower()}",
            details={"user_id": user_id},
        )

    user.workflow_status = WorkflowStatus.APPROVED if approve else WorkflowStatus.REJECTED
    user.updated_at = datetime.utcnow()
    db.add(user)
    commit_or_raise(
        db,
        "Unable to perform the action at the moment",
        f"Unable to update the workflow status of user {user_id}",
    )
    db.refresh(user)

    logger.info(f"User {user_id} {user.workflow_status.label.lower()}")
    return user
