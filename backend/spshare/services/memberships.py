"""
User-group mappings and the group-leader access workflow.

A leader adds members directly (Approved, no admin step). A member asks for
leader access by flipping their own row to Pending with ``is_leader`` set;
an admin then approves it, or rejects it which demotes the row back to an
Approved ordinary membership.
"""

import logging
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import aliased
from sqlmodel import Session, select

from ..core.database import commit_or_raise
from ..core.exceptions import ConflictError, NotFoundError, UnauthorizedError
from ..models.enums import WorkflowStatus
from ..models.group import Group
from ..models.membership import Membership
from ..models.user import User
from ..schemas.group import MembershipView
from .groups import get_group
from .users import get_user_by_username

logger = logging.getLogger(__name__)


def get_membership(db: Session, user_id: int, group_id: int) -> Membership:
    membership = db.get(Membership, (user_id, group_id))
    if membership is None:
        raise NotFoundError(
            "User does not have access to the group",
            details={"user_id": user_id, "group_id": group_id},
        )
    return membership


def add_member(db: Session, username: str, group_id: int, caller: User) -> Membership:
    """Tag ``username`` to the group on behalf of one of its leaders."""
    get_group(db, group_id)

    caller_membership = db.get(Membership, (caller.id, group_id))
    if (
        caller_membership is None
        or not caller_membership.is_leader
        or caller_membership.workflow_status != WorkflowStatus.APPROVED
    ):
        raise UnauthorizedError("You do not have sufficient privileges to add users to the group")

    try:
        user = get_user_by_username(db, username)
    except NotFoundError:
        logger.error(f"Invalid username - {username}")
        raise NotFoundError("Invalid username provided")

    if db.get(Membership, (user.id, group_id)) is not None:
        raise ConflictError(
            "The user is already tagged to the group",
            details={"user_id": user.id, "group_id": group_id},
        )

    membership = Membership(
        user_id=user.id,
        group_id=group_id,
        created_by=caller.id,
        is_leader=False,
        workflow_status=WorkflowStatus.APPROVED,
    )
    db.add(membership)
    try:
        db.commit()
    except IntegrityError as e:
        # Lost a race with another insert of the same pair
        db.rollback()
        logger.error(f"Unable to insert user {user.id} into group {group_id}. Err: {e}")
        raise ConflictError("Unable to process the request")
    db.refresh(membership)

    logger.info(f"User {user.id} added to group {group_id} by {caller.id}")
    return membership


def request_lead_access(db: Session, user_id: int, group_id: int) -> Membership:
    """Turn the caller's Approved, non-leader membership into a pending leader request.

    ``is_leader`` is set straight away; it only takes effect once the row is
    Approved again.
    """
    membership = get_membership(db, user_id, group_id)
    if membership.workflow_status != WorkflowStatus.APPROVED:
        raise ConflictError(
            "A request for group leader access is already pending",
            details={"user_id": user_id, "group_id": group_id},
        )
    if membership.is_leader:
        # Group creators and approved leaders already hold the role
        raise ConflictError(
            "The user is already a leader of the group",
            details={"user_id": user_id, "group_id": group_id},
        )

    membership.workflow_status = WorkflowStatus.PENDING
    membership.is_leader = True
    membership.updated_at = datetime.utcnow()
    db.add(membership)
    commit_or_raise(
        db,
        "Unable to perform the action at the moment",
        f"Unable to update the user-group mapping ({user_id}, {group_id})",
    )
    db.refresh(membership)

    logger.info(f"User {user_id} requested leader access to group {group_id}")
    return membership


def approve_or_reject_membership(
    db: Session, user_id: int, group_id: int, approve: bool
) -> Membership:
    """Admin decision on a leader access request. The caller is an admin."""
    group = get_group(db, group_id)

    if group.created_by == user_id:
        # The creator's own row is settled through the group request
        raise ConflictError(
            "This request is associated with new group. Please check the 'Create Group' requests",
            details={"user_id": user_id, "group_id": group_id},
        )

    membership = db.get(Membership, (user_id, group_id))
    if membership is None:
        raise NotFoundError(f"The given user does not have access to group '{group.name}'")

    if membership.workflow_status != WorkflowStatus.PENDING:
        raise ConflictError(
            "The group access request has already been processed",
            details={"user_id": user_id, "group_id": group_id},
        )

    if approve:
        membership.workflow_status = WorkflowStatus.APPROVED
    elif membership.is_leader:
        # Demote back to an ordinary member instead of removing access
        membership.workflow_status = WorkflowStatus.APPROVED
        membership.is_leader = False
    else:
        return membership

    membership.updated_at = datetime.utcnow()
    db.add(membership)
    commit_or_raise(
        db,
        "Unable to perform the action at the moment",
        f"Unable to update the user-group mapping ({user_id}, {group_id})",
    )
    db.refresh(membership)

    logger.info(
        f"Leader access for user {user_id} in group {group_id} "
        f"{'approved' if approve else 'rejected'}"
    )
    return membership


def list_memberships_pending_approval(db: Session) -> list[MembershipView]:
    """Pending leader requests, leaving out rows owned by a group's creator."""
    member = aliased(User)
    creator = aliased(User)
    rows = db.exec(
        select(Membership, member, creator, Group)
        .join(member, member.id == Membership.user_id)
        .join(creator, creator.id == Membership.created_by)
        .join(Group, Group.id == Membership.group_id)
        .where(
            Membership.workflow_status == WorkflowStatus.PENDING,
            Group.created_by != Membership.user_id,
        )
        .order_by(Membership.updated_at)
    ).all()
    return [
        MembershipView.from_models(m, u, c, group_name=g.name)
        for m, u, c, g in rows
    ]
