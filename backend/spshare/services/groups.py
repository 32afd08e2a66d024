import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import aliased
from sqlmodel import Session, select

from ..core.config import settings
from ..core.database import commit_or_raise
from ..core.exceptions import ConflictError, NotFoundError, UnauthorizedError
from ..models.enums import WorkflowStatus
from ..models.group import Group
from ..models.membership import Membership
from ..models.user import User
from ..schemas.group import GroupDetails, GroupView, MembershipView

logger = logging.getLogger(__name__)


def get_group(db: Session, group_id: int) -> Group:
    group = db.get(Group, group_id)
    if group is None:
        raise NotFoundError("The group does not exist", details={"group_id": group_id})
    return group


def create_group(db: Session, name: str, creator: User) -> Group:
    """Create a Pending group and enrol its creator as an Approved leader.

    The two inserts are committed separately; a failure between them leaves
    a group without a leader.
    """
    group = Group(
        name=name,
        created_by=creator.id,
        workflow_status=WorkflowStatus.PENDING,
        max_item_count=settings.GROUP_MAX_ALLOWED_ITEMS,
        max_item_space=settings.GROUP_MAX_ALLOWED_SPACE,
    )

    db.add(group)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.error(f"Unable to insert group '{name}' into database. Err: {e}")
        raise ConflictError("Unable to create user group at the moment")
    db.refresh(group)

    # Add creator as leader
    membership = Membership(
        user_id=creator.id,
        group_id=group.id,
        created_by=creator.id,
        is_leader=True,
        workflow_status=WorkflowStatus.APPROVED,
    )
    db.add(membership)
    commit_or_raise(
        db,
        "Unable to process the request",
        f"Unable to insert leader mapping for group {group.id}",
    )

    logger.info(f"Group {group.id} ('{name}') created by user {creator.id}, pending approval")
    return group


def approve_or_reject_group(db: Session, group_id: int, approve: bool) -> Group:
    """Move a Pending group to Approved or Rejected. The caller is an admin."""
    group = get_group(db, group_id)
    if group.workflow_status != WorkflowStatus.PENDING:
        raise ConflictError(
            f"The group request is already {group.workflow_status.label.lower()}",
            details={"group_id": group_id},
        )

    group.workflow_status = WorkflowStatus.APPROVED if approve else WorkflowStatus.REJECTED
    group.updated_at = datetime.utcnow()
    db.add(group)
    commit_or_raise(
        db,
        "Unable to perform the action at the moment",
        f"Unable to update the workflow status of group {group_id}",
    )
    db.refresh(group)

    logger.info(f"Group {group_id} {group.workflow_status.label.lower()}")
    return group


def list_groups_pending_approval(db: Session) -> list[GroupView]:
    rows = db.exec(
        select(Group, User)
        .join(User, User.id == Group.created_by)
        .where(Group.workflow_status == WorkflowStatus.PENDING)
        .order_by(Group.created_at)
    ).all()
    return [GroupView.from_models(group, creator, is_leader=False) for group, creator in rows]


def list_groups_for_user(db: Session, user: User) -> list[GroupView]:
    """Groups the user belongs to (any status); admins see every group."""
    if user.is_admin:
        rows = db.exec(
            select(Group, User).join(User, User.id == Group.created_by).order_by(Group.name)
        ).all()
        return [GroupView.from_models(group, creator, is_leader=True) for group, creator in rows]

    rows = db.exec(
        select(Group, User, Membership)
        .join(Membership, Membership.group_id == Group.id)
        .join(User, User.id == Group.created_by)
        .where(Membership.user_id == user.id)
        .order_by(Group.name)
    ).all()
    return [
        GroupView.from_models(group, creator, is_leader=membership.is_leader)
        for group, creator, membership in rows
    ]


def list_accessible_groups(db: Session, user: User) -> list[Group]:
    """Approved groups the user may upload to and view items of."""
    query = select(Group).where(Group.workflow_status == WorkflowStatus.APPROVED)
    if not user.is_admin:
        query = query.join(Membership, Membership.group_id == Group.id).where(
            Membership.user_id == user.id
        )
    return list(db.exec(query.order_by(Group.name)).all())


def ensure_group_access(db: Session, user: User, group_id: int) -> Group:
    """Return the group if it is Approved and the user may use it."""
    group = db.get(Group, group_id)
    if group is None or group.workflow_status != WorkflowStatus.APPROVED:
        raise UnauthorizedError("Unauthorized! You do not have enough permissions to view the content")

    if user.is_admin:
        return group

    membership = db.get(Membership, (user.id, group_id))
    if membership is None:
        raise UnauthorizedError("Unauthorized! You do not have enough permissions to view the content")
    return group


def list_group_memberships(db: Session, group_id: int) -> list[MembershipView]:
    member = aliased(User)
    creator = aliased(User)
    rows = db.exec(
        select(Membership, member, creator)
        .join(member, member.id == Membership.user_id)
        .join(creator, creator.id == Membership.created_by)
        .where(Membership.group_id == group_id)
        .order_by(member.first_name, member.last_name)
    ).all()
    return [MembershipView.from_models(m, u, c) for m, u, c in rows]


def get_group_details(db: Session, user: User, group_id: int) -> GroupDetails:
    """Group, the caller's leader flag and every tagged user."""
    group = db.get(Group, group_id)
    membership: Optional[Membership] = None
    if group is not None and not user.is_admin:
        membership = db.get(Membership, (user.id, group_id))

    if group is None or (not user.is_admin and membership is None):
        logger.error(f"Unable to get details of group {group_id} for user {user.id}")
        raise NotFoundError("The group does not exist", details={"group_id": group_id})

    if user.is_admin:
        is_leader = True
        membership_status = WorkflowStatus.APPROVED
    else:
        membership_status = membership.workflow_status
        # A pending leadership request grants nothing yet
        is_leader = membership.is_leader and membership_status == WorkflowStatus.APPROVED

    creator = db.get(User, group.created_by)
    return GroupDetails(
        id=group.id,
        name=group.name,
        created_by=group.created_by,
        created_by_name=creator.full_name if creator else "",
        workflow_status=group.workflow_status,
        created_at=group.created_at,
        max_item_count=group.max_item_count,
        max_item_space=group.max_item_space,
        is_leader=is_leader,
        membership_status=membership_status,
        tagged_users=list_group_memberships(db, group_id),
    )
