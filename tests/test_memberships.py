"""
Tests for tagging users to groups and the group-leader access workflow.
"""

import pytest

from spshare.core.exceptions import ConflictError, NotFoundError, UnauthorizedError
from spshare.models import Membership, WorkflowStatus
from spshare.services.memberships import (
    add_member,
    approve_or_reject_membership,
    list_memberships_pending_approval,
    request_lead_access,
)


@pytest.fixture
def bob_in_hikers(db, alice, bob, hikers):
    return add_member(db, bob.username, hikers.id, alice)


class TestAddMember:
    """Test leaders adding members."""

    def test_leader_adds_member(self, db, alice, bob, hikers):
        membership = add_member(db, "BOB", hikers.id, alice)

        assert membership.user_id == bob.id
        assert membership.created_by == alice.id
        assert not membership.is_leader
        assert membership.workflow_status == WorkflowStatus.APPROVED

    def test_non_leader_cannot_add(self, db, bob, make_user, hikers, bob_in_hikers):
        carol = make_user("carol")

        with pytest.raises(UnauthorizedError):
            add_member(db, carol.username, hikers.id, bob)

    def test_pending_leader_cannot_add(self, db, bob, make_user, hikers, bob_in_hikers):
        carol = make_user("carol")
        request_lead_access(db, bob.id, hikers.id)

        with pytest.raises(UnauthorizedError):
            add_member(db, carol.username, hikers.id, bob)

    def test_unknown_username(self, db, alice, hikers):
        with pytest.raises(NotFoundError) as exc_info:
            add_member(db, "nobody", hikers.id, alice)
        assert exc_info.value.message == "Invalid username provided"

    def test_unknown_group(self, db, alice, bob):
        with pytest.raises(NotFoundError):
            add_member(db, bob.username, 404, alice)

    def test_already_tagged(self, db, alice, bob, hikers, bob_in_hikers):
        with pytest.raises(ConflictError):
            add_member(db, bob.username, hikers.id, alice)


class TestLeaderRequests:
    """Test requesting, approving and rejecting group-leader access."""

    def test_request_marks_row_pending_leader(self, db, bob, hikers, bob_in_hikers):
        membership = request_lead_access(db, bob.id, hikers.id)

        assert membership.is_leader
        assert membership.workflow_status == WorkflowStatus.PENDING

    def test_request_twice(self, db, bob, hikers, bob_in_hikers):
        request_lead_access(db, bob.id, hikers.id)

        with pytest.raises(ConflictError):
            request_lead_access(db, bob.id, hikers.id)

    def test_creator_cannot_request_leader_access(self, db, alice, bob, hikers):
        with pytest.raises(ConflictError):
            request_lead_access(db, alice.id, hikers.id)

        membership = db.get(Membership, (alice.id, hikers.id))
        assert membership.is_leader
        assert membership.workflow_status == WorkflowStatus.APPROVED
        assert add_member(db, bob.username, hikers.id, alice).user_id == bob.id

    def test_approved_leader_cannot_request_again(self, db, bob, hikers, bob_in_hikers):
        request_lead_access(db, bob.id, hikers.id)
        approve_or_reject_membership(db, bob.id, hikers.id, approve=True)

        with pytest.raises(ConflictError):
            request_lead_access(db, bob.id, hikers.id)

    def test_request_without_membership(self, db, bob, hikers):
        with pytest.raises(NotFoundError):
            request_lead_access(db, bob.id, hikers.id)

    def test_approve(self, db, bob, hikers, bob_in_hikers):
        request_lead_access(db, bob.id, hikers.id)

        membership = approve_or_reject_membership(db, bob.id, hikers.id, approve=True)
        assert membership.is_leader
        assert membership.workflow_status == WorkflowStatus.APPROVED

    def test_reject_demotes_to_member(self, db, bob, hikers, bob_in_hikers):
        request_lead_access(db, bob.id, hikers.id)

        membership = approve_or_reject_membership(db, bob.id, hikers.id, approve=False)
        assert not membership.is_leader
        assert membership.workflow_status == WorkflowStatus.APPROVED

    def test_processed_request(self, db, bob, hikers, bob_in_hikers):
        with pytest.raises(ConflictError):
            approve_or_reject_membership(db, bob.id, hikers.id, approve=True)

    @pytest.mark.parametrize("approve", [True, False])
    def test_creator_row_is_settled_with_group(self, db, alice, hikers, approve):
        with pytest.raises(ConflictError) as exc_info:
            approve_or_reject_membership(db, alice.id, hikers.id, approve=approve)
        assert "'Create Group'" in exc_info.value.message

    def test_missing_row(self, db, bob, hikers):
        with pytest.raises(NotFoundError):
            approve_or_reject_membership(db, bob.id, hikers.id, approve=True)

    def test_pending_list_skips_group_creators(self, db, alice, bob, hikers, bob_in_hikers):
        request_lead_access(db, bob.id, hikers.id)

        creator_row = db.get(Membership, (alice.id, hikers.id))
        creator_row.workflow_status = WorkflowStatus.PENDING
        db.add(creator_row)
        db.commit()

        pending = list_memberships_pending_approval(db)
        assert [(m.username, m.group_name) for m in pending] == [("bob", "Hikers")]
        assert pending[0].created_by_name == "Alice Tester"
