"""
Tests for group creation, approval and access rules.
"""

import pytest

from spshare.core.exceptions import ConflictError, NotFoundError, UnauthorizedError
from spshare.models import Membership, WorkflowStatus
from spshare.services.groups import (
    approve_or_reject_group,
    create_group,
    ensure_group_access,
    get_group_details,
    list_accessible_groups,
    list_groups_for_user,
    list_groups_pending_approval,
)
from spshare.services.memberships import add_member, request_lead_access


class TestCreateGroup:
    """Test group requests and their disposition."""

    def test_creator_becomes_approved_leader(self, db, alice):
        group = create_group(db, "Climbers", alice)

        assert group.workflow_status == WorkflowStatus.PENDING
        assert group.max_item_count == 100
        assert group.max_item_space == 500.0

        membership = db.get(Membership, (alice.id, group.id))
        assert membership.is_leader
        assert membership.workflow_status == WorkflowStatus.APPROVED

    def test_duplicate_name(self, db, alice, bob):
        create_group(db, "Climbers", alice)

        with pytest.raises(ConflictError):
            create_group(db, "Climbers", bob)

    def test_pending_list_includes_creator_name(self, db, alice):
        create_group(db, "Climbers", alice)

        pending = list_groups_pending_approval(db)
        assert [g.name for g in pending] == ["Climbers"]
        assert pending[0].created_by_name == "Alice Tester"

    def test_approve(self, db, alice):
        group = create_group(db, "Climbers", alice)

        group = approve_or_reject_group(db, group.id, approve=True)
        assert group.workflow_status == WorkflowStatus.APPROVED
        assert list_groups_pending_approval(db) == []

    def test_reject(self, db, alice):
        group = create_group(db, "Climbers", alice)

        group = approve_or_reject_group(db, group.id, approve=False)
        assert group.workflow_status == WorkflowStatus.REJECTED

    def test_decision_only_once(self, db, alice):
        group = create_group(db, "Climbers", alice)
        approve_or_reject_group(db, group.id, approve=True)

        with pytest.raises(ConflictError):
            approve_or_reject_group(db, group.id, approve=False)

    def test_unknown_group(self, db):
        with pytest.raises(NotFoundError):
            approve_or_reject_group(db, 404, approve=True)


class TestGroupAccess:
    """Test who can see which group."""

    def test_member_has_access(self, db, alice, bob, hikers):
        add_member(db, bob.username, hikers.id, alice)

        assert ensure_group_access(db, bob, hikers.id).id == hikers.id

    def test_non_member_denied(self, db, bob, hikers):
        with pytest.raises(UnauthorizedError):
            ensure_group_access(db, bob, hikers.id)

    def test_admin_has_access_without_membership(self, db, admin, hikers):
        assert ensure_group_access(db, admin, hikers.id).id == hikers.id

    def test_pending_group_denied(self, db, alice, make_group):
        pending = make_group("Pending", alice, workflow_status=WorkflowStatus.PENDING)

        with pytest.raises(UnauthorizedError):
            ensure_group_access(db, alice, pending.id)

    def test_accessible_groups(self, db, admin, alice, bob, hikers, make_group):
        make_group("Pending", alice, workflow_status=WorkflowStatus.PENDING)
        make_group("Bobs", bob)

        assert [g.name for g in list_accessible_groups(db, alice)] == ["Hikers"]
        assert [g.name for g in list_accessible_groups(db, admin)] == ["Bobs", "Hikers"]


class TestGroupListing:
    """Test group listings and details."""

    def test_groups_for_member(self, db, alice, bob, hikers, make_group):
        make_group("Pending", alice, workflow_status=WorkflowStatus.PENDING)
        add_member(db, alice.username, make_group("Bobs", bob).id, bob)

        groups = {g.name: g for g in list_groups_for_user(db, alice)}
        assert set(groups) == {"Bobs", "Hikers", "Pending"}
        assert groups["Hikers"].is_leader
        assert not groups["Bobs"].is_leader

    def test_admin_sees_every_group_as_leader(self, db, admin, hikers):
        groups = list_groups_for_user(db, admin)

        assert [g.name for g in groups] == ["Hikers"]
        assert groups[0].is_leader

    def test_details_for_member(self, db, alice, bob, hikers):
        add_member(db, bob.username, hikers.id, alice)

        details = get_group_details(db, bob, hikers.id)
        assert details.name == "Hikers"
        assert details.created_by_name == "Alice Tester"
        assert not details.is_leader
        assert {m.username for m in details.tagged_users} == {"alice", "bob"}

    def test_details_hide_group_from_outsiders(self, db, bob, hikers):
        with pytest.raises(NotFoundError):
            get_group_details(db, bob, hikers.id)

    def test_pending_leader_request_grants_nothing(self, db, alice, bob, hikers):
        add_member(db, bob.username, hikers.id, alice)
        request_lead_access(db, bob.id, hikers.id)

        details = get_group_details(db, bob, hikers.id)
        assert not details.is_leader
        assert details.membership_status == WorkflowStatus.PENDING
