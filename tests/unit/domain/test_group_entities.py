"""Unit tests for group membership entities."""

from uuid import uuid4

from domain.entities.group import (
    Group,
    GroupMember,
    GroupRole,
    MembershipStatus,
    initial_status_for,
    membership_state,
    outranks,
)


def _group(**kwargs) -> Group:
    return Group(name="Trail Runners", owner_id=uuid4(), **kwargs)


class TestGroup:
    def test_is_full_at_capacity(self):
        assert _group(member_count=5, max_members=5).is_full

    def test_not_full_below_capacity(self):
        assert not _group(member_count=4, max_members=5).is_full

    def test_public_group_admits_immediately(self):
        assert initial_status_for(_group(is_public=True)) == MembershipStatus.ACTIVE

    def test_private_group_needs_approval(self):
        assert initial_status_for(_group(is_public=False)) == MembershipStatus.PENDING


class TestMembershipState:
    def test_missing_row_is_none(self):
        assert membership_state(None) == MembershipStatus.NONE

    def test_row_status_is_returned(self):
        member = GroupMember(group_id=uuid4(), user_id=uuid4(), status=MembershipStatus.BANNED)

        assert membership_state(member) == MembershipStatus.BANNED

    def test_only_active_rows_are_counted(self):
        counted = {
            status
            for status in (MembershipStatus.PENDING, MembershipStatus.ACTIVE, MembershipStatus.BANNED)
            if GroupMember(group_id=uuid4(), user_id=uuid4(), status=status).is_counted
        }

        assert counted == {MembershipStatus.ACTIVE}


class TestOutranks:
    def test_higher_role_outranks_lower(self):
        assert outranks(GroupRole.ADMIN, GroupRole.MODERATOR)
        assert outranks(GroupRole.MODERATOR, GroupRole.MEMBER)

    def test_equal_roles_do_not_outrank(self):
        assert not outranks(GroupRole.MODERATOR, GroupRole.MODERATOR)
        assert not outranks(GroupRole.ADMIN, GroupRole.ADMIN)

    def test_lower_role_does_not_outrank_higher(self):
        assert not outranks(GroupRole.MODERATOR, GroupRole.ADMIN)
