"""Group repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.group import Group, GroupMember, MembershipStatus


class IGroupRepository(Protocol):
    """Repository interface for Group and GroupMember entities."""

    async def get(self, id: UUID) -> Group | None:
        """Get a group by ID."""
        ...

    async def get_member(
        self, group_id: UUID, user_id: UUID, for_update: bool = False
    ) -> GroupMember | None:
        """Get a membership row, optionally locking it."""
        ...

    async def get_members(
        self, group_id: UUID, status: MembershipStatus | None = None
    ) -> list[GroupMember]:
        """Get memberships of a group, optionally filtered by status."""
        ...

    async def add_member(self, member: GroupMember) -> GroupMember:
        """Insert a membership row. Raises IntegrityError on a duplicate key."""
        ...

    async def update_member_status(
        self, group_id: UUID, user_id: UUID, status: MembershipStatus
    ) -> GroupMember:
        """Change a membership's status."""
        ...

    async def remove_member(self, group_id: UUID, user_id: UUID) -> bool:
        """Delete a membership row. False if no row was deleted."""
        ...

    async def increment_member_count(self, group_id: UUID) -> bool:
        """Add one to member_count unless the group is full.

        Returns False when the capacity guard rejected the update.
        """
        ...

    async def decrement_member_count(self, group_id: UUID) -> bool:
        """Subtract one from member_count, never going below zero."""
        ...

    async def count_members(
        self, group_id: UUID, status: MembershipStatus | None = None
    ) -> int:
        """Count memberships of a group, optionally filtered by status."""
        ...
