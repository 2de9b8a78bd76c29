"""Group membership service: join, leave and moderation of memberships."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Callable, List, Optional
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from core.exceptions import (
    AlreadyAGroupMemberError,
    AuthenticationError,
    BannedFromGroupError,
    GroupCapacityExceededError,
    GroupInactiveError,
    GroupMemberNotFoundError,
    GroupNotFoundError,
    InsufficientPermissionsError,
    MembershipNotPendingError,
    MembershipRequestPendingError,
    NotAGroupMemberError,
    StoreUnavailableError,
)
from domain.entities.group import (
    MANAGER_ROLES,
    Group,
    GroupMember,
    GroupRole,
    JoinResult,
    MembershipStatus,
    MembershipView,
    initial_status_for,
    membership_state,
    outranks,
)
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.group_cache import IGroupCache, NullGroupCache

logger = structlog.get_logger()

JOINED_MESSAGE = "Successfully joined the group!"
REQUEST_SENT_MESSAGE = "Join request sent! Waiting for approval."
LEFT_MESSAGE = "Successfully left the group"
APPROVED_MESSAGE = "Member approved"
REMOVED_MESSAGE = "Member removed"


def _is_unique_violation(exc: IntegrityError) -> bool:
    orig = str(exc.orig).lower() if exc.orig else ""
    return "unique" in orig or "duplicate" in orig


def _role_above(role: GroupRole) -> str:
    return "owner" if role == GroupRole.ADMIN else "admin"


class GroupService:
    """Service layer for group membership.

    Every mutation runs inside one unit of work: the state read, the
    membership write and the ``member_count`` adjustment commit together or
    not at all. Capacity is enforced by a conditional UPDATE on the group row,
    so concurrent joins cannot push ``member_count`` past ``max_members``.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        cache: Optional[IGroupCache] = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._cache = cache or NullGroupCache()

    async def join(self, group_id: UUID, user_id: Optional[UUID]) -> JoinResult:
        """Join a group, or request to join a private one.

        Raises:
            AuthenticationError: no caller identity.
            GroupNotFoundError / GroupInactiveError: group unusable.
            GroupCapacityExceededError: no free seat, checked up front and
                again by the guarded increment.
            AlreadyAGroupMemberError / MembershipRequestPendingError /
                BannedFromGroupError: the caller already holds a row.
            StoreUnavailableError: unexpected datastore failure.
        """
        if user_id is None:
            raise AuthenticationError()

        async with self._transaction("join", group_id, user_id) as uow:
            group = await self._get_group(uow, group_id)
            if not group.is_active:
                raise GroupInactiveError(str(group_id))
            if group.is_full:
                raise GroupCapacityExceededError(str(group_id), group.max_members)

            existing = await uow.groups.get_member(group_id, user_id)
            self._reject_existing(membership_state(existing), user_id)

            status = initial_status_for(group)
            try:
                await uow.groups.add_member(
                    GroupMember(group_id=group_id, user_id=user_id, status=status)
                )
            except IntegrityError as exc:
                # A concurrent join for the same user won the insert.
                if _is_unique_violation(exc):
                    raise AlreadyAGroupMemberError(str(user_id)) from exc
                raise

            if status == MembershipStatus.ACTIVE:
                if not await uow.groups.increment_member_count(group_id):
                    raise GroupCapacityExceededError(str(group_id), group.max_members)

            await uow.commit()

        logger.info(
            "group_joined",
            group_id=str(group_id),
            user_id=str(user_id),
            status=status.value,
        )
        await self._invalidate(group_id)

        message = JOINED_MESSAGE if status == MembershipStatus.ACTIVE else REQUEST_SENT_MESSAGE
        return JoinResult(status=status, message=message)

    async def leave(self, group_id: UUID, user_id: Optional[UUID]) -> str:
        """Leave a group, withdrawing a pending request if that is all there is.

        Leaving twice fails the second time with NotAGroupMemberError.
        """
        if user_id is None:
            raise AuthenticationError()

        async with self._transaction("leave", group_id, user_id) as uow:
            member = await uow.groups.get_member(group_id, user_id, for_update=True)
            if member is None:
                raise NotAGroupMemberError(str(group_id))

            await self._delete_membership(uow, member, NotAGroupMemberError(str(group_id)))
            await uow.commit()

        logger.info(
            "group_left",
            group_id=str(group_id),
            user_id=str(user_id),
            previous_status=member.status.value,
        )
        await self._invalidate(group_id)
        return LEFT_MESSAGE

    async def get_membership(self, group_id: UUID, user_id: Optional[UUID]) -> MembershipView:
        """Describe the caller's membership in a group."""
        if user_id is None:
            raise AuthenticationError()

        async with self._uow_factory() as uow:
            group = await self._get_group(uow, group_id)
            member = await uow.groups.get_member(group_id, user_id)
            return MembershipView(
                group_id=group_id,
                status=membership_state(member),
                role=member.role if member else None,
                is_owner=group.owner_id == user_id,
            )

    async def list_members(
        self,
        group_id: UUID,
        user_id: UUID,
        status: Optional[MembershipStatus] = None,
    ) -> List[GroupMember]:
        """List memberships of a group. Requires owner, admin or moderator."""
        async with self._uow_factory() as uow:
            group = await self._get_group(uow, group_id)
            await self._require_manager(uow, group, user_id)
            return await uow.groups.get_members(group_id, status)

    async def approve_member(
        self, group_id: UUID, user_id: UUID, target_user_id: UUID
    ) -> GroupMember:
        """Promote a pending request to an active membership.

        Capacity is re-checked at approval time with the same guarded
        increment used by join.
        """
        async with self._transaction("approve", group_id, target_user_id) as uow:
            group = await self._get_group(uow, group_id)
            await self._require_manager(uow, group, user_id)

            target = await uow.groups.get_member(group_id, target_user_id, for_update=True)
            if target is None:
                raise GroupMemberNotFoundError(str(target_user_id))
            if target.status != MembershipStatus.PENDING:
                raise MembershipNotPendingError(str(target_user_id), target.status.value)

            if not await uow.groups.increment_member_count(group_id):
                raise GroupCapacityExceededError(str(group_id), group.max_members)
            approved = await uow.groups.update_member_status(
                group_id, target_user_id, MembershipStatus.ACTIVE
            )
            await uow.commit()

        logger.info(
            "group_member_approved",
            group_id=str(group_id),
            user_id=str(target_user_id),
            approved_by=str(user_id),
        )
        await self._invalidate(group_id)
        return approved

    async def remove_member(
        self, group_id: UUID, user_id: UUID, target_user_id: UUID
    ) -> None:
        """Reject a pending request or remove a member.

        The group owner cannot be removed. Admins and moderators may only
        remove members ranked below them; the owner may remove anyone.
        """
        async with self._transaction("remove", group_id, target_user_id) as uow:
            group = await self._get_group(uow, group_id)
            actor_role = await self._require_manager(uow, group, user_id)
            if target_user_id == group.owner_id:
                raise InsufficientPermissionsError("owner")

            target = await uow.groups.get_member(group_id, target_user_id, for_update=True)
            if target is None:
                raise GroupMemberNotFoundError(str(target_user_id))
            if actor_role is not None and not outranks(actor_role, target.role):
                raise InsufficientPermissionsError(_role_above(target.role))

            await self._delete_membership(
                uow, target, GroupMemberNotFoundError(str(target_user_id))
            )
            await uow.commit()

        logger.info(
            "group_member_removed",
            group_id=str(group_id),
            user_id=str(target_user_id),
            removed_by=str(user_id),
            previous_status=target.status.value,
        )
        await self._invalidate(group_id)

    # --- Internal helpers ---

    @asynccontextmanager
    async def _transaction(
        self, operation: str, group_id: UUID, user_id: UUID
    ) -> AsyncIterator[IUnitOfWork]:
        """Open a unit of work and hide datastore failures behind a retryable error."""
        try:
            async with self._uow_factory() as uow:
                yield uow
        except SQLAlchemyError as exc:
            logger.exception(
                "membership_store_failure",
                operation=operation,
                group_id=str(group_id),
                user_id=str(user_id),
            )
            raise StoreUnavailableError() from exc

    async def _get_group(self, uow: IUnitOfWork, group_id: UUID) -> Group:
        group = await uow.groups.get(group_id)
        if not group:
            raise GroupNotFoundError(str(group_id))
        return group

    @staticmethod
    def _reject_existing(state: MembershipStatus, user_id: UUID) -> None:
        if state == MembershipStatus.ACTIVE:
            raise AlreadyAGroupMemberError(str(user_id))
        if state == MembershipStatus.PENDING:
            raise MembershipRequestPendingError(str(user_id))
        if state == MembershipStatus.BANNED:
            raise BannedFromGroupError(str(user_id))

    async def _delete_membership(
        self, uow: IUnitOfWork, member: GroupMember, missing: Exception
    ) -> None:
        """Delete a row and release its seat if it held one."""
        if not await uow.groups.remove_member(member.group_id, member.user_id):
            # Someone else deleted the row between our read and delete.
            raise missing
        if member.is_counted:
            await uow.groups.decrement_member_count(member.group_id)

    async def _require_manager(
        self, uow: IUnitOfWork, group: Group, user_id: UUID
    ) -> GroupRole | None:
        """Verify the user owns the group or is an active admin/moderator.

        Returns the caller's role, or None for the owner.
        """
        if group.owner_id == user_id:
            return None
        member = await uow.groups.get_member(group.id, user_id)
        if (
            member
            and member.status == MembershipStatus.ACTIVE
            and member.role in MANAGER_ROLES
        ):
            return member.role
        raise InsufficientPermissionsError("moderator")

    async def _invalidate(self, group_id: UUID) -> None:
        try:
            await self._cache.invalidate(group_id)
        except Exception:
            logger.warning("group_cache_invalidation_failed", group_id=str(group_id), exc_info=True)
