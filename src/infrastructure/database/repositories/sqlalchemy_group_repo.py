"""SQLAlchemy implementation of Group repository."""

from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.group import Group, GroupMember, GroupRole, MembershipStatus
from infrastructure.database.models import GroupMemberModel, GroupModel


class SQLAlchemyGroupRepository:
    """SQLAlchemy implementation of IGroupRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Group | None:
        """Get a group by ID."""
        stmt = select(GroupModel).where(GroupModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_member(
        self, group_id: UUID, user_id: UUID, for_update: bool = False
    ) -> GroupMember | None:
        """Get a specific membership, locking the row when asked."""
        stmt = select(GroupMemberModel).where(
            GroupMemberModel.group_id == group_id,
            GroupMemberModel.user_id == user_id,
        )
        if for_update:
            stmt = stmt.with_for_update()
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._member_to_entity(model) if model else None

    async def get_members(
        self, group_id: UUID, status: MembershipStatus | None = None
    ) -> list[GroupMember]:
        """Get memberships of a group, oldest first."""
        stmt = select(GroupMemberModel).where(GroupMemberModel.group_id == group_id)
        if status is not None:
            stmt = stmt.where(GroupMemberModel.status == status.value)
        stmt = stmt.order_by(GroupMemberModel.joined_at)
        result = await self._session.execute(stmt)
        return [self._member_to_entity(model) for model in result.scalars()]

    async def add_member(self, member: GroupMember) -> GroupMember:
        """Insert a membership; flushes so key conflicts surface here."""
        model = self._member_to_model(member)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._member_to_entity(model)

    async def update_member_status(
        self, group_id: UUID, user_id: UUID, status: MembershipStatus
    ) -> GroupMember:
        """Change a membership's status."""
        stmt = select(GroupMemberModel).where(
            GroupMemberModel.group_id == group_id,
            GroupMemberModel.user_id == user_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError("Group member not found")

        model.status = status.value
        await self._session.flush()
        return self._member_to_entity(model)

    async def remove_member(self, group_id: UUID, user_id: UUID) -> bool:
        """Delete a membership row."""
        stmt = (
            delete(GroupMemberModel)
            .where(
                GroupMemberModel.group_id == group_id,
                GroupMemberModel.user_id == user_id,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1

    async def increment_member_count(self, group_id: UUID) -> bool:
        """Take a seat: single UPDATE guarded by the capacity predicate."""
        stmt = (
            update(GroupModel)
            .where(
                GroupModel.id == group_id,
                GroupModel.member_count < GroupModel.max_members,
            )
            .values(member_count=GroupModel.member_count + 1)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1

    async def decrement_member_count(self, group_id: UUID) -> bool:
        """Release a seat, floored at zero."""
        stmt = (
            update(GroupModel)
            .where(
                GroupModel.id == group_id,
                GroupModel.member_count > 0,
            )
            .values(member_count=GroupModel.member_count - 1)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1

    async def count_members(
        self, group_id: UUID, status: MembershipStatus | None = None
    ) -> int:
        """Count memberships in a group."""
        stmt = (
            select(func.count())
            .select_from(GroupMemberModel)
            .where(GroupMemberModel.group_id == group_id)
        )
        if status is not None:
            stmt = stmt.where(GroupMemberModel.status == status.value)
        result = await self._session.execute(stmt)
        return result.scalar_one()

    def _to_entity(self, model: GroupModel) -> Group:
        """Convert ORM model to domain entity."""
        return Group(
            id=model.id,
            name=model.name,
            owner_id=model.owner_id,
            is_public=model.is_public,
            is_active=model.is_active,
            member_count=model.member_count,
            max_members=model.max_members,
            created_at=model.created_at,
        )

    def _member_to_entity(self, model: GroupMemberModel) -> GroupMember:
        """Convert member ORM model to domain entity."""
        return GroupMember(
            group_id=model.group_id,
            user_id=model.user_id,
            status=MembershipStatus(model.status),
            role=GroupRole(model.role),
            joined_at=model.joined_at,
        )

    def _member_to_model(self, entity: GroupMember) -> GroupMemberModel:
        """Convert member domain entity to ORM model."""
        return GroupMemberModel(
            group_id=entity.group_id,
            user_id=entity.user_id,
            status=entity.status.value,
            role=entity.role.value,
            joined_at=entity.joined_at,
        )
