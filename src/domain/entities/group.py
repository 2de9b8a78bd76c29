"""Group and membership domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4


class MembershipStatus(str, Enum):
    """Lifecycle state of a user's membership in a group.

    ``NONE`` is never stored; it stands for "no membership row".
    """

    NONE = "NONE"
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    BANNED = "BANNED"


class GroupRole(str, Enum):
    """Role within a group."""

    MEMBER = "MEMBER"
    MODERATOR = "MODERATOR"
    ADMIN = "ADMIN"


MANAGER_ROLES = frozenset({GroupRole.MODERATOR, GroupRole.ADMIN})

ROLE_RANK = {GroupRole.MEMBER: 0, GroupRole.MODERATOR: 1, GroupRole.ADMIN: 2}


def outranks(actor: GroupRole, target: GroupRole) -> bool:
    """True when ``actor`` sits strictly above ``target``."""
    return ROLE_RANK[actor] > ROLE_RANK[target]


@dataclass
class Group:
    """Domain entity for a community group."""

    name: str
    owner_id: UUID
    id: UUID = field(default_factory=uuid4)
    is_public: bool = True
    is_active: bool = True
    member_count: int = 0
    max_members: int = 100
    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_full(self) -> bool:
        return self.member_count >= self.max_members


@dataclass
class GroupMember:
    """Domain entity for a group membership."""

    group_id: UUID
    user_id: UUID
    status: MembershipStatus = MembershipStatus.PENDING
    role: GroupRole = GroupRole.MEMBER
    joined_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_counted(self) -> bool:
        """Only ACTIVE memberships contribute to ``Group.member_count``."""
        return self.status == MembershipStatus.ACTIVE


def membership_state(member: GroupMember | None) -> MembershipStatus:
    """Map an optional membership row to its explicit state."""
    if member is None:
        return MembershipStatus.NONE
    return member.status


def initial_status_for(group: Group) -> MembershipStatus:
    """Public groups admit immediately; private groups need approval."""
    return MembershipStatus.ACTIVE if group.is_public else MembershipStatus.PENDING


@dataclass
class JoinResult:
    """Outcome of a successful join."""

    status: MembershipStatus
    message: str


@dataclass
class MembershipView:
    """The caller's relationship to a group."""

    group_id: UUID
    status: MembershipStatus
    role: GroupRole | None = None
    is_owner: bool = False
