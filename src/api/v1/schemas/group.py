"""Pydantic schemas for Group membership API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class MembershipResponse(BaseModel):
    """The caller's membership in a group."""

    group_id: UUID
    status: str
    role: str | None = None
    is_owner: bool = False


class GroupMemberResponse(BaseModel):
    """Schema for Group Member response."""

    model_config = ConfigDict(from_attributes=True)

    user_id: UUID
    status: str
    role: str
    joined_at: datetime


class GroupMemberListResponse(BaseModel):
    """Schema for list of Group Members response."""

    data: list[GroupMemberResponse]
    meta: dict[str, Any] = Field(default_factory=dict)
