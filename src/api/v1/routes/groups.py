"""Group membership API routes."""

from collections.abc import Awaitable
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, Query, Request, Response, status

from api.dependencies.auth import CurrentUser, OptionalUser
from api.v1.dependencies import get_group_service
from api.v1.schemas.common import ActionResponse
from api.v1.schemas.group import (
    GroupMemberListResponse,
    GroupMemberResponse,
    MembershipResponse,
)
from core.exceptions import AppException
from core.rate_limit import limiter
from domain.entities.group import GroupMember, MembershipStatus
from domain.services.group_service import APPROVED_MESSAGE, GroupService

logger = structlog.get_logger()

router = APIRouter(
    prefix="/groups/{group_id}",
    tags=["groups"],
)

_ACTION_RESPONSES = {
    401: {"description": "Authentication required"},
    404: {"description": "Group or membership not found"},
    409: {"description": "Membership conflict or group full"},
    503: {"description": "Temporary datastore failure"},
}


async def _run_action(
    response: Response, action: Awaitable[ActionResponse]
) -> ActionResponse:
    """Turn expected failures into ``{success: false, error}`` payloads."""
    try:
        return await action
    except AppException as exc:
        logger.info(
            "group_action_rejected",
            error_code=exc.error_code.value,
            status_code=exc.status_code,
        )
        response.status_code = exc.status_code
        return ActionResponse(success=False, error=exc.message)


@router.post(
    "/join",
    response_model=ActionResponse,
    response_model_exclude_none=True,
    summary="Join a group",
    responses=_ACTION_RESPONSES,
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def join_group(
    request: Request,
    response: Response,
    group_id: UUID,
    user: OptionalUser,
    service: GroupService = Depends(get_group_service),
) -> ActionResponse:
    """Join a public group, or send a join request to a private one."""

    async def action() -> ActionResponse:
        result = await service.join(group_id, user.id if user else None)
        return ActionResponse(success=True, message=result.message, status=result.status.value)

    return await _run_action(response, action())


@router.post(
    "/leave",
    response_model=ActionResponse,
    response_model_exclude_none=True,
    summary="Leave a group",
    responses=_ACTION_RESPONSES,
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def leave_group(
    request: Request,
    response: Response,
    group_id: UUID,
    user: OptionalUser,
    service: GroupService = Depends(get_group_service),
) -> ActionResponse:
    """Leave a group or withdraw a pending join request."""

    async def action() -> ActionResponse:
        message = await service.leave(group_id, user.id if user else None)
        return ActionResponse(success=True, message=message)

    return await _run_action(response, action())


@router.get(
    "/membership",
    response_model=MembershipResponse,
    summary="Get my membership",
    responses={
        200: {"description": "Caller's membership status"},
        401: {"description": "Authentication required"},
        404: {"description": "Group not found"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_membership(
    request: Request,
    group_id: UUID,
    user: CurrentUser,
    service: GroupService = Depends(get_group_service),
) -> MembershipResponse:
    """Return the caller's membership status (NONE when not a member)."""
    view = await service.get_membership(group_id, user.id)
    return MembershipResponse(
        group_id=view.group_id,
        status=view.status.value,
        role=view.role.value if view.role else None,
        is_owner=view.is_owner,
    )


# --- Moderation ---


@router.get(
    "/members",
    response_model=GroupMemberListResponse,
    summary="List group members",
    responses={
        200: {"description": "Memberships of the group"},
        403: {"description": "Owner, admin or moderator only"},
        404: {"description": "Group not found"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_group_members(
    request: Request,
    group_id: UUID,
    user: CurrentUser,
    status_filter: MembershipStatus | None = Query(None, alias="status"),
    service: GroupService = Depends(get_group_service),
) -> GroupMemberListResponse:
    """List memberships, optionally only those with a given status."""
    members = await service.list_members(group_id, user.id, status_filter)
    data = [_build_member_response(m) for m in members]
    return GroupMemberListResponse(data=data, meta={"total": len(data)})


@router.post(
    "/members/{member_user_id}/approve",
    response_model=ActionResponse,
    response_model_exclude_none=True,
    summary="Approve a join request",
    responses={
        **_ACTION_RESPONSES,
        403: {"description": "Owner, admin or moderator only"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def approve_group_member(
    request: Request,
    response: Response,
    group_id: UUID,
    member_user_id: UUID,
    user: CurrentUser,
    service: GroupService = Depends(get_group_service),
) -> ActionResponse:
    """Approve a pending membership, if the group still has room."""

    async def action() -> ActionResponse:
        member = await service.approve_member(group_id, user.id, member_user_id)
        return ActionResponse(success=True, message=APPROVED_MESSAGE, status=member.status.value)

    return await _run_action(response, action())


@router.delete(
    "/members/{member_user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Reject or remove a member",
    responses={
        204: {"description": "Membership removed"},
        403: {"description": "Owner, admin or moderator only"},
        404: {"description": "Group or member not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def remove_group_member(
    request: Request,
    group_id: UUID,
    member_user_id: UUID,
    user: CurrentUser,
    service: GroupService = Depends(get_group_service),
) -> None:
    """Reject a pending request or remove an existing member."""
    await service.remove_member(group_id, user.id, member_user_id)
    return None


def _build_member_response(member: GroupMember) -> GroupMemberResponse:
    """Convert domain entity to response schema."""
    return GroupMemberResponse(
        user_id=member.user_id,
        status=member.status.value,
        role=member.role.value,
        joined_at=member.joined_at,
    )
