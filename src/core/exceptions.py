"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"

    # Authorization errors (403)
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"
    BANNED_FROM_GROUP = "BANNED_FROM_GROUP"

    # Not found errors (404)
    GROUP_NOT_FOUND = "GROUP_NOT_FOUND"
    GROUP_MEMBER_NOT_FOUND = "GROUP_MEMBER_NOT_FOUND"
    NOT_A_GROUP_MEMBER = "NOT_A_GROUP_MEMBER"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Conflict errors (409)
    GROUP_INACTIVE = "GROUP_INACTIVE"
    GROUP_FULL = "GROUP_FULL"
    ALREADY_A_GROUP_MEMBER = "ALREADY_A_GROUP_MEMBER"
    MEMBERSHIP_REQUEST_PENDING = "MEMBERSHIP_REQUEST_PENDING"
    MEMBERSHIP_NOT_PENDING = "MEMBERSHIP_NOT_PENDING"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500/503)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class InsufficientPermissionsError(AppException):
    """User does not have sufficient permissions."""

    def __init__(self, required_role: str = "moderator") -> None:
        super().__init__(
            error_code=ErrorCode.INSUFFICIENT_PERMISSIONS,
            message=f"Insufficient permissions. Required role: {required_role}",
            status_code=403,
            details={"required_role": required_role},
        )


class GroupNotFoundError(AppException):
    """Group not found."""

    def __init__(self, group_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.GROUP_NOT_FOUND,
            message="Group not found",
            status_code=404,
            details={"group_id": group_id},
        )


class GroupInactiveError(AppException):
    """Group exists but has been deactivated."""

    def __init__(self, group_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.GROUP_INACTIVE,
            message="This group is no longer active",
            status_code=409,
            details={"group_id": group_id},
        )


class GroupCapacityExceededError(AppException):
    """Group has no free seats left."""

    def __init__(self, group_id: str, max_members: int | None = None) -> None:
        details: dict[str, Any] = {"group_id": group_id}
        if max_members is not None:
            details["max_members"] = max_members
        super().__init__(
            error_code=ErrorCode.GROUP_FULL,
            message="Group has reached maximum capacity",
            status_code=409,
            details=details,
        )


class AlreadyAGroupMemberError(AppException):
    """User is already an active member of the group."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.ALREADY_A_GROUP_MEMBER,
            message="You are already a member of this group",
            status_code=409,
            details={"user_id": user_id},
        )


class MembershipRequestPendingError(AppException):
    """User already has a join request waiting for approval."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.MEMBERSHIP_REQUEST_PENDING,
            message="Your membership request is pending approval",
            status_code=409,
            details={"user_id": user_id},
        )


class BannedFromGroupError(AppException):
    """User has been banned from the group."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.BANNED_FROM_GROUP,
            message="You have been banned from this group",
            status_code=403,
            details={"user_id": user_id},
        )


class NotAGroupMemberError(AppException):
    """Caller holds no membership in the group."""

    def __init__(self, group_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.NOT_A_GROUP_MEMBER,
            message="You are not a member of this group",
            status_code=404,
            details={"group_id": group_id},
        )


class GroupMemberNotFoundError(AppException):
    """Target user holds no membership in the group."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.GROUP_MEMBER_NOT_FOUND,
            message="User is not a member of this group",
            status_code=404,
            details={"user_id": user_id},
        )


class MembershipNotPendingError(AppException):
    """Only pending memberships can be approved."""

    def __init__(self, user_id: str, status: str) -> None:
        super().__init__(
            error_code=ErrorCode.MEMBERSHIP_NOT_PENDING,
            message="Membership is not awaiting approval",
            status_code=409,
            details={"user_id": user_id, "status": status},
        )


class StoreUnavailableError(AppException):
    """The datastore failed mid-transaction. Safe to retry."""

    def __init__(self, message: str = "Failed to update membership. Please try again.") -> None:
        super().__init__(
            error_code=ErrorCode.DATABASE_ERROR,
            message=message,
            status_code=503,
        )
