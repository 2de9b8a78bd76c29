"""Unit tests for the error catalogue."""

from uuid import uuid4

from core.exceptions import (
    AlreadyAGroupMemberError,
    AuthenticationError,
    BannedFromGroupError,
    ErrorCode,
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


def _raised_by_services() -> list:
    ident = str(uuid4())
    return [
        AuthenticationError(),
        AuthenticationError(message="Invalid or expired token", error_code=ErrorCode.INVALID_TOKEN),
        InsufficientPermissionsError(),
        BannedFromGroupError(ident),
        GroupNotFoundError(ident),
        GroupMemberNotFoundError(ident),
        NotAGroupMemberError(ident),
        GroupInactiveError(ident),
        GroupCapacityExceededError(ident, max_members=5),
        AlreadyAGroupMemberError(ident),
        MembershipRequestPendingError(ident),
        MembershipNotPendingError(ident, "ACTIVE"),
        StoreUnavailableError(),
    ]


class TestErrorCatalogue:
    def test_every_code_has_a_source(self):
        # Codes produced outside AppException subclasses.
        emitted_elsewhere = {
            ErrorCode.VALIDATION_ERROR,
            ErrorCode.RATE_LIMIT_EXCEEDED,
            ErrorCode.INTERNAL_ERROR,
        }

        emitted = {exc.error_code for exc in _raised_by_services()} | emitted_elsewhere

        assert emitted == set(ErrorCode)

    def test_status_codes(self):
        statuses = {exc.error_code: exc.status_code for exc in _raised_by_services()}

        assert statuses[ErrorCode.UNAUTHORIZED] == 401
        assert statuses[ErrorCode.BANNED_FROM_GROUP] == 403
        assert statuses[ErrorCode.NOT_A_GROUP_MEMBER] == 404
        assert statuses[ErrorCode.GROUP_FULL] == 409
        assert statuses[ErrorCode.DATABASE_ERROR] == 503
