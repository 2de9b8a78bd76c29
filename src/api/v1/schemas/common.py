"""Common Pydantic schemas shared across the API."""

from typing import Any

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standardized error response."""

    error_code: str
    message: str
    details: Any | None = None


class ActionResponse(BaseModel):
    """Outcome of a user-triggered action.

    Rendered with ``None`` fields dropped, so callers see either
    ``{"success": true, "message": ...}`` or ``{"success": false, "error": ...}``.
    """

    success: bool
    message: str | None = None
    error: str | None = None
    status: str | None = None
