"""Authentication provider protocol."""

from dataclasses import dataclass
from typing import Optional, Protocol
from uuid import UUID


@dataclass
class TokenUser:
    """The authenticated caller, as read from a bearer token."""

    id: UUID
    email: str
    display_name: Optional[str] = None
    role: Optional[str] = None


class IAuthProvider(Protocol):
    """Resolves bearer tokens to users."""

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """Return the token's user, or None when the token is not acceptable."""
        ...

    def create_token(self, user: TokenUser) -> str:
        """Issue a token for a user."""
        ...
