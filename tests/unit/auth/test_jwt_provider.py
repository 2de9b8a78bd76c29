"""Unit tests for JWTAuthProvider."""

from uuid import uuid4

import pytest
from jose import jwt as jose_jwt

from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser

SECRET = "test-secret"


def _make_token(payload: dict, secret: str = SECRET) -> str:
    return jose_jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture
def provider() -> JWTAuthProvider:
    return JWTAuthProvider(secret_key=SECRET, algorithm="HS256", expire_minutes=30)


class TestValidateToken:
    async def test_round_trips_created_token(self, provider: JWTAuthProvider):
        user = TokenUser(id=uuid4(), email="rider@example.com", display_name="Rider")

        result = await provider.validate_token(provider.create_token(user))

        assert result is not None
        assert result.id == user.id
        assert result.email == "rider@example.com"
        assert result.display_name == "Rider"
        assert result.role == "authenticated"

    async def test_reads_display_name_from_name_claim(self, provider: JWTAuthProvider):
        token = _make_token(
            {"sub": str(uuid4()), "email": "a@example.com", "name": "Ada", "exp": 9999999999}
        )

        result = await provider.validate_token(token)

        assert result is not None
        assert result.display_name == "Ada"

    async def test_rejects_wrong_signature(self, provider: JWTAuthProvider):
        token = _make_token(
            {"sub": str(uuid4()), "email": "a@example.com", "exp": 9999999999},
            secret="someone-else",
        )

        assert await provider.validate_token(token) is None

    async def test_rejects_garbage(self, provider: JWTAuthProvider):
        assert await provider.validate_token("not.a.jwt") is None

    async def test_rejects_expired_token(self):
        issuer = JWTAuthProvider(secret_key=SECRET, algorithm="HS256", expire_minutes=-1)
        validator = JWTAuthProvider(secret_key=SECRET, algorithm="HS256", expire_minutes=30)
        token = issuer.create_token(TokenUser(id=uuid4(), email="late@example.com"))

        assert await validator.validate_token(token) is None


class TestValidateTokenMissingClaims:
    """Tokens with a good signature but unusable claims yield None."""

    async def test_no_sub(self, provider: JWTAuthProvider):
        token = _make_token({"email": "user@example.com", "exp": 9999999999})

        assert await provider.validate_token(token) is None

    async def test_no_email(self, provider: JWTAuthProvider):
        token = _make_token({"sub": str(uuid4()), "exp": 9999999999})

        assert await provider.validate_token(token) is None

    async def test_empty_sub(self, provider: JWTAuthProvider):
        token = _make_token({"sub": "", "email": "user@example.com", "exp": 9999999999})

        assert await provider.validate_token(token) is None

    async def test_sub_not_a_uuid(self, provider: JWTAuthProvider):
        token = _make_token({"sub": "user-42", "email": "user@example.com", "exp": 9999999999})

        assert await provider.validate_token(token) is None


class TestJWTAuthProviderInit:
    def test_stores_configuration(self):
        provider = JWTAuthProvider(secret_key="my-secret", algorithm="HS256", expire_minutes=15)

        assert provider._algorithm == "HS256"
        assert provider._secret_key == "my-secret"
        assert provider._expire_minutes == 15
