"""Unit tests for password hashing and token signing."""

from datetime import datetime, timedelta, timezone

import pytest

from app.auth.passwords import PasswordHasher
from app.auth.tokens import TokenCodec
from app.exceptions import InvalidToken


class TestPasswordHasher:
    async def test_hash_is_salted(self, hasher):
        first = await hasher.hash("secret123")
        second = await hasher.hash("secret123")

        assert first != second
        assert first.startswith("$2b$")

    async def test_verify_correct_and_wrong(self, hasher):
        hashed = await hasher.hash("secret123")

        assert await hasher.verify("secret123", hashed) is True
        assert await hasher.verify("Secret123", hashed) is False

    @pytest.mark.parametrize("stored", [None, "", "not-a-bcrypt-hash"])
    async def test_verify_against_missing_or_malformed_hash(self, stored):
        assert await PasswordHasher(rounds=4).verify("secret123", stored) is False


class TestTokenCodec:
    def test_sign_and_verify_keeps_claims(self, tokens):
        token = tokens.sign({"sub": "u1", "email": "u1@example.com", "role": "user"})
        claims = tokens.verify(token)

        assert claims["sub"] == "u1"
        assert claims["email"] == "u1@example.com"
        assert claims["role"] == "user"
        assert "exp" in claims

    def test_expired_token_is_rejected(self, tokens):
        token = tokens.sign({"sub": "u1", "exp": datetime.now(timezone.utc) - timedelta(minutes=1)})

        with pytest.raises(InvalidToken):
            tokens.verify(token)

    def test_token_signed_with_other_secret_is_rejected(self, tokens):
        foreign = TokenCodec(secret_key="another-secret", algorithm="HS256", expire_minutes=5)
        token = foreign.sign({"sub": "u1"})

        with pytest.raises(InvalidToken):
            tokens.verify(token)

    def test_garbage_is_rejected(self, tokens):
        with pytest.raises(InvalidToken):
            tokens.verify("definitely.not.a-jwt")
