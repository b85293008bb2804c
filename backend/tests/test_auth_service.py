"""Tests for registration, authentication and token resolution."""

import pytest

from app.exceptions import EmailInUse, InvalidCredentials, InvalidToken


class TestRegister:
    async def test_register_then_authenticate(self, auth_service):
        registered = await auth_service.register("Carla", "carla@example.com", "secret123")
        user, token = await auth_service.authenticate("carla@example.com", "secret123")

        assert registered.role == "user"
        assert user.id == registered.id
        assert (await auth_service.resolve_token(token)).id == registered.id

    async def test_register_existing_email(self, auth_service, member):
        with pytest.raises(EmailInUse):
            await auth_service.register("Copy", member.email, "secret123")


class TestAuthenticate:
    async def test_success_sets_last_login_and_claims(self, auth_service, tokens, member):
        assert member.last_login is None

        user, token = await auth_service.authenticate(member.email, "member123")
        claims = tokens.verify(token)

        assert user.last_login is not None
        assert claims["sub"] == member.id
        assert claims["email"] == member.email
        assert claims["role"] == "user"

    async def test_wrong_password_leaves_last_login_untouched(self, auth_service, repository, member):
        with pytest.raises(InvalidCredentials):
            await auth_service.authenticate(member.email, "wrong-password")

        assert (await repository.find_by_id(member.id)).last_login is None

    async def test_unknown_email(self, auth_service):
        with pytest.raises(InvalidCredentials):
            await auth_service.authenticate("nobody@example.com", "whatever")


class TestResolveToken:
    async def test_subject_removed(self, auth_service, user_service, admin, member):
        _, token = await auth_service.authenticate(member.email, "member123")
        await user_service.remove_user(member.id, admin)

        with pytest.raises(InvalidToken):
            await auth_service.resolve_token(token)

    async def test_missing_email_claim(self, auth_service, tokens, member):
        token = tokens.sign({"sub": member.id})

        with pytest.raises(InvalidToken):
            await auth_service.resolve_token(token)

    async def test_tampered_token(self, auth_service, member):
        _, token = await auth_service.authenticate(member.email, "member123")

        with pytest.raises(InvalidToken):
            await auth_service.resolve_token(token.rsplit(".", 1)[0] + ".invalidsignature")
