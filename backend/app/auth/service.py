import logging
from typing import Tuple

from ..exceptions import InvalidCredentials, InvalidToken, NotFoundError
from ..users.models import User, UserRole
from ..users.repository import UserRepository
from ..users.service import UserService
from .passwords import PasswordHasher
from .tokens import TokenCodec

logger = logging.getLogger(__name__)


class AuthService:
    """
    Credential checks, registration and token issuance/resolution.
    """

    def __init__(self, repository: UserRepository, hasher: PasswordHasher, tokens: TokenCodec):
        self.repository = repository
        self.hasher = hasher
        self.tokens = tokens

    def create_access_token(self, user: User) -> str:
        return self.tokens.sign({
            "sub": user.id,
            "email": user.email,
            "role": user.role,
        })

    async def authenticate(self, email: str, password: str) -> Tuple[User, str]:
        """
        Verifies the credentials, records the login time and issues a token.
        Unknown email and wrong password fail the same way and leave the record untouched.
        """
        user = await self.repository.find_by_email(email)

        if not user or not await self.hasher.verify(password, user.hashed_password):
            raise InvalidCredentials()

        user = await UserService(self.repository, self.hasher).record_login(user)
        logger.info(f"User {user.id} logged in")
        return user, self.create_access_token(user)

    async def resolve_token(self, token: str) -> User:
        """
        Returns the user the token was issued to.
        Fails with InvalidToken on a bad signature, an expired token, missing claims
        or a subject that no longer exists.
        """
        payload = self.tokens.verify(token)

        user_id = payload.get("sub")
        if not user_id or not payload.get("email"):
            raise InvalidToken()

        user = await self.repository.find_by_id(user_id)
        if user is None:
            raise InvalidToken("User associated with this token not found")
        return user

    async def register(self, name: str, email: str, password: str) -> User:
        """Public sign-up. The role is always `user`."""
        user = await UserService(self.repository, self.hasher).create_user(
            name=name, email=email, password=password, role=UserRole.USER
        )
        logger.info(f"Registered user {user.id}")
        return user

    async def current_user(self, user_id: str) -> User:
        user = await self.repository.find_by_id(user_id)
        if user is None:
            raise NotFoundError()
        return user
