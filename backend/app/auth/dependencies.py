from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from ..database import SessionDep

from ..exceptions import ForbiddenError, InvalidToken
from ..users.models import User
from ..users.policy import is_admin
from ..users.repository import UserRepository
from ..users.service import UserService
from .passwords import PasswordHasher
from .service import AuthService
from .tokens import TokenCodec

bearer_scheme = HTTPBearer(auto_error=False)

# Stateless collaborators shared by every request.
_password_hasher = PasswordHasher()
_token_codec = TokenCodec()


def get_password_hasher() -> PasswordHasher:
    return _password_hasher


def get_token_codec() -> TokenCodec:
    return _token_codec


def get_user_repository(db: SessionDep) -> UserRepository:
    return UserRepository(db)


def get_auth_service(
    repository: UserRepository = Depends(get_user_repository),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenCodec = Depends(get_token_codec),
) -> AuthService:
    return AuthService(repository, hasher, tokens)


def get_user_service(
    repository: UserRepository = Depends(get_user_repository),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> UserService:
    return UserService(repository, hasher)


async def get_current_user_from_access_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> User:
    if credentials is None:
        raise InvalidToken("Not authenticated")
    return await auth_service.resolve_token(credentials.credentials)

CurrentUser = Depends(get_current_user_from_access_token)

def require_admin(
    current_user: User = CurrentUser
) -> User:
    """
    Dependency guarding admin-only routes.
    Raises ForbiddenError when the authenticated user is not an admin.
    """
    if not is_admin(current_user):
        raise ForbiddenError("Admin privileges required")
    return current_user

AdminUser = Depends(require_admin)
