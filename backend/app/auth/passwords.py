from passlib.context import CryptContext
from starlette.concurrency import run_in_threadpool

from ..config import settings


class PasswordHasher:
    """Salted bcrypt hashing. Work runs in the threadpool so requests only await it."""

    def __init__(self, rounds: int = settings.BCRYPT_ROUNDS):
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    async def hash(self, plain_password: str) -> str:
        return await run_in_threadpool(self._context.hash, plain_password)

    async def verify(self, plain_password: str, hashed_password: str | None) -> bool:
        if not hashed_password:
            return False
        try:
            return await run_in_threadpool(self._context.verify, plain_password, hashed_password)
        except (ValueError, TypeError):
            # unknown or corrupted hash format
            return False
