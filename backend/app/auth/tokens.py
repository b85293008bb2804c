from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from jose import jwt, JWTError

from ..config import settings
from ..exceptions import InvalidToken


class TokenCodec:
    """Signs and verifies the session tokens handed out at login."""

    def __init__(
        self,
        secret_key: str = settings.JWT_SECRET_KEY,
        algorithm: str = settings.JWT_ALGORITHM,
        expire_minutes: int = settings.ACCESS_TOKEN_EXPIRE_MINUTES,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def sign(self, claims: Dict[str, Any]) -> str:
        """
        Encodes the claims into a signed token.
        An `exp` claim is added from the configured lifetime unless the caller set one.
        """
        to_encode = dict(claims)
        to_encode.setdefault("exp", datetime.now(timezone.utc) + timedelta(minutes=self.expire_minutes))
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> Dict[str, Any]:
        """Checks signature and expiry. Raises InvalidToken on any failure."""
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as exc:
            raise InvalidToken() from exc
