"""Bearer token handling. Users and credentials are managed elsewhere."""

from datetime import datetime, timedelta
from typing import Optional

from jose import JWTError, jwt

from fitcoach.config import get_settings

settings = get_settings()


class AuthService:
    """Issues and verifies JWT access tokens whose subject is the user id."""

    @staticmethod
    def create_access_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
        """Create a JWT access token."""
        expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
        to_encode = {"sub": str(user_id), "exp": expire}
        return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)

    @staticmethod
    def decode_token(token: str) -> Optional[dict]:
        """Decode and validate a JWT token."""
        try:
            return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
        except JWTError:
            return None

    @classmethod
    def user_id_from_token(cls, token: str) -> Optional[int]:
        payload = cls.decode_token(token)
        if not payload:
            return None
        try:
            return int(payload.get("sub"))
        except (TypeError, ValueError):
            return None
