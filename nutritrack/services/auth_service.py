from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import jwt, JWTError
from jose.exceptions import ExpiredSignatureError

from nutritrack.core.config import settings
from nutritrack.core.errors import TokenExpired, TokenInvalid
from nutritrack.models.user import User
from nutritrack.schemas.auth import TokenClaims


class AuthService:
    """Password hashing plus issuing and verifying access tokens."""

    def __init__(self):
        self.SECRET_KEY = settings.SECRET_KEY
        self.ALGORITHM = settings.ALGORITHM
        self.ACCESS_TOKEN_EXPIRE_MINUTES = settings.ACCESS_TOKEN_EXPIRE_MINUTES
        self.BCRYPT_ROUNDS = settings.BCRYPT_ROUNDS

    def hash_password(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.BCRYPT_ROUNDS)
        hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    def verify_password(self, plain_password: str, hashed_password: Optional[str]) -> bool:
        if not hashed_password:
            return False
        try:
            return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
        except ValueError:
            # Stored value is not a bcrypt hash
            return False

    def create_access_token(self, user: User, expires_delta: Optional[timedelta] = None) -> str:
        if expires_delta is None:
            expires_delta = timedelta(minutes=self.ACCESS_TOKEN_EXPIRE_MINUTES)
        to_encode = {
            "sub": str(user.id),
            "username": user.username,
            "email": user.email,
            "exp": datetime.now(timezone.utc) + expires_delta,
        }
        return jwt.encode(to_encode, self.SECRET_KEY, algorithm=self.ALGORITHM)

    def decode_access_token(self, token: str) -> TokenClaims:
        """Verify signature and expiry; expired and invalid tokens fail differently."""
        try:
            payload = jwt.decode(token, self.SECRET_KEY, algorithms=[self.ALGORITHM])
        except ExpiredSignatureError:
            raise TokenExpired()
        except JWTError:
            raise TokenInvalid()

        try:
            return TokenClaims(
                user_id=int(payload["sub"]),
                username=payload.get("username", ""),
                email=payload.get("email", ""),
            )
        except (KeyError, TypeError, ValueError):
            raise TokenInvalid("Token is missing required claims")


auth_service = AuthService()
