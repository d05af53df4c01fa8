import hashlib
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from passlib.context import CryptContext
from jose import jwt, JWTError
from pydantic import BaseModel

from bootcamp_directory.models.user import User
from bootcamp_directory.utils.config import Settings, get_settings
from bootcamp_directory.utils.errors import AuthenticationError


TOKEN_COOKIE = "token"
NOT_AUTHORIZED = "Not authorized to access this route"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)


class CookieOptions(BaseModel):
    """Attributes for the `token` cookie set next to a token response."""
    expires: datetime
    httponly: bool = True
    secure: bool = False


class TokenResponse(BaseModel):
    token: str
    cookie: CookieOptions

    def body(self) -> dict:
        return {"success": True, "token": self.token}


def verify_password(plain: str, hashed: str) -> bool:
    """Verify plaintext password against a bcrypt hash."""
    return pwd_context.verify(plain, hashed)


def hash_password(plain: str) -> str:
    """Hash a plaintext password using bcrypt."""
    return pwd_context.hash(plain)


def generate_reset_token(nbytes: int = 20) -> tuple[str, str]:
    """Return `(plain, hashed)`. Only the hash is ever stored."""
    plain = secrets.token_hex(nbytes)
    return plain, hash_reset_token(plain)


def hash_reset_token(plain: str) -> str:
    return hashlib.sha256(plain.encode("utf-8")).hexdigest()


def create_token(
    subject: str,
    role: str,
    token_version: int,
    expires_delta: timedelta,
    settings: Settings,
) -> str:
    """Create a signed JWT with subject, role, token version and expiration."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": subject,
        "role": role,
        "tv": token_version,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_delta).timestamp()),
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def issue_session_token(user: User, settings: Settings) -> TokenResponse:
    """Sign a session token for `user` and describe the cookie carrying it."""
    token = create_token(
        subject=str(user.id),
        role=user.role,
        token_version=user.token_version,
        expires_delta=timedelta(days=settings.jwt_expire_days),
        settings=settings,
    )
    cookie = CookieOptions(
        expires=datetime.now(timezone.utc) + timedelta(days=settings.jwt_cookie_expire_days),
        httponly=True,
        secure=settings.is_production,
    )
    return TokenResponse(token=token, cookie=cookie)


def decode_session_token(token: str, settings: Settings) -> dict:
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        raise AuthenticationError(NOT_AUTHORIZED)
    if payload.get("sub") is None or payload.get("tv") is None:
        raise AuthenticationError(NOT_AUTHORIZED)
    return payload


def get_current_user(
    request: Request,
    bearer: Optional[str] = Depends(oauth2_scheme),
    settings: Settings = Depends(get_settings),
) -> User:
    """Auth dependency resolving the session token to a user.

    Reads the bearer header first and falls back to the `token` cookie.
    Rejects tokens whose version no longer matches the stored user.
    """
    token = bearer or request.cookies.get(TOKEN_COOKIE)
    if not token or token == "none":
        raise AuthenticationError(NOT_AUTHORIZED)

    payload = decode_session_token(token, settings)
    user = User.lookup(id=payload["sub"])
    if not user or user.token_version != payload["tv"]:
        raise AuthenticationError(NOT_AUTHORIZED)
    return user
