from passlib.context import CryptContext
from datetime import datetime, timedelta
from typing import Optional
import logging

import jwt
from fastapi import Depends, Header
from sqlalchemy.orm import Session

from .config import settings
from .db import get_db
from .errors import ForbiddenError
from .models import User
from .repositories import UserRepository

logger = logging.getLogger(__name__)

# Use pbkdf2_sha256 to avoid external bcrypt backend issues in some environments
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not plain_password or not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(user: User, expires_minutes: Optional[int] = None) -> str:
    minutes = expires_minutes if expires_minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    expire = datetime.utcnow() + timedelta(minutes=minutes)
    payload = {"sub": str(user.id), "email": user.email, "exp": expire}
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    """
    Verify a token signature and expiry.

    Raises:
        jwt.InvalidTokenError: on a bad signature, malformed token or expired token
    """
    return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])


def extract_token(authorization: Optional[str]) -> Optional[str]:
    """Accept either a bare token or a `Bearer <token>` header value."""
    if authorization is None or not authorization.strip():
        return None
    value = authorization.strip()
    if value.lower().startswith("bearer "):
        value = value.split(" ", 1)[1].strip()
    return value or None


def get_current_user(
    db: Session = Depends(get_db),
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> User:
    token = extract_token(authorization)
    if token is None:
        raise ForbiddenError("You must provide an `Authorization` header")
    try:
        data = decode_access_token(token)
        user_id = int(data["sub"])
    except (jwt.InvalidTokenError, KeyError, TypeError, ValueError) as exc:
        logger.info("Rejected token: %s", exc)
        raise ForbiddenError("Invalid token") from exc

    user = UserRepository(db).get_with_products(user_id)
    if not user:
        raise ForbiddenError("Invalid token")
    return user
