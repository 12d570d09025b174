import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict
from jose import jwt, JWTError, ExpiredSignatureError
from passlib.context import CryptContext

from tracker_backend.api.exceptions import UnauthorizedException
from tracker_backend.settings import settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(user_id: str, roles: list = None) -> str:
    now = datetime.now(timezone.utc)
    claims = {
        "sub": user_id,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(hours=settings.JWT_EXPIRATION_HOURS)).timestamp()),
        "roles": roles or ["user"],
    }
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    """Verify signature and expiry, returning the token claims."""
    try:
        claims = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise UnauthorizedException("Token expired")
    except JWTError as e:
        logger.debug(f"Rejected bearer token: {e}")
        raise UnauthorizedException("Invalid token")

    if not claims.get("sub"):
        raise UnauthorizedException("Invalid token")
    return claims
