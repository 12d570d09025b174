"""
Bearer token authentication and Principal creation.
"""

import asyncio
import hashlib
import json
import logging
from typing import Optional
from sqlalchemy.orm import Session
from fastapi import Depends, Request
from fastapi.security.utils import get_authorization_scheme_param

from tracker_backend.auth.security import decode_access_token
from tracker_backend.cache import get_cache
from tracker_backend.database import get_db
from tracker_backend.model.auth import User
from tracker_backend.api.exceptions import UnauthorizedException
from tracker_backend.permissions.principal import Principal

logger = logging.getLogger(__name__)

# Configuration
AUTH_CACHE_TTL = 10  # seconds


class PrincipalBuilder:
    """Builder for creating Principal objects from verified token claims"""

    @staticmethod
    def build(claims: dict, db: Session) -> Principal:
        user = db.query(User).filter(User.id == claims["sub"]).first()

        if user is None:
            raise UnauthorizedException("User not found")

        return Principal(
            user_id=user.id,
            username=user.username,
            email=user.email,
            roles=claims.get("roles", [])
        )

    @staticmethod
    async def build_with_cache(claims: dict, cache_key: str, db: Session) -> Principal:
        """Build Principal with caching support"""

        cache = await get_cache()

        # Try to get from cache
        try:
            cached_data = await cache.get(cache_key)
            if cached_data:
                logger.debug(f"Principal cache hit for {cache_key}")
                return Principal.model_validate(json.loads(cached_data))
        except Exception as e:
            logger.warning(f"Cache retrieval error: {e}")

        # User lookup is a blocking query
        loop = asyncio.get_event_loop()
        principal = await loop.run_in_executor(None, PrincipalBuilder.build, claims, db)

        try:
            await cache.set(cache_key, principal.model_dump_json(), ttl=AUTH_CACHE_TTL)
            logger.debug(f"Cached Principal for {cache_key}")
        except Exception as e:
            logger.warning(f"Cache storage error: {e}")

        return principal


def parse_bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise UnauthorizedException("No authorization provided")

    scheme, param = get_authorization_scheme_param(authorization)

    if not param:
        raise UnauthorizedException("Invalid authorization format")

    if scheme.lower() != "bearer":
        raise UnauthorizedException(f"Unsupported auth scheme: {scheme}")

    return param


def parse_authorization_header(request: Request) -> str:
    return parse_bearer_token(request.headers.get("Authorization"))


async def get_current_principal(
    token: str = Depends(parse_authorization_header),
    db: Session = Depends(get_db)
) -> Principal:
    """
    Main dependency for getting the current authenticated principal.
    """
    claims = decode_access_token(token)

    cache_key = hashlib.sha256(f"principal:{token}".encode()).hexdigest()

    return await PrincipalBuilder.build_with_cache(claims, cache_key, db)
