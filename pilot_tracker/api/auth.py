"""
JWT authentication for FastAPI.

Access tokens are HS256 JWTs issued by the auth provider and signed with
the project secret. The ``sub`` claim is the user id.
"""
import logging
from typing import Optional
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from pilot_tracker.config import get_settings
from pilot_tracker.database import get_db
from pilot_tracker.models.user import User

logger = logging.getLogger(__name__)

# Security scheme for Swagger UI
security = HTTPBearer(auto_error=False)


class TokenPayload(BaseModel):
    """Decoded access token payload."""
    sub: UUID  # user id
    email: Optional[str] = None
    exp: int


def decode_token(token: str) -> TokenPayload:
    """
    Verify and decode an access token.

    Raises:
        HTTPException: If the token is invalid, expired, or auth is not configured
    """
    settings = get_settings()

    if not settings.jwt_secret:
        logger.warning("JWT secret not configured, authentication disabled")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication not configured",
        )

    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options={"verify_exp": True, "verify_aud": True},
        )
        return TokenPayload(
            sub=payload["sub"],
            email=payload.get("email"),
            exp=payload["exp"],
        )
    except ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
        )
    except (JWTError, KeyError, ValueError) as e:
        logger.warning(f"JWT verification failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
        )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    FastAPI dependency that returns the current authenticated user.

    Usage:
        @app.get("/api/me")
        async def get_me(user: User = Depends(get_current_user)):
            return {"email": user.email}
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token_payload = decode_token(credentials.credentials)

    user = await db.get(User, token_payload.sub)
    if not user:
        logger.warning(f"Token for unknown user {token_payload.sub}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User is inactive",
        )

    return user
