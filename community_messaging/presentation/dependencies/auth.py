"""
Authentication Dependency for FastAPI.

Tokens are HS256 JWTs issued by the platform's auth service:
- sub:          user id (UUID)
- account_type: "user" | "company" (informational; conversation roles are
                always derived from the records, never from the token)
- exp, iat, aud, iss are required

HTTP routes read the token from the Authorization header; the realtime
WebSocket passes it as a ?token= query parameter and calls decode_token().
"""

from dataclasses import dataclass
from typing import Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from community_messaging.config.settings import Config
from community_messaging.domain.value_objects.user_id import UserId


@dataclass
class AuthUser:
    user_id: UserId
    account_type: Optional[str] = None


security = HTTPBearer()


def decode_token(token: str) -> AuthUser:
    """
    Validate a service token and build the AuthUser.

    Raises:
        HTTPException 401 if token is invalid, expired, or missing required claims
    """
    try:
        claims = jwt.decode(
            token,
            Config.SERVICE_AUTH_SECRET,
            algorithms=["HS256"],
            audience=Config.SERVICE_AUTH_AUDIENCE,
            issuer=Config.SERVICE_AUTH_ISSUER,
            options={"require": ["exp", "iat", "aud", "iss", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
        )
    except jwt.InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token: {str(e)}",
        )

    try:
        user_id = UserId(claims["sub"])
    except (TypeError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid subject claim",
        )

    return AuthUser(user_id=user_id, account_type=claims.get("account_type"))


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> AuthUser:
    return decode_token(credentials.credentials)
