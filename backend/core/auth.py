"""
JWT verification and role-based access for the insight endpoints.

Tokens are issued by the external authentication service; this module
only decodes them and exposes FastAPI dependencies for the
customer / chef / admin roles.
"""

from datetime import datetime, timedelta
from typing import List, Optional
import logging

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from pydantic import BaseModel

from .config import settings
from .exceptions import AuthenticationError, PermissionDeniedError

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


class TokenData(BaseModel):
    user_id: int
    role: str = "customer"
    name: Optional[str] = None


def create_access_token(
    data: dict, expires_delta: Optional[timedelta] = None
) -> str:
    """Create a signed access token carrying ``sub`` and ``role`` claims."""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(
            minutes=settings.jwt_access_token_expire_minutes
        )

    to_encode.update({"exp": expire, "type": "access"})
    if "sub" in to_encode:
        to_encode["sub"] = str(to_encode["sub"])

    return jwt.encode(
        to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm
    )


def verify_token(token: str) -> Optional[TokenData]:
    """
    Decode and validate an access token.

    Returns:
        TokenData if valid, None otherwise
    """
    try:
        payload = jwt.decode(
            token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm]
        )
    except JWTError as e:
        logger.warning(f"Rejected access token: {e}")
        return None

    if payload.get("type") != "access":
        logger.warning(f"Token type mismatch: got {payload.get('type')}")
        return None

    subject = payload.get("sub")
    if subject is None:
        return None

    try:
        user_id = int(subject)
    except (TypeError, ValueError):
        logger.warning(f"Token subject is not a user id: {subject}")
        return None

    return TokenData(
        user_id=user_id,
        role=payload.get("role", "customer"),
        name=payload.get("name"),
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> TokenData:
    """Resolve the authenticated caller from the bearer token."""
    if not credentials:
        raise AuthenticationError("Not authenticated")

    token_data = verify_token(credentials.credentials)
    if token_data is None:
        raise AuthenticationError("Could not validate credentials")

    return token_data


def require_roles(required_roles: List[str]):
    """Enforce that the current user holds one of the specified roles."""

    required_set = set(required_roles)

    async def check(current_user: TokenData = Depends(get_current_user)) -> TokenData:
        if current_user.role == "admin" or current_user.role in required_set:
            return current_user
        raise PermissionDeniedError(
            f"Operation requires one of these roles: {required_roles}"
        )

    return check


# Common role dependencies
require_admin = require_roles(["admin"])
require_chef = require_roles(["chef"])
