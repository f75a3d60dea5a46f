"""
Bearer token handling

Resolves `Authorization: Bearer <jwt>` into the acting user and gates
endpoints on a role allow-list. Login and registration live elsewhere;
`create_access_token` exists for scripts and tests.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from pydantic import BaseModel

from .config import settings
from .exceptions import UnauthorizedException, ForbiddenException

# auto_error=False so a missing header becomes our 401, not FastAPI's default
bearer_scheme = HTTPBearer(auto_error=False)

ROLES = ("STUDENT", "STAFF", "MENTOR", "EMPLOYER")


class CurrentUser(BaseModel):
    """The acting user as resolved from the token"""
    id: str
    role: str
    department: Optional[str] = None
    name: Optional[str] = None


def create_access_token(
    user_id: str,
    role: str,
    department: Optional[str] = None,
    name: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Sign a token carrying the user's id, role and department"""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    claims = {
        "sub": user_id,
        "role": role,
        "department": department,
        "name": name,
        "exp": expire,
    }
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Optional[CurrentUser]:
    """Verify a token; None when it is invalid, expired or malformed"""
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None

    user_id = payload.get("sub")
    role = payload.get("role")
    if not user_id or role not in ROLES:
        return None

    return CurrentUser(
        id=str(user_id),
        role=role,
        department=payload.get("department"),
        name=payload.get("name"),
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> CurrentUser:
    """
    FastAPI dependency - resolve the authenticated user

    Usage:
        @router.get("/protected")
        async def route(user: CurrentUser = Depends(get_current_user)):
            return user
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedException("Authorization token required")

    user = decode_access_token(credentials.credentials)
    if user is None:
        raise UnauthorizedException("Invalid or expired token")
    return user


def require_roles(*roles: str):
    """Dependency factory: reject users whose role is not in the allow-list"""

    async def dependency(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role not in roles:
            raise ForbiddenException("Insufficient permissions")
        return user

    return dependency
