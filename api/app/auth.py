"""Supabase bearer-token authentication and role-based permissions."""

import logging

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from app.config import Settings, get_settings

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)
ALGORITHM = "HS256"

PERMISSIONS: dict[str, frozenset[str]] = {
    "admin": frozenset({
        "read:accounts",
        "write:accounts",
        "read:transactions",
        "write:transactions",
        "read:customers",
        "write:customers",
        "read:messages",
        "read:insights",
        "read:balance-history",
    }),
    "user": frozenset({
        "read:accounts",
        "read:transactions",
        "read:customers",
        "read:messages",
        "read:insights",
        "read:balance-history",
    }),
    "readonly": frozenset({"read:accounts"}),
}


class AuthenticatedUser(BaseModel):
    id: str
    email: str | None = None
    role: str = "user"


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    settings: Settings = Depends(get_settings),
) -> AuthenticatedUser:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise _unauthorized("Authentication required")
    if not settings.supabase_jwt_secret:
        raise _unauthorized("Authentication is not configured")
    try:
        payload = jwt.decode(
            credentials.credentials,
            settings.supabase_jwt_secret,
            algorithms=[ALGORITHM],
            audience=settings.supabase_jwt_audience,
            issuer=f"{settings.supabase_url.rstrip('/')}/auth/v1" if settings.supabase_url else None,
        )
    except jwt.PyJWTError as exc:
        logger.warning("Rejected bearer token: %s", exc)
        raise _unauthorized("Invalid or expired token")

    user_id = payload.get("sub")
    if not user_id:
        raise _unauthorized("Invalid or expired token")
    metadata = payload.get("user_metadata") or {}
    return AuthenticatedUser(
        id=user_id,
        email=payload.get("email"),
        role=metadata.get("role") or "user",
    )


def authorize(user: AuthenticatedUser, permission: str) -> bool:
    return permission in PERMISSIONS.get(user.role or "user", frozenset())


def require_permission(permission: str):
    async def permission_checker(user: AuthenticatedUser = Depends(get_current_user)) -> AuthenticatedUser:
        if not authorize(user, permission):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return user
    return permission_checker


def authorize_resource_owner(user: AuthenticatedUser, owner_id: str) -> bool:
    """Admins may access any resource; everyone else only their own."""
    if user.role == "admin":
        return True
    return user.id == owner_id
