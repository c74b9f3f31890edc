"""
Authentication Dependencies

FastAPI dependencies for route protection and authentication.
"""

from typing import Callable, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from residential_api.db.mongo import doc_with_id
from residential_api.schemas.common import UserRole
from residential_api.services.auth_service import ROLE_COLLECTIONS, account_status_error
from residential_api.services.container import auth_service
from residential_api.utils.logger import get_logger

logger = get_logger(__name__)

# auto_error=False so a missing header is a 401 rather than FastAPI's 403
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_token_payload(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> dict:
    """
    Decode the bearer token.

    Raises:
        HTTPException: 401 if the token is missing, invalid or expired
    """
    if not credentials or not credentials.credentials:
        raise _unauthorized("No token provided")
    payload = auth_service.verify_token(credentials.credentials)
    if not payload:
        raise _unauthorized("Invalid or expired token")
    if not payload.get("user_id") or not payload.get("role"):
        raise _unauthorized("Invalid token payload")
    return payload


async def get_current_account(payload: dict = Depends(get_token_payload)) -> dict:
    """
    Load the caller's account without checking its status (used by /auth/me
    and /auth/refresh).

    Raises:
        HTTPException: 403 for an unknown role, 401 if the account is gone
    """
    role = payload["role"]
    if role not in ROLE_COLLECTIONS:
        logger.warning(f"[Auth] 403 Forbidden: unknown role {role}")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid user role")
    account = auth_service.get_account(role, payload["user_id"])
    if not account:
        raise _unauthorized("User not found")
    user = doc_with_id(account)
    user["role"] = role
    return user


async def get_current_user(current_account: dict = Depends(get_current_account)) -> dict:
    """
    Get the current authenticated user whose account may use the API.

    Raises:
        HTTPException: 403 if the account is inactive or not approved
    """
    reason = account_status_error(current_account["role"], current_account)
    if reason:
        logger.warning(f"[Auth] 403 Forbidden: {current_account['role']} {current_account['id']}: {reason}")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=f"Account inactive: {reason}")
    logger.debug(f"[Auth] Authenticated user {current_account['id']} with role {current_account['role']}")
    return current_account


def require_roles(*roles: UserRole) -> Callable:
    """Dependency factory allowing only the given roles."""
    allowed = {r.value if isinstance(r, UserRole) else r for r in roles}

    async def dependency(current_user: dict = Depends(get_current_user)) -> dict:
        if current_user["role"] not in allowed:
            logger.warning(
                f"[Auth] 403 Forbidden: User {current_user['id']} has role {current_user['role']}, "
                f"requires {sorted(allowed)}"
            )
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
        return current_user

    return dependency


get_current_admin = require_roles(UserRole.ADMIN)
get_current_resident = require_roles(UserRole.RESIDENT)
get_current_service_provider = require_roles(UserRole.SERVICE_PROVIDER)
get_admin_or_resident = require_roles(UserRole.ADMIN, UserRole.RESIDENT)
get_admin_or_service_provider = require_roles(UserRole.ADMIN, UserRole.SERVICE_PROVIDER)


def is_admin(user: dict) -> bool:
    return user.get("role") == UserRole.ADMIN.value


def ensure_self_or_admin(user: dict, owner_id: Optional[str], message: str = "Access denied") -> None:
    """
    Ownership check for resident / provider records.

    Raises:
        HTTPException: 403 unless the caller is an admin or owner_id is the caller's id
    """
    if is_admin(user) or (owner_id is not None and owner_id == user.get("id")):
        return
    logger.warning(f"[Auth] 403 Forbidden: {user.get('role')} {user.get('id')} on record owned by {owner_id}")
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=message)
