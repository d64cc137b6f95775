"""
FastAPI dependencies for authentication and authorization.

The caller's identity and role come from the bearer token alone; the user row
is not re-read on each request. A role change therefore only takes effect once
the user logs in again and receives a new token. Ability grants, on the other
hand, are read from the database on every request, so revoking an ability
from a role applies immediately.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.permissions import Ability, Role, authorize, normalize_role
from app.core.security import JWTError, decode_token
from app.crud import permission as permission_crud

logger = logging.getLogger(__name__)

# HTTP Bearer token scheme (Authorization: Bearer <token>)
# auto_error is off so a missing header gets the same 401 as a bad token
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CurrentUser:
    """Identity claims carried by a verified access token."""
    id: int
    role: Role
    email: Optional[str] = None
    name: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


def _user_from_token(token: str) -> CurrentUser:
    try:
        payload = decode_token(token)
    except JWTError:
        raise _credentials_exception()

    user_id = payload.get("sub")
    role = normalize_role(payload.get("role"))
    if user_id is None or role is None or payload.get("type") != "access":
        raise _credentials_exception()

    try:
        user_id = int(user_id)
    except (TypeError, ValueError):
        raise _credentials_exception()

    return CurrentUser(id=user_id, role=role, email=payload.get("email"), name=payload.get("name"))


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> CurrentUser:
    """
    Resolve the caller from the Authorization header.

    Raises:
        HTTPException 401: Missing, malformed, badly signed or expired token
    """
    if credentials is None:
        raise _credentials_exception()
    return _user_from_token(credentials.credentials)


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[CurrentUser]:
    """
    Caller if a token was sent, otherwise None.

    A token that is present but invalid is still rejected with 401.
    """
    if credentials is None:
        return None
    return _user_from_token(credentials.credentials)


async def get_job_reader(
    user: Optional[CurrentUser] = Depends(get_optional_user),
) -> Optional[CurrentUser]:
    """Job listing is public unless JOBS_PUBLIC_READ is turned off."""
    if user is None and not settings.JOBS_PUBLIC_READ:
        raise _credentials_exception()
    return user


async def get_admin_user(
    user: CurrentUser = Depends(get_current_user),
) -> CurrentUser:
    """
    Require the admin role (user management, grants, ability catalog).

    Raises:
        HTTPException 403: Caller is not an admin
    """
    if not user.is_admin:
        logger.warning(f"Admin access denied for user {user.id} (role={user.role.value})")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"code": "forbidden", "message": "Admin access required"},
        )
    return user


def require_ability(ability: Ability) -> Callable:
    """
    Build a dependency that admits callers whose role holds ``ability``.

    Usage:
        @router.post("/", dependencies=[Depends(require_ability(Ability.JOB_CREATE))])

    Raises:
        HTTPException 401: No valid token
        HTTPException 403: Role lacks the ability
    """

    def dependency(
        user: CurrentUser = Depends(get_current_user),
        db: Session = Depends(get_db),
    ) -> CurrentUser:
        granted = () if user.is_admin else permission_crud.list_grants(db, user.role)
        decision = authorize(user.role, ability, granted)
        if not decision:
            logger.warning(
                f"Denied {ability.value} for user {user.id} (role={user.role.value}): {decision.reason}"
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={"code": "forbidden", "ability": ability.value},
            )
        return user

    return dependency
