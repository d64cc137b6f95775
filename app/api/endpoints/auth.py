"""
Authentication endpoints for user registration, login, and the current user.

Implements JWT-based stateless authentication:
- POST /register: Create new user account (always role 'user')
- POST /login: Authenticate and receive a JWT access token
- GET /me: The caller's identity and the abilities its role holds
"""

import logging
from datetime import datetime, timezone
from fastapi import APIRouter, HTTPException, Depends, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import CurrentUser, get_current_user
from app.core.permissions import Role
from app.core.security import verify_password, create_user_token
from app.crud import permission as permission_crud
from app.crud import user as user_crud
from app.schemas.user import (
    UserRegisterRequest,
    UserLoginRequest,
    TokenResponse,
    UserResponse,
    CurrentUserResponse,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = logging.getLogger(__name__)


@router.post("/register", status_code=201, response_model=TokenResponse)
def register(
    request: UserRegisterRequest,
    db: Session = Depends(get_db)
):
    """
    Register a new user account.

    Self-registered accounts get the 'user' role, which holds no abilities
    until an admin changes the role. Returns a token for immediate login.
    """
    new_user = user_crud.create(
        db,
        email=request.email,
        password=request.password,
        name=request.name,
        role=Role.USER,
    )

    logger.info(f"New user registered: {new_user.email} (id: {new_user.id})")

    return TokenResponse(
        access_token=create_user_token(new_user),
        token_type="bearer",
        user=UserResponse.model_validate(new_user)
    )


@router.post("/login", response_model=TokenResponse)
def login(
    request: UserLoginRequest,
    db: Session = Depends(get_db)
):
    """
    Authenticate user and return a JWT access token.

    The token carries the role held right now; a later role change needs a
    fresh login to take effect. Updates last_login_at timestamp.
    """
    user = user_crud.get_by_email(db, request.email)
    if not user or not verify_password(request.password, user.hashed_password):
        logger.warning(f"Failed login for {request.email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # Update last login timestamp
    user.last_login_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(user)

    logger.info(f"User logged in: {user.email} (role: {user.role.value})")

    return TokenResponse(
        access_token=create_user_token(user),
        token_type="bearer",
        user=UserResponse.model_validate(user)
    )


@router.get("/me", response_model=CurrentUserResponse)
def get_current_user_profile(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Get the caller as identified by the token, with its role's abilities.

    Requires valid JWT token in Authorization header.
    """
    return CurrentUserResponse(
        id=current_user.id,
        email=current_user.email,
        name=current_user.name,
        role=current_user.role,
        abilities=permission_crud.list_grants(db, current_user.role),
    )
