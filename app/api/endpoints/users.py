"""
User administration endpoints (admin only).

Role changes made here reach the affected user on their next login, since
access tokens carry the role held at issuance.
"""

import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.core.deps import CurrentUser, get_admin_user
from app.crud import user as user_crud
from app.schemas.user import UserCreateRequest, UserResponse, UserUpdateRequest

router = APIRouter(prefix="/users", tags=["Users"])
logger = logging.getLogger(__name__)


@router.get("/", response_model=List[UserResponse])
def list_users(
    db: Session = Depends(get_db),
    admin_user: CurrentUser = Depends(get_admin_user)
):
    """List all users in the system."""
    return user_crud.get_multi(db)


@router.post("/", status_code=201, response_model=UserResponse)
def create_user(
    request: UserCreateRequest,
    db: Session = Depends(get_db),
    admin_user: CurrentUser = Depends(get_admin_user)
):
    """Create an account with any role."""
    user = user_crud.create(
        db,
        email=request.email,
        password=request.password,
        name=request.name,
        role=request.role,
    )
    logger.info(f"Admin {admin_user.id} created user {user.id} ({user.email}, role={user.role.value})")
    return user


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    admin_user: CurrentUser = Depends(get_admin_user)
):
    user = user_crud.get_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.patch("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    request: UserUpdateRequest,
    db: Session = Depends(get_db),
    admin_user: CurrentUser = Depends(get_admin_user)
):
    """
    Edit email, name, role or password. An empty password leaves it unchanged.
    """
    user = user_crud.update(db, user_id, request)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    logger.info(f"Admin {admin_user.id} updated user {user_id} fields {sorted(request.model_fields_set)}")
    return user


@router.delete("/{user_id}", status_code=204)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    admin_user: CurrentUser = Depends(get_admin_user)
):
    """Delete a user. Admins cannot delete their own account."""
    if user_id == admin_user.id:
        raise HTTPException(
            status_code=400,
            detail={"code": "cannot_delete_self", "message": "You cannot delete your own account"},
        )

    deleted = user_crud.delete(db, user_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="User not found")

    logger.info(f"Admin {admin_user.id} deleted user {user_id}")
    return None
