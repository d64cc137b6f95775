"""
Pydantic schemas for authentication and user administration.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import List, Optional
from datetime import datetime
from app.core.permissions import Role, normalize_role


def _parse_role(v):
    if v is None:
        return v
    role = normalize_role(v)
    if role is None:
        raise ValueError(f"invalid role, expected one of: {', '.join(r.value for r in Role)}")
    return role


class UserRegisterRequest(BaseModel):
    """Self-service registration; new accounts always get the 'user' role."""
    email: EmailStr
    password: str = Field(
        ...,
        min_length=8,
        max_length=72,  # bcrypt limit
        description="Password must be 8-72 characters"
    )
    name: Optional[str] = Field(None, max_length=200)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.strip().lower()


class UserLoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.strip().lower()


class TokenResponse(BaseModel):
    """JWT token response."""
    access_token: str
    token_type: str = "bearer"
    user: "UserResponse"


class UserCreateRequest(BaseModel):
    """Admin-created account with an explicit role."""
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)
    name: Optional[str] = Field(None, max_length=200)
    role: Role = Role.USER

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("role", mode="before")
    @classmethod
    def parse_role(cls, v):
        return _parse_role(v)

    class Config:
        extra = "forbid"


class UserUpdateRequest(BaseModel):
    """Partial admin edit. An empty or missing password leaves it unchanged."""
    email: Optional[EmailStr] = None
    name: Optional[str] = Field(None, max_length=200)
    role: Optional[Role] = None
    password: Optional[str] = Field(None, max_length=72)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v):
        if v is None:
            raise ValueError("email cannot be empty")
        return v.strip().lower()

    @field_validator("role", mode="before")
    @classmethod
    def parse_role(cls, v):
        if v is None:
            raise ValueError("role cannot be null")
        return _parse_role(v)

    @field_validator("password")
    @classmethod
    def password_length(cls, v):
        if v and len(v) < 8:
            raise ValueError("password must be at least 8 characters")
        return v or None

    class Config:
        extra = "forbid"


class UserResponse(BaseModel):
    """User profile response (no sensitive data)."""
    id: int
    email: str
    name: Optional[str] = None
    role: Role
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CurrentUserResponse(BaseModel):
    """The caller as seen by the API, plus the abilities its role holds."""
    id: int
    email: Optional[str] = None
    name: Optional[str] = None
    role: Role
    abilities: List[str]


TokenResponse.model_rebuild()
