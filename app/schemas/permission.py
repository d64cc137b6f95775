"""
Pydantic schemas for the ability catalog and role grants.
"""

import re
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator
from app.core.permissions import Role, normalize_key, normalize_role

ABILITY_KEY_PATTERN = re.compile(r"^[a-z][a-z0-9_]{1,63}$")


class GrantRequest(BaseModel):
    """Body for granting or revoking one ability on one role."""
    role: Role
    ability: str = Field(..., min_length=1, max_length=64)

    @field_validator("role", mode="before")
    @classmethod
    def parse_role(cls, v):
        role = normalize_role(v)
        if role is None:
            raise ValueError(f"invalid role, expected one of: {', '.join(r.value for r in Role)}")
        return role

    @field_validator("ability")
    @classmethod
    def canonical_ability(cls, v: str) -> str:
        return normalize_key(v)


class GrantResult(BaseModel):
    role: Role
    ability: str
    changed: bool = Field(..., description="True if a grant row was actually inserted or removed")


class RoleAbilities(BaseModel):
    role: Role
    abilities: List[str]


class PermissionMatrix(BaseModel):
    """Everything the permissions editor needs in one response."""
    roles: List[RoleAbilities]
    abilities: List[str]


class MyPermissions(BaseModel):
    role: Role
    permissions: List[str]


class AbilityCreateRequest(BaseModel):
    key: str = Field(..., min_length=2, max_length=64)
    description: Optional[str] = Field(None, max_length=500)

    @field_validator("key")
    @classmethod
    def valid_key(cls, v: str) -> str:
        key = normalize_key(v)
        if not ABILITY_KEY_PATTERN.match(key):
            raise ValueError("ability key must be lower-case letters, digits and underscores")
        return key


class AbilityResponse(BaseModel):
    key: str
    description: Optional[str] = None
    canonical: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
