"""
Pydantic schemas for Candidate API requests/responses.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator
from app.models.candidate import CandidateStatus, normalize_status


def _parse_status(v):
    if v is None:
        return v
    status = normalize_status(v)
    if status is None:
        allowed = ", ".join(s.value for s in CandidateStatus)
        raise ValueError(f"invalid status, expected one of: {allowed}")
    return status


def _blank_to_none(v):
    if isinstance(v, str):
        v = v.strip()
        return v or None
    return v


class CandidateBase(BaseModel):
    """Base candidate schema with common fields."""
    email: Optional[str] = Field(None, max_length=320)
    phone: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = None

    @field_validator("email", "phone", "notes", mode="before")
    @classmethod
    def blank_text(cls, v):
        return _blank_to_none(v)


class CandidateCreateRequest(CandidateBase):
    full_name: str = Field(..., min_length=1, max_length=200)
    status: CandidateStatus = CandidateStatus.PENDING_PRE_EMPLOYMENT

    @field_validator("status", mode="before")
    @classmethod
    def parse_status(cls, v):
        return _parse_status(v)

    @field_validator("full_name")
    @classmethod
    def full_name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("full_name is required")
        return v

    class Config:
        extra = "forbid"


class CandidateUpdateRequest(CandidateBase):
    """Partial update; setting ``status`` here jumps directly to any stage."""
    full_name: Optional[str] = Field(None, min_length=1, max_length=200)
    status: Optional[CandidateStatus] = None

    @field_validator("status", mode="before")
    @classmethod
    def parse_status(cls, v):
        return _parse_status(v)

    @field_validator("full_name")
    @classmethod
    def full_name_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            raise ValueError("full_name cannot be empty")
        v = v.strip()
        if not v:
            raise ValueError("full_name cannot be empty")
        return v

    @field_validator("status")
    @classmethod
    def status_not_null(cls, v):
        if v is None:
            raise ValueError("status cannot be null")
        return v

    class Config:
        extra = "forbid"


class CandidateResponse(CandidateBase):
    id: int
    full_name: str
    status: CandidateStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
