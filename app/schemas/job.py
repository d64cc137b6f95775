from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional
from datetime import date, datetime
from enum import Enum


class JobStatusEnum(str, Enum):
    """Position fill status"""
    OPEN = "Open"
    FILLED = "Filled"


def _blank_to_none(v):
    # The board UI posts "" for cleared date inputs
    if isinstance(v, str) and not v.strip():
        return None
    return v


class JobCreateRequest(BaseModel):
    """Schema for creating a new position (always starts Open)"""
    title: str = Field(..., min_length=1, max_length=200)
    job_number: Optional[str] = Field(None, max_length=100)
    department: Optional[str] = Field(None, max_length=200)
    due_date: Optional[date] = None
    filled_date: Optional[date] = None

    @field_validator("due_date", "filled_date", mode="before")
    @classmethod
    def blank_dates(cls, v):
        return _blank_to_none(v)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title cannot be blank")
        return v

    class Config:
        extra = "forbid"


class JobUpdateRequest(BaseModel):
    """
    Partial update of position details.

    Only fields present in the request body are written. Status and employee
    are deliberately absent: they change only through assign/unassign, and
    an edit never infers a status from the other fields.
    """
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    job_number: Optional[str] = Field(None, max_length=100)
    department: Optional[str] = Field(None, max_length=200)
    due_date: Optional[date] = None
    filled_date: Optional[date] = None
    employee_photo_url: Optional[str] = Field(None, max_length=2048)

    @field_validator("due_date", "filled_date", mode="before")
    @classmethod
    def blank_dates(cls, v):
        return _blank_to_none(v)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else v

    @model_validator(mode="after")
    def title_not_null(self):
        if "title" in self.model_fields_set and not (self.title or "").strip():
            raise ValueError("title cannot be empty")
        return self

    class Config:
        extra = "forbid"


class JobAssignRequest(BaseModel):
    """Candidate reference for an assignment: exactly one of id or full name."""
    candidate_id: Optional[int] = None
    candidate_name: Optional[str] = Field(None, min_length=1)

    @model_validator(mode="after")
    def exactly_one_reference(self):
        if (self.candidate_id is None) == (self.candidate_name is None):
            raise ValueError("provide exactly one of candidate_id or candidate_name")
        return self


class JobResponse(BaseModel):
    """Schema for job response"""
    id: int
    title: str
    job_number: Optional[str] = None
    department: Optional[str] = None
    employee: Optional[str] = None
    employee_photo_url: Optional[str] = None
    due_date: Optional[date] = None
    filled_date: Optional[date] = None
    status: JobStatusEnum
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True  # Allows conversion from SQLAlchemy models
