"""
Candidate database model.

Represents a person moving through the hiring pipeline. Only a candidate in
the HIRED stage can be assigned to a position.
"""

from typing import Optional
from sqlalchemy import Column, Integer, String, Enum, Text, DateTime, func
import enum
from app.core.database import Base


class CandidateStatus(str, enum.Enum):
    """
    Hiring pipeline stages, in order:

    PENDING_PRE_EMPLOYMENT -> PENDING_ONBOARDING -> OFFER_EXTENDED
        -> READY_TO_START -> HIRED -> DID_NOT_START
    """
    PENDING_PRE_EMPLOYMENT = "pending_pre_employment"
    PENDING_ONBOARDING = "pending_onboarding"
    OFFER_EXTENDED = "offer_extended"
    READY_TO_START = "ready_to_start"
    HIRED = "hired"
    DID_NOT_START = "did_not_start"


PIPELINE_ORDER = list(CandidateStatus)


def normalize_status(raw) -> Optional[CandidateStatus]:
    """Parse user input like "Ready to start" or "offer-extended"; None if unknown."""
    if isinstance(raw, CandidateStatus):
        return raw
    key = "_".join(str(raw or "").strip().lower().replace("-", " ").split())
    try:
        return CandidateStatus(key)
    except ValueError:
        return None


def next_status(status: CandidateStatus) -> CandidateStatus:
    """One stage forward; the last stage stays put."""
    idx = PIPELINE_ORDER.index(status)
    return PIPELINE_ORDER[min(idx + 1, len(PIPELINE_ORDER) - 1)]


def previous_status(status: CandidateStatus) -> CandidateStatus:
    """One stage back; the first stage stays put."""
    idx = PIPELINE_ORDER.index(status)
    return PIPELINE_ORDER[max(idx - 1, 0)]


class Candidate(Base):
    """A person in the hiring pipeline."""
    __tablename__ = "candidates"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String, nullable=False, index=True)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    notes = Column(Text, nullable=True)

    status = Column(
        Enum(CandidateStatus, name="candidate_status", native_enum=False,
             values_callable=lambda e: [m.value for m in e]),
        default=CandidateStatus.PENDING_PRE_EMPLOYMENT,
        nullable=False,
        index=True
    )

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<Candidate(id={self.id}, full_name='{self.full_name}', status={self.status.value})>"
