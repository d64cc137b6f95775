"""
CRUD operations for Candidate model, including pipeline steps.
"""

from typing import List, Optional
from sqlalchemy import case, func
from sqlalchemy.orm import Session
from app.crud.updates import build_update
from app.models.candidate import Candidate, CandidateStatus, next_status, previous_status
from app.models.job import Job
from app.schemas.candidate import CandidateCreateRequest, CandidateUpdateRequest

EDITABLE_FIELDS = frozenset({"full_name", "email", "phone", "notes", "status"})


def create(db: Session, data: CandidateCreateRequest) -> Candidate:
    candidate = Candidate(
        full_name=data.full_name,
        email=data.email,
        phone=data.phone,
        notes=data.notes,
        status=data.status,
    )
    db.add(candidate)
    db.commit()
    db.refresh(candidate)
    return candidate


def get_by_id(db: Session, candidate_id: int) -> Optional[Candidate]:
    return db.query(Candidate).filter(Candidate.id == candidate_id).first()


def get_by_name(db: Session, full_name: str) -> Optional[Candidate]:
    """
    Case-insensitive exact name lookup.

    Names are not unique; a Hired match is preferred, then the oldest row.
    """
    name = (full_name or "").strip().lower()
    hired_first = case((Candidate.status == CandidateStatus.HIRED, 0), else_=1)
    return (
        db.query(Candidate)
        .filter(func.lower(func.trim(Candidate.full_name)) == name)
        .order_by(hired_first, Candidate.id)
        .first()
    )


def get_multi(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    status: Optional[CandidateStatus] = None
) -> List[Candidate]:
    query = db.query(Candidate)
    if status:
        query = query.filter(Candidate.status == status)
    return query.order_by(Candidate.created_at.desc(), Candidate.id.desc()).offset(skip).limit(limit).all()


def get_unassigned_hired(db: Session) -> List[Candidate]:
    """Hired candidates whose name is not the employee on any position."""
    assigned = (
        db.query(Job.id)
        .filter(func.lower(func.trim(Job.employee)) == func.lower(Candidate.full_name))
        .exists()
    )
    return (
        db.query(Candidate)
        .filter(Candidate.status == CandidateStatus.HIRED, ~assigned)
        .order_by(Candidate.full_name)
        .all()
    )


def update(db: Session, candidate_id: int, changes: CandidateUpdateRequest) -> Optional[Candidate]:
    stmt = build_update(Candidate, candidate_id, changes.model_dump(exclude_unset=True), EDITABLE_FIELDS)
    result = db.execute(stmt)
    if result.rowcount == 0:
        db.rollback()
        return None
    db.commit()
    return get_by_id(db, candidate_id)


def advance(db: Session, candidate: Candidate) -> Candidate:
    """Move one pipeline stage forward; a no-op at the last stage."""
    return _set_status(db, candidate, next_status(candidate.status))


def revert(db: Session, candidate: Candidate) -> Candidate:
    """Move one pipeline stage back; a no-op at the first stage."""
    return _set_status(db, candidate, previous_status(candidate.status))


def _set_status(db: Session, candidate: Candidate, status: CandidateStatus) -> Candidate:
    if candidate.status == status:
        return candidate
    candidate.status = status
    db.commit()
    db.refresh(candidate)
    return candidate


def delete(db: Session, candidate_id: int) -> bool:
    candidate = get_by_id(db, candidate_id)
    if not candidate:
        return False
    db.delete(candidate)
    db.commit()
    return True
