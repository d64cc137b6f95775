import logging
from typing import List, Optional
from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import CurrentUser, get_job_reader, require_ability
from app.core.permissions import Ability
from app.crud import candidate as candidate_crud
from app.crud import job as job_crud
from app.models.job import JobStatus
from app.schemas.candidate import CandidateResponse
from app.schemas.job import JobAssignRequest, JobCreateRequest, JobResponse, JobUpdateRequest
from app.services import assignment

router = APIRouter(prefix="/jobs", tags=["Jobs"])
logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 500


def _parse_status_filter(raw: Optional[str]) -> Optional[JobStatus]:
    """'open' / 'filled' in any case; empty or 'all' means no filter."""
    if raw is None or raw.strip().lower() in ("", "all"):
        return None
    for status in JobStatus:
        if status.value.lower() == raw.strip().lower():
            return status
    raise HTTPException(
        status_code=400,
        detail={"code": "invalid_status", "message": "status must be one of: open, filled, all"},
    )


@router.post("/", status_code=201, response_model=JobResponse)
def create_job(
    request: JobCreateRequest,
    user: CurrentUser = Depends(require_ability(Ability.JOB_CREATE)),
    db: Session = Depends(get_db)
):
    """
    Create a new position.

    New positions always start Open with no employee; use the assign
    endpoint to fill them.
    """
    new_job = job_crud.create(db, request)
    logger.info(f"Created job {new_job.id}: {new_job.title} (by user {user.id})")
    return new_job


@router.get("/", response_model=List[JobResponse])
def list_jobs(
    status: Optional[str] = Query(None, description="open, filled or all"),
    limit: int = Query(100, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    reader: Optional[CurrentUser] = Depends(get_job_reader),
    db: Session = Depends(get_db)
):
    """
    List positions newest first, with pagination and optional status filtering.

    Args:
        status: Optional filter, case-insensitive (open, filled, all)
        limit: Maximum number of records to return (default: 100, max: 500)
        offset: Number of records to skip (default: 0)
    """
    status_filter = _parse_status_filter(status)
    return job_crud.get_multi(db, skip=offset, limit=limit, status=status_filter)


@router.get("/eligible-candidates", response_model=List[CandidateResponse])
def list_eligible_candidates(
    user: CurrentUser = Depends(require_ability(Ability.JOB_ASSIGN)),
    db: Session = Depends(get_db)
):
    """Hired candidates not yet assigned to any position (the assign picker)."""
    return candidate_crud.get_unassigned_hired(db)


@router.get("/{job_id}", response_model=JobResponse)
def get_job(
    job_id: int,
    reader: Optional[CurrentUser] = Depends(get_job_reader),
    db: Session = Depends(get_db)
):
    """Retrieve a position by ID."""
    job = job_crud.get_by_id(db, job_id)

    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    return job


@router.patch("/{job_id}", response_model=JobResponse)
def update_job(
    job_id: int,
    request: JobUpdateRequest,
    user: CurrentUser = Depends(require_ability(Ability.JOB_EDIT)),
    db: Session = Depends(get_db)
):
    """
    Edit position details. Only fields present in the body are changed.

    Status and employee cannot be edited here; sending either is rejected.
    """
    job = job_crud.update(db, job_id, request)

    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    logger.info(f"Updated job {job_id} fields {sorted(request.model_fields_set)}")
    return job


@router.delete("/{job_id}", status_code=204)
def delete_job(
    job_id: int,
    user: CurrentUser = Depends(require_ability(Ability.JOB_DELETE)),
    db: Session = Depends(get_db)
):
    """
    Delete a position by ID.
    """
    deleted = job_crud.delete(db, job_id)

    if not deleted:
        raise HTTPException(status_code=404, detail="Job not found")

    logger.info(f"Deleted job {job_id}")
    return None


@router.post("/{job_id}/assign", response_model=JobResponse)
def assign_job(
    job_id: int,
    request: JobAssignRequest,
    user: CurrentUser = Depends(require_ability(Ability.JOB_ASSIGN)),
    db: Session = Depends(get_db)
):
    """
    Assign a hired candidate to an open position.

    Failures carry a ``code``: job_not_found, candidate_not_found (404) or
    candidate_not_hired, job_already_filled, candidate_already_assigned (409).
    """
    return assignment.assign(
        db,
        job_id,
        candidate_id=request.candidate_id,
        candidate_name=request.candidate_name,
    )


@router.post("/{job_id}/unassign", response_model=JobResponse)
def unassign_job(
    job_id: int,
    user: CurrentUser = Depends(require_ability(Ability.JOB_UNASSIGN)),
    db: Session = Depends(get_db)
):
    """Clear the employee, filled date and photo, and reopen the position."""
    return assignment.unassign(db, job_id)
