"""
API endpoints for candidate management.

Handles the hiring pipeline: candidates move through a fixed sequence of
stages one step at a time (advance/revert), or jump directly to any stage
through an edit.
"""

import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.core.deps import CurrentUser, require_ability
from app.core.permissions import Ability
from app.crud import candidate as candidate_crud
from app.models.candidate import CandidateStatus, normalize_status
from app.schemas.candidate import CandidateCreateRequest, CandidateResponse, CandidateUpdateRequest

router = APIRouter(prefix="/candidates", tags=["Candidates"])
logger = logging.getLogger(__name__)


def _get_or_404(db: Session, candidate_id: int):
    candidate = candidate_crud.get_by_id(db, candidate_id)
    if not candidate:
        raise HTTPException(status_code=404, detail="Candidate not found")
    return candidate


@router.get("/", response_model=List[CandidateResponse])
def list_candidates(
    status: Optional[str] = Query(None, description="Pipeline stage, e.g. hired"),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    user: CurrentUser = Depends(require_ability(Ability.CANDIDATE_VIEW)),
    db: Session = Depends(get_db)
):
    """
    List candidates newest first.

    Args:
        status: Optional stage filter; 'Pending Pre-Employment' and
            'pending_pre_employment' are both accepted
    """
    status_filter: Optional[CandidateStatus] = None
    if status and status.strip().lower() != "all":
        status_filter = normalize_status(status)
        if status_filter is None:
            raise HTTPException(
                status_code=400,
                detail={"code": "invalid_status", "message": f"Unknown candidate status '{status}'"},
            )

    return candidate_crud.get_multi(db, skip=offset, limit=limit, status=status_filter)


@router.get("/{candidate_id}", response_model=CandidateResponse)
def get_candidate(
    candidate_id: int,
    user: CurrentUser = Depends(require_ability(Ability.CANDIDATE_VIEW)),
    db: Session = Depends(get_db)
):
    """Get a single candidate by ID."""
    return _get_or_404(db, candidate_id)


@router.post("/", status_code=201, response_model=CandidateResponse)
def create_candidate(
    request: CandidateCreateRequest,
    user: CurrentUser = Depends(require_ability(Ability.CANDIDATE_CREATE)),
    db: Session = Depends(get_db)
):
    candidate = candidate_crud.create(db, request)
    logger.info(f"Created candidate {candidate.id}: {candidate.full_name} ({candidate.status.value})")
    return candidate


@router.patch("/{candidate_id}", response_model=CandidateResponse)
def update_candidate(
    candidate_id: int,
    request: CandidateUpdateRequest,
    user: CurrentUser = Depends(require_ability(Ability.CANDIDATE_EDIT)),
    db: Session = Depends(get_db)
):
    """
    Edit a candidate. Only fields present in the body are changed.

    Setting ``status`` moves the candidate straight to that stage.
    """
    candidate = candidate_crud.update(db, candidate_id, request)
    if not candidate:
        raise HTTPException(status_code=404, detail="Candidate not found")

    logger.info(f"Updated candidate {candidate_id} fields {sorted(request.model_fields_set)}")
    return candidate


@router.delete("/{candidate_id}", status_code=204)
def delete_candidate(
    candidate_id: int,
    user: CurrentUser = Depends(require_ability(Ability.CANDIDATE_DELETE)),
    db: Session = Depends(get_db)
):
    """
    Delete a candidate.

    A position the candidate was assigned to keeps the employee name; clear it
    with the job's unassign endpoint.
    """
    deleted = candidate_crud.delete(db, candidate_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Candidate not found")

    logger.info(f"Deleted candidate {candidate_id}")
    return None


@router.post("/{candidate_id}/advance", response_model=CandidateResponse)
def advance_candidate(
    candidate_id: int,
    user: CurrentUser = Depends(require_ability(Ability.CANDIDATE_ADVANCE)),
    db: Session = Depends(get_db)
):
    """Move one stage forward. At the last stage nothing changes."""
    candidate = _get_or_404(db, candidate_id)
    previous = candidate.status
    candidate = candidate_crud.advance(db, candidate)
    logger.info(f"Candidate {candidate_id}: {previous.value} -> {candidate.status.value}")
    return candidate


@router.post("/{candidate_id}/revert", response_model=CandidateResponse)
def revert_candidate(
    candidate_id: int,
    user: CurrentUser = Depends(require_ability(Ability.CANDIDATE_REVERT)),
    db: Session = Depends(get_db)
):
    """Move one stage back. At the first stage nothing changes."""
    candidate = _get_or_404(db, candidate_id)
    previous = candidate.status
    candidate = candidate_crud.revert(db, candidate)
    logger.info(f"Candidate {candidate_id}: {previous.value} -> {candidate.status.value}")
    return candidate
