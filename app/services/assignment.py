"""
Job assignment workflow.

Assigning links a hired candidate to an open position by writing the
candidate's name into ``jobs.employee``. A candidate name may appear on at
most one position at a time, including when several assign requests for the
same candidate arrive at once.

The check-then-write runs inside one transaction:

1. Every candidate row carrying the name is locked (``SELECT ... FOR UPDATE``
   on PostgreSQL), so concurrent assigns of that name queue up behind each
   other even when they reference different rows.
2. Preconditions are checked and reported with a named reason code.
3. The write is a conditional ``UPDATE`` that only matches if the target job
   is still empty and no other job carries the name. If it matches nothing,
   the state is read again to report which condition was lost.

The unique index on ``lower(trim(jobs.employee))`` backs this up in the
store; a violation is reported as ``candidate_already_assigned``.

Failure precedence (first applicable wins):
job_not_found, candidate_not_found, candidate_not_hired,
job_already_filled, candidate_already_assigned.
Candidate checks come before the job-filled check so a non-hired candidate
is always reported as ``candidate_not_hired``.
"""

import logging
from datetime import date
from typing import Optional
from sqlalchemy import and_, exists, func, or_, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, aliased
from app.core.errors import AppError, ConflictError, NotFoundError
from app.crud import candidate as candidate_crud
from app.models.candidate import Candidate, CandidateStatus
from app.models.job import Job, JobStatus

logger = logging.getLogger(__name__)

JOB_NOT_FOUND = "job_not_found"
JOB_ALREADY_FILLED = "job_already_filled"
CANDIDATE_NOT_FOUND = "candidate_not_found"
CANDIDATE_NOT_HIRED = "candidate_not_hired"
CANDIDATE_ALREADY_ASSIGNED = "candidate_already_assigned"

_MESSAGES = {
    JOB_NOT_FOUND: "Job not found",
    JOB_ALREADY_FILLED: "Job is already filled",
    CANDIDATE_NOT_FOUND: "Candidate not found",
    CANDIDATE_NOT_HIRED: "Candidate must be hired before being assigned",
    CANDIDATE_ALREADY_ASSIGNED: "Candidate is already assigned to another job",
}


class AssignmentError(AppError):
    """An assignment precondition failed; ``code`` names which one."""

    def __init__(self, code: str):
        super().__init__(_MESSAGES[code], code=code)
        not_found = code in (JOB_NOT_FOUND, CANDIDATE_NOT_FOUND)
        self.status_code = NotFoundError.status_code if not_found else ConflictError.status_code


def _name_key(name: str) -> str:
    return (name or "").strip().lower()


def _job_is_open():
    return or_(Job.employee.is_(None), func.trim(Job.employee) == "")


def _assigned_elsewhere(name: str, job_id: int):
    other = aliased(Job)
    return exists().where(
        and_(
            other.id != job_id,
            func.lower(func.trim(other.employee)) == _name_key(name),
        )
    )


def _lock_name(db: Session, name: str) -> None:
    # Rows sharing a name share one employee slot; lock them together in id order
    (
        db.query(Candidate.id)
        .filter(func.lower(func.trim(Candidate.full_name)) == _name_key(name))
        .order_by(Candidate.id)
        .with_for_update()
        .all()
    )


def _load_candidate(
    db: Session,
    candidate_id: Optional[int],
    candidate_name: Optional[str],
) -> Optional[Candidate]:
    if candidate_id is not None:
        candidate_name = db.query(Candidate.full_name).filter(Candidate.id == candidate_id).scalar()
        if candidate_name is None:
            return None
    _lock_name(db, candidate_name)
    if candidate_id is not None:
        return candidate_crud.get_by_id(db, candidate_id)
    return candidate_crud.get_by_name(db, candidate_name)


def _check(db: Session, job: Optional[Job], candidate: Optional[Candidate]) -> None:
    if job is None:
        raise AssignmentError(JOB_NOT_FOUND)
    if candidate is None:
        raise AssignmentError(CANDIDATE_NOT_FOUND)
    if candidate.status != CandidateStatus.HIRED:
        raise AssignmentError(CANDIDATE_NOT_HIRED)
    if job.is_filled:
        raise AssignmentError(JOB_ALREADY_FILLED)
    if db.query(_assigned_elsewhere(candidate.full_name, job.id)).scalar():
        raise AssignmentError(CANDIDATE_ALREADY_ASSIGNED)


def assign(
    db: Session,
    job_id: int,
    candidate_id: Optional[int] = None,
    candidate_name: Optional[str] = None,
    today: Optional[date] = None,
) -> Job:
    """
    Assign a hired candidate to an open job.

    The candidate is referenced by id or by exact (case-insensitive) full name.
    On success the job becomes Filled with ``employee`` set to the candidate's
    name; ``filled_date`` is set to today only if it was empty, so a
    date entered by an edit beforehand is kept.

    Raises:
        AssignmentError: With one of the reason codes listed in the module doc
    """
    today = today or date.today()
    try:
        job = db.query(Job).filter(Job.id == job_id).first()
        candidate = _load_candidate(db, candidate_id, candidate_name) if job else None
        _check(db, job, candidate)

        name = candidate.full_name.strip()
        stmt = (
            update(Job)
            .where(Job.id == job_id, _job_is_open(), ~_assigned_elsewhere(name, job_id))
            .values(
                employee=name,
                status=JobStatus.FILLED,
                filled_date=func.coalesce(Job.filled_date, today),
            )
            .execution_options(synchronize_session=False)
        )
        try:
            updated = db.execute(stmt).rowcount
            if updated:
                db.commit()
        except IntegrityError:
            # The unique employee-name index caught a concurrent assign of the same name
            updated = 0

        if not updated:
            # Another request changed the job or assigned the name since the checks
            db.rollback()
            job = db.query(Job).filter(Job.id == job_id).first()
            candidate = _load_candidate(db, candidate_id, candidate_name) if job else None
            _check(db, job, candidate)
            raise AssignmentError(CANDIDATE_ALREADY_ASSIGNED)
    except AssignmentError as e:
        db.rollback()
        logger.info(f"Assign rejected for job {job_id}: {e.code}")
        raise

    job = db.query(Job).filter(Job.id == job_id).first()
    logger.info(f"Assigned '{job.employee}' to job {job_id}")
    return job


def unassign(db: Session, job_id: int) -> Job:
    """
    Clear the employee from a job and reopen it.

    Clears employee, filled_date and employee_photo_url. Unassigning a job
    that is already Open changes nothing and returns it as is.

    Raises:
        AssignmentError: job_not_found
    """
    job = db.query(Job).filter(Job.id == job_id).first()
    if job is None:
        raise AssignmentError(JOB_NOT_FOUND)

    if job.status == JobStatus.OPEN and not job.is_filled:
        return job

    previous = job.employee
    job.employee = None
    job.filled_date = None
    job.employee_photo_url = None
    job.status = JobStatus.OPEN
    db.commit()
    db.refresh(job)

    logger.info(f"Unassigned '{previous}' from job {job_id}")
    return job
