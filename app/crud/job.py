"""
CRUD operations for Job model.

Assignment and unassignment live in app.services.assignment; the functions
here never change a job's status or employee.
"""

from typing import List, Optional
from sqlalchemy.orm import Session
from app.crud.updates import build_update
from app.models.job import Job, JobStatus
from app.schemas.job import JobCreateRequest, JobUpdateRequest

EDITABLE_FIELDS = frozenset({
    "title",
    "job_number",
    "department",
    "due_date",
    "filled_date",
    "employee_photo_url",
})


def create(db: Session, job_data: JobCreateRequest) -> Job:
    """
    Create a new position. New positions are always Open with no employee.
    """
    db_job = Job(
        title=job_data.title,
        job_number=job_data.job_number,
        department=job_data.department,
        due_date=job_data.due_date,
        filled_date=job_data.filled_date,
        employee=None,
        status=JobStatus.OPEN,
    )

    db.add(db_job)
    db.commit()
    db.refresh(db_job)

    return db_job


def get_by_id(db: Session, job_id: int) -> Optional[Job]:
    return db.query(Job).filter(Job.id == job_id).first()


def get_multi(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    status: Optional[JobStatus] = None
) -> List[Job]:
    """
    Retrieve positions newest first, with pagination and optional status filter.
    """
    query = db.query(Job)

    if status:
        query = query.filter(Job.status == status)

    return query.order_by(Job.created_at.desc(), Job.id.desc()).offset(skip).limit(limit).all()


def update(db: Session, job_id: int, changes: JobUpdateRequest) -> Optional[Job]:
    """
    Apply a partial edit. Only fields set on ``changes`` are written.

    Returns:
        Updated Job instance if found, None otherwise

    Raises:
        BadRequestError: If no fields were provided
    """
    stmt = build_update(Job, job_id, changes.model_dump(exclude_unset=True), EDITABLE_FIELDS)
    result = db.execute(stmt)
    if result.rowcount == 0:
        db.rollback()
        return None

    db.commit()
    return get_by_id(db, job_id)


def delete(db: Session, job_id: int) -> bool:
    """
    Delete a job by ID.

    Returns:
        True if deleted, False if not found
    """
    job = get_by_id(db, job_id)
    if not job:
        return False

    db.delete(job)
    db.commit()

    return True


def count_by_status(db: Session, status: JobStatus) -> int:
    return db.query(Job).filter(Job.status == status).count()
