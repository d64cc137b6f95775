import enum
from sqlalchemy import Column, Integer, String, Date, DateTime, Enum, Index, and_, func
from app.core.database import Base


class JobStatus(str, enum.Enum):
    """
    Position fill status.

    - OPEN: no employee assigned
    - FILLED: an employee is assigned (set only by assign, cleared by unassign)
    """
    OPEN = "Open"
    FILLED = "Filled"


class Job(Base):
    """
    A position tracked by the board.

    The assigned employee is stored by name, not as a foreign key to
    Candidate; assignment matches on the candidate's full name.
    """
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False, index=True)
    job_number = Column(String, nullable=True)
    department = Column(String, nullable=True, index=True)
    due_date = Column(Date, nullable=True)
    filled_date = Column(Date, nullable=True)

    employee = Column(String, nullable=True, index=True)
    employee_photo_url = Column(String, nullable=True)

    status = Column(
        Enum(JobStatus, name="job_status", native_enum=False, values_callable=lambda e: [m.value for m in e]),
        default=JobStatus.OPEN,
        nullable=False,
        index=True,
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    @property
    def is_filled(self) -> bool:
        return bool((self.employee or "").strip())

    def __repr__(self):
        return f"<Job(id={self.id}, title='{self.title}', status={self.status.value})>"


# One position per employee name; Open rows carry no name and are not indexed
_named = and_(Job.employee.isnot(None), func.trim(Job.employee) != "")
Index(
    "uq_jobs_employee_name",
    func.lower(func.trim(Job.employee)),
    unique=True,
    postgresql_where=_named,
    sqlite_where=_named,
)
