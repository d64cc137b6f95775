"""
Concurrent assignment and the one-position-per-name rule.

Runs against a file-backed SQLite database so each thread gets its own
connection, the way pooled sessions behave under the API's threadpool.
"""

import threading

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from app.core.database import Base
from app.models.candidate import Candidate, CandidateStatus
from app.models.job import Job, JobStatus
from app.services import assignment
from app.services.assignment import AssignmentError

THREADS = 8


@pytest.fixture
def file_session_factory(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'race.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


def _run_concurrently(factory, targets):
    barrier = threading.Barrier(len(targets))
    outcomes = [None] * len(targets)

    def worker(index, job_id, kwargs):
        db = factory()
        try:
            barrier.wait()
            assignment.assign(db, job_id, **kwargs)
            outcomes[index] = "ok"
        except AssignmentError as e:
            outcomes[index] = e.code
        finally:
            db.close()

    threads = [
        threading.Thread(target=worker, args=(i, job_id, kwargs))
        for i, (job_id, kwargs) in enumerate(targets)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=60)
    return outcomes


def test_one_candidate_many_jobs_single_winner(file_session_factory):
    db = file_session_factory()
    jane = Candidate(full_name="Jane Doe", status=CandidateStatus.HIRED)
    jobs = [Job(title=f"Position {i}", status=JobStatus.OPEN) for i in range(THREADS)]
    db.add(jane)
    db.add_all(jobs)
    db.commit()
    job_ids = [j.id for j in jobs]
    candidate_id = jane.id
    db.close()

    outcomes = _run_concurrently(
        file_session_factory,
        [(job_id, {"candidate_id": candidate_id}) for job_id in job_ids],
    )

    assert outcomes.count("ok") == 1
    assert outcomes.count("candidate_already_assigned") == THREADS - 1

    db = file_session_factory()
    filled = db.query(Job).filter(Job.status == JobStatus.FILLED).all()
    assert len(filled) == 1
    assert filled[0].employee == "Jane Doe"
    db.close()


def test_many_candidates_one_job_single_winner(file_session_factory):
    db = file_session_factory()
    job = Job(title="Welder", status=JobStatus.OPEN)
    candidates = [Candidate(full_name=f"Hire {i}", status=CandidateStatus.HIRED) for i in range(THREADS)]
    db.add(job)
    db.add_all(candidates)
    db.commit()
    job_id = job.id
    candidate_ids = [c.id for c in candidates]
    db.close()

    outcomes = _run_concurrently(
        file_session_factory,
        [(job_id, {"candidate_id": cid}) for cid in candidate_ids],
    )

    assert outcomes.count("ok") == 1
    assert outcomes.count("job_already_filled") == THREADS - 1


def test_same_name_candidates_many_jobs_single_winner(file_session_factory):
    db = file_session_factory()
    namesakes = [Candidate(full_name="Jane Doe", status=CandidateStatus.HIRED) for _ in range(2)]
    jobs = [Job(title=f"Position {i}", status=JobStatus.OPEN) for i in range(THREADS)]
    db.add_all(namesakes)
    db.add_all(jobs)
    db.commit()
    job_ids = [j.id for j in jobs]
    candidate_ids = [c.id for c in namesakes]
    db.close()

    outcomes = _run_concurrently(
        file_session_factory,
        [(job_id, {"candidate_id": candidate_ids[i % 2]}) for i, job_id in enumerate(job_ids)],
    )

    assert outcomes.count("ok") == 1
    assert outcomes.count("candidate_already_assigned") == THREADS - 1

    db = file_session_factory()
    assert db.query(Job).filter(Job.status == JobStatus.FILLED).count() == 1
    db.close()


def test_store_rejects_second_job_with_same_employee(file_session_factory):
    db = file_session_factory()
    db.add(Job(title="Welder", employee="Jane Doe", status=JobStatus.FILLED))
    db.commit()

    db.add(Job(title="Fitter", employee=" jane DOE", status=JobStatus.FILLED))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()

    db.add_all([Job(title="Open A"), Job(title="Open B")])
    db.commit()
    assert db.query(Job).count() == 3
    db.close()
