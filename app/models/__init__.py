"""
Database models package.
"""

from app.models.user import User
from app.models.job import Job, JobStatus
from app.models.candidate import Candidate, CandidateStatus
from app.models.permission import AbilityDefinition, RolePermission

__all__ = [
    "User",
    "Job",
    "JobStatus",
    "Candidate",
    "CandidateStatus",
    "AbilityDefinition",
    "RolePermission",
]
