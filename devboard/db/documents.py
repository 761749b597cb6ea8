"""Beanie document models for the DevBoard collections.

Uniqueness rules (one email per account, one application and one bookmark
per user and job) are declared as unique indexes so MongoDB enforces them
even when two requests race past the repository pre-checks.
"""
from datetime import datetime, timezone
from typing import List, Literal, Optional

from beanie import Document, PydanticObjectId
from bson import ObjectId
from pydantic import Field
from pymongo import ASCENDING, DESCENDING, IndexModel

Role = Literal["user", "admin"]
JobType = Literal["Full-time", "Part-time", "Contract", "Internship"]
JobStatus = Literal["active", "closed"]
ApplicationStatus = Literal["pending", "reviewed", "shortlisted", "rejected"]

JOB_TYPES = ("Full-time", "Part-time", "Contract", "Internship")
APPLICATION_STATUSES = ("pending", "reviewed", "shortlisted", "rejected")


def utcnow() -> datetime:
    # Mongo hands back naive UTC datetimes; keep ours the same shape
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(Document):
    name: str
    email: str
    password_hash: str
    role: Role = "user"
    created_at: datetime = Field(default_factory=utcnow)

    class Settings:
        name = "users"
        indexes = [IndexModel([("email", ASCENDING)], unique=True)]


class Job(Document):
    title: str
    company: str
    description: str
    requirements: List[str] = Field(default_factory=list)
    location: str
    type: JobType
    salary: str = ""
    posted_by: PydanticObjectId
    posted_at: datetime = Field(default_factory=utcnow)
    status: JobStatus = "active"

    class Settings:
        name = "jobs"
        indexes = [
            IndexModel([("posted_by", ASCENDING)]),
            IndexModel([("status", ASCENDING), ("posted_at", DESCENDING)]),
        ]


class Application(Document):
    job_id: PydanticObjectId
    user_id: PydanticObjectId
    resume_file_path: str
    cover_letter: str = ""
    status: ApplicationStatus = "pending"
    applied_at: datetime = Field(default_factory=utcnow)

    class Settings:
        name = "applications"
        indexes = [
            IndexModel([("job_id", ASCENDING), ("user_id", ASCENDING)], unique=True),
            IndexModel([("resume_file_path", ASCENDING)]),
        ]


class SavedJob(Document):
    job_id: PydanticObjectId
    user_id: PydanticObjectId
    saved_at: datetime = Field(default_factory=utcnow)

    class Settings:
        name = "saved_jobs"
        indexes = [
            IndexModel([("job_id", ASCENDING), ("user_id", ASCENDING)], unique=True),
        ]


DOCUMENT_MODELS = [User, Job, Application, SavedJob]


def parse_object_id(value: Optional[str]) -> Optional[PydanticObjectId]:
    """Return the ObjectId for ``value`` or None when it is not a valid id."""
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        return None
    return PydanticObjectId(value)
