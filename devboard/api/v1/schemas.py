# devboard/api/v1/schemas.py
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from devboard.db.documents import Application, Job, SavedJob, User


class CamelModel(BaseModel):
    # snake_case in Python, camelCase on the wire
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---- requests ----

class RegisterIn(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    role: Literal["user", "admin"] = "user"

class LoginIn(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    email: EmailStr
    password: str = Field(min_length=1)

class JobCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=3, max_length=100)
    company: str = Field(min_length=2, max_length=100)
    description: str = Field(min_length=10, max_length=5000)
    requirements: Optional[Union[str, List[str]]] = None
    location: str = Field(min_length=1, max_length=100)
    type: Literal["Full-time", "Part-time", "Contract", "Internship"]
    salary: Optional[str] = Field(default=None, max_length=50)

    @field_validator("requirements")
    @classmethod
    def _requirement_length(cls, value):
        lines = value.splitlines() if isinstance(value, str) else (value or [])
        if any(len(line.strip()) > 200 for line in lines):
            raise ValueError("each requirement must be at most 200 characters")
        return value

class StatusUpdate(BaseModel):
    status: str

class SaveJobIn(CamelModel):
    job_id: Optional[str] = None


# ---- responses ----

class UserOut(BaseModel):
    id: str
    name: str
    email: str
    role: str

class AuthOut(BaseModel):
    token: str
    user: UserOut

class DocumentOut(CamelModel):
    # stored records keep Mongo's "_id" key on the wire
    id: str = Field(alias="_id")

class PosterOut(DocumentOut):
    name: str
    email: str

class JobOut(DocumentOut):
    title: str
    company: str
    description: str
    requirements: List[str]
    location: str
    type: str
    salary: str
    posted_by: Optional[PosterOut]
    posted_at: datetime
    status: str

class MyJobOut(JobOut):
    application_count: int

class JobPage(CamelModel):
    jobs: List[JobOut]
    total_pages: int
    current_page: int
    total: int

class ApplicantOut(DocumentOut):
    name: str
    email: str

class JobSummaryOut(DocumentOut):
    title: str
    company: str

class ApplicationOut(DocumentOut):
    job_id: Union[JobSummaryOut, str, None]
    user_id: Union[ApplicantOut, str, None]
    resume_file_path: str
    cover_letter: str
    status: str
    applied_at: datetime

class CheckApplicationOut(CamelModel):
    has_applied: bool
    application: Optional[ApplicationOut] = None

class SavedJobOut(DocumentOut):
    job_id: JobOut
    user_id: str
    saved_at: datetime

class CheckSavedOut(CamelModel):
    is_saved: bool

class MessageOut(BaseModel):
    message: str
    job: Optional[JobOut] = None

class DashboardStats(CamelModel):
    total_jobs: int
    active_jobs: int
    total_applications: int
    pending_applications: int

class DashboardCharts(CamelModel):
    applications_by_month: List[Dict[str, Any]]
    applications_by_status: List[Dict[str, Any]]

class DashboardOut(CamelModel):
    stats: DashboardStats
    charts: DashboardCharts
    recent_jobs: List[MyJobOut]


# ---- document -> response ----

def user_out(user: User) -> UserOut:
    return UserOut(id=str(user.id), name=user.name, email=user.email, role=user.role)

def _job_fields(job: Job, poster: Optional[User]) -> Dict[str, Any]:
    return dict(
        id=str(job.id),
        title=job.title,
        company=job.company,
        description=job.description,
        requirements=job.requirements,
        location=job.location,
        type=job.type,
        salary=job.salary,
        # null once the posting admin no longer exists
        posted_by=PosterOut(id=str(poster.id), name=poster.name, email=poster.email) if poster else None,
        posted_at=job.posted_at,
        status=job.status,
    )

def job_out(job: Job, poster: Optional[User] = None) -> JobOut:
    return JobOut(**_job_fields(job, poster))

def my_job_out(job: Job, poster: Optional[User], application_count: int) -> MyJobOut:
    return MyJobOut(**_job_fields(job, poster), application_count=application_count)

def application_out(application: Application, user: Optional[User] = None, job: Optional[Job] = None) -> ApplicationOut:
    return ApplicationOut(
        id=str(application.id),
        job_id=JobSummaryOut(id=str(job.id), title=job.title, company=job.company) if job else str(application.job_id),
        user_id=ApplicantOut(id=str(user.id), name=user.name, email=user.email) if user else str(application.user_id),
        resume_file_path=application.resume_file_path,
        cover_letter=application.cover_letter,
        status=application.status,
        applied_at=application.applied_at,
    )

def saved_job_out(saved: SavedJob, job: Job, poster: Optional[User] = None) -> SavedJobOut:
    return SavedJobOut(id=str(saved.id), job_id=job_out(job, poster), user_id=str(saved.user_id), saved_at=saved.saved_at)
