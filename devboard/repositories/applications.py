# devboard/repositories/applications.py
import logging
from typing import List, Optional, Tuple

from beanie import PydanticObjectId
from beanie.operators import In
from fastapi import UploadFile
from pymongo.errors import DuplicateKeyError

from devboard.core.errors import Conflict, Forbidden, NotFound, ValidationError
from devboard.core.security import TokenClaims
from devboard.db.documents import APPLICATION_STATUSES, Application, Job, User, parse_object_id
from devboard.repositories.jobs import get_owned_job, job_ids_for_owner
from devboard.services import storage

logger = logging.getLogger(__name__)

ALREADY_APPLIED = "You have already applied for this job"
MAX_COVER_LETTER = 2000

Expanded = Tuple[Application, Optional[User], Optional[Job]]


async def apply(job_id: str, user_id: str, resume: UploadFile, cover_letter: Optional[str] = None) -> Application:
    """
    Store the resume, then record the application. Whatever goes wrong after
    the file is written, the file is removed again before the error propagates.
    """
    job_oid = parse_object_id(job_id)
    if job_oid is None:
        raise ValidationError("Invalid job ID")
    cover_letter = (cover_letter or "").strip()
    if len(cover_letter) > MAX_COVER_LETTER:
        raise ValidationError(f"Cover letter must be at most {MAX_COVER_LETTER} characters")

    path = await storage.store_resume(resume)
    try:
        application = await _record(job_oid, PydanticObjectId(user_id), path, cover_letter)
    except DuplicateKeyError as exc:
        # a concurrent request for the same job won the insert
        await storage.discard(path)
        raise Conflict(ALREADY_APPLIED) from exc
    except Exception:
        await storage.discard(path)
        raise

    logger.info("User %s applied to job %s (application %s)", user_id, job_id, application.id)
    return application

async def _record(job_oid: PydanticObjectId, user_oid: PydanticObjectId, path: str, cover_letter: str) -> Application:
    job = await Job.get(job_oid)
    if not job:
        raise NotFound("Job not found")
    if job.status != "active":
        raise ValidationError("This job is no longer accepting applications")
    if await _find(job_oid, user_oid):
        raise Conflict(ALREADY_APPLIED)

    application = Application(job_id=job_oid, user_id=user_oid, resume_file_path=path, cover_letter=cover_letter)
    await application.insert()
    return application

async def _find(job_oid: PydanticObjectId, user_oid: PydanticObjectId) -> Optional[Application]:
    return await Application.find_one(Application.job_id == job_oid, Application.user_id == user_oid)

async def expand(applications: List[Application]) -> List[Expanded]:
    """Pair each application with its applicant and job, two queries total."""
    user_ids = list({a.user_id for a in applications})
    job_ids = list({a.job_id for a in applications})
    users = {u.id: u for u in await User.find(In(User.id, user_ids)).to_list()} if user_ids else {}
    jobs = {j.id: j for j in await Job.find(In(Job.id, job_ids)).to_list()} if job_ids else {}
    return [(a, users.get(a.user_id), jobs.get(a.job_id)) for a in applications]

async def list_for_job(job_id: str, admin_id: str) -> List[Application]:
    job = await get_owned_job(job_id, admin_id)
    return await Application.find(Application.job_id == job.id).sort("-applied_at", "-_id").to_list()

async def list_for_caller(caller: TokenClaims) -> List[Application]:
    if caller.is_admin:
        job_ids = await job_ids_for_owner(caller.user_id)
        if not job_ids:
            return []
        query = Application.find(In(Application.job_id, job_ids))
    else:
        query = Application.find(Application.user_id == PydanticObjectId(caller.user_id))
    return await query.sort("-applied_at", "-_id").to_list()

async def update_status(application_id: str, status: str, admin_id: str) -> Application:
    if status not in APPLICATION_STATUSES:
        raise ValidationError("Invalid status. Must be: pending, reviewed, shortlisted, or rejected")

    oid = parse_object_id(application_id)
    application = await Application.get(oid) if oid else None
    if not application:
        raise NotFound("Application not found")

    job = await Job.get(application.job_id)
    if not job or str(job.posted_by) != admin_id:
        raise Forbidden("You don't have permission to update this application")

    # any status may follow any other
    if application.status != status:
        previous = application.status
        application.status = status
        await application.save()
        logger.info("Application %s moved %s -> %s", application.id, previous, status)
    return application

async def check_applied(job_id: str, user_id: str) -> Tuple[bool, Optional[Application]]:
    job_oid = parse_object_id(job_id)
    if job_oid is None:
        raise NotFound("Job not found")
    application = await _find(job_oid, PydanticObjectId(user_id))
    return application is not None, application

async def resume_permission(path: str, admin_id: str) -> Application:
    """The application that recorded ``path``, provided its job belongs to the admin."""
    application = await Application.find_one(Application.resume_file_path == path)
    job = await Job.get(application.job_id) if application else None
    if not job or str(job.posted_by) != admin_id:
        raise Forbidden("You don't have permission to access this file")
    return application
