# devboard/repositories/saved_jobs.py
import logging
from typing import List, Tuple

from beanie import PydanticObjectId
from beanie.operators import In
from pymongo.errors import DuplicateKeyError

from devboard.core.errors import Conflict, NotFound, ValidationError
from devboard.db.documents import Job, SavedJob, parse_object_id

logger = logging.getLogger(__name__)

ALREADY_SAVED = "Job already saved"


async def _find(job_oid: PydanticObjectId, user_id: str):
    return await SavedJob.find_one(SavedJob.job_id == job_oid, SavedJob.user_id == PydanticObjectId(user_id))

async def save(job_id: str, user_id: str) -> SavedJob:
    job_oid = parse_object_id(job_id)
    if job_oid is None:
        raise ValidationError("Invalid job ID")
    if not await Job.get(job_oid):
        raise NotFound("Job not found")
    if await _find(job_oid, user_id):
        raise Conflict(ALREADY_SAVED)

    saved = SavedJob(job_id=job_oid, user_id=PydanticObjectId(user_id))
    try:
        await saved.insert()
    except DuplicateKeyError as exc:
        raise Conflict(ALREADY_SAVED) from exc
    logger.info("User %s saved job %s", user_id, job_id)
    return saved

async def unsave(job_id: str, user_id: str) -> None:
    job_oid = parse_object_id(job_id)
    saved = await _find(job_oid, user_id) if job_oid else None
    if not saved:
        raise NotFound("Saved job not found")
    await saved.delete()

async def list_for_user(user_id: str) -> List[Tuple[SavedJob, Job]]:
    """Newest saves first; bookmarks whose job is gone are skipped."""
    saved = await SavedJob.find(SavedJob.user_id == PydanticObjectId(user_id)).sort("-saved_at", "-_id").to_list()
    job_ids = list({s.job_id for s in saved})
    jobs = {j.id: j for j in await Job.find(In(Job.id, job_ids)).to_list()} if job_ids else {}
    return [(s, jobs[s.job_id]) for s in saved if s.job_id in jobs]

async def is_saved(job_id: str, user_id: str) -> bool:
    job_oid = parse_object_id(job_id)
    if job_oid is None:
        raise NotFound("Job not found")
    return await _find(job_oid, user_id) is not None
