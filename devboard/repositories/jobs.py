# devboard/repositories/jobs.py
import logging
import math
import re
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from beanie import PydanticObjectId
from beanie.operators import In

from devboard.core.errors import Forbidden, NotFound
from devboard.db.documents import JOB_TYPES, Application, Job, User, parse_object_id

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 50


def split_requirements(requirements: Union[str, Iterable[str], None]) -> List[str]:
    """
    Accept a newline separated block or a list and return the trimmed,
    non-empty requirement lines in order.
    """
    if not requirements:
        return []
    lines = requirements.splitlines() if isinstance(requirements, str) else requirements
    return [line.strip() for line in lines if line and line.strip()]

def clamp_paging(page: Optional[int], limit: Optional[int]) -> Tuple[int, int]:
    page = max(1, page or 1)
    limit = DEFAULT_PAGE_SIZE if limit is None else limit
    limit = min(MAX_PAGE_SIZE, max(1, limit))
    return page, limit

def _contains(text: str) -> Dict[str, str]:
    # literal, case-insensitive substring match
    return {"$regex": re.escape(text), "$options": "i"}

def build_listing_query(search: Optional[str] = None, location: Optional[str] = None,
                        job_type: Optional[str] = None) -> Dict[str, Any]:
    query: Dict[str, Any] = {"status": "active"}
    if search and search.strip():
        needle = _contains(search.strip())
        query["$or"] = [{"title": needle}, {"company": needle}, {"description": needle}]
    if location and location.strip():
        query["location"] = _contains(location.strip())
    if job_type and job_type != "all" and job_type in JOB_TYPES:
        query["type"] = job_type
    return query


async def create_job(owner_id: str, fields: Dict[str, Any]) -> Job:
    job = Job(
        title=fields["title"].strip(),
        company=fields["company"].strip(),
        description=fields["description"].strip(),
        requirements=split_requirements(fields.get("requirements")),
        location=fields["location"].strip(),
        type=fields["type"],
        salary=(fields.get("salary") or "").strip(),
        posted_by=PydanticObjectId(owner_id),
    )
    await job.insert()
    logger.info("Job %s created by %s", job.id, owner_id)
    return job

async def list_jobs(search: Optional[str] = None, location: Optional[str] = None,
                    job_type: Optional[str] = None, page: Optional[int] = 1,
                    limit: Optional[int] = DEFAULT_PAGE_SIZE) -> Dict[str, Any]:
    """Active jobs only, newest first, one page at a time."""
    page, limit = clamp_paging(page, limit)
    query = build_listing_query(search, location, job_type)

    jobs = await Job.find(query).sort("-posted_at", "-_id").skip((page - 1) * limit).limit(limit).to_list()
    total = await Job.find(query).count()
    return {
        "jobs": jobs,
        "total": total,
        "total_pages": math.ceil(total / limit),
        "current_page": page,
    }

async def get_job(job_id: str) -> Job:
    oid = parse_object_id(job_id)
    job = await Job.get(oid) if oid else None
    if not job:
        raise NotFound("Job not found")
    return job

async def get_owned_job(job_id: str, owner_id: str) -> Job:
    job = await get_job(job_id)
    if str(job.posted_by) != owner_id:
        raise Forbidden("You don't have permission to manage this job")
    return job

async def job_ids_for_owner(owner_id: str) -> List[PydanticObjectId]:
    jobs = await Job.find(Job.posted_by == PydanticObjectId(owner_id)).to_list()
    return [j.id for j in jobs]

async def application_counts(job_ids: List[PydanticObjectId]) -> Dict[PydanticObjectId, int]:
    if not job_ids:
        return {}
    rows = await Application.aggregate([
        {"$match": {"job_id": {"$in": list(job_ids)}}},
        {"$group": {"_id": "$job_id", "count": {"$sum": 1}}},
    ]).to_list()
    return {PydanticObjectId(r["_id"]): r["count"] for r in rows}

async def list_my_jobs(owner_id: str, limit: Optional[int] = None) -> List[Tuple[Job, int]]:
    """Every job the admin posted, any status, with its application count."""
    cursor = Job.find(Job.posted_by == PydanticObjectId(owner_id)).sort("-posted_at", "-_id")
    if limit:
        cursor = cursor.limit(limit)
    jobs = await cursor.to_list()
    counts = await application_counts([j.id for j in jobs])
    return [(j, counts.get(j.id, 0)) for j in jobs]

async def close_or_delete(job_id: str, owner_id: str) -> Tuple[str, Job]:
    """
    Jobs that already have applications are only closed so the applications
    keep a valid reference; jobs without any are removed.
    """
    job = await get_owned_job(job_id, owner_id)
    count = await Application.find(Application.job_id == job.id).count()
    if count > 0:
        if job.status != "closed":
            job.status = "closed"
            await job.save()
        logger.info("Job %s closed (%s applications)", job.id, count)
        return "closed", job

    await job.delete()
    logger.info("Job %s deleted", job.id)
    return "deleted", job

async def posters_for(jobs: Iterable[Job]) -> Dict[PydanticObjectId, User]:
    """Resolve the posting admins of ``jobs`` in one query."""
    ids = list({j.posted_by for j in jobs})
    if not ids:
        return {}
    users = await User.find(In(User.id, ids)).to_list()
    return {u.id: u for u in users}
