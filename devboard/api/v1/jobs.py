# devboard/api/v1/jobs.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from devboard.api.v1.auth import require_admin
from devboard.api.v1.schemas import JobCreate, JobOut, JobPage, MessageOut, MyJobOut, job_out, my_job_out
from devboard.core.security import TokenClaims
from devboard.repositories import jobs as jobs_repo

router = APIRouter()


@router.get("/jobs", response_model=JobPage)
async def list_jobs(
    search: Optional[str] = Query(None),
    location: Optional[str] = Query(None),
    type: Optional[str] = Query(None),
    page: int = Query(1),
    limit: int = Query(jobs_repo.DEFAULT_PAGE_SIZE),
):
    result = await jobs_repo.list_jobs(search, location, type, page, limit)
    posters = await jobs_repo.posters_for(result["jobs"])
    return JobPage(
        jobs=[job_out(j, posters.get(j.posted_by)) for j in result["jobs"]],
        total_pages=result["total_pages"],
        current_page=result["current_page"],
        total=result["total"],
    )

@router.get("/jobs/{job_id}", response_model=JobOut)
async def get_job(job_id: str):
    job = await jobs_repo.get_job(job_id)
    posters = await jobs_repo.posters_for([job])
    return job_out(job, posters.get(job.posted_by))

@router.post("/jobs", status_code=201, response_model=JobOut)
async def create_job(payload: JobCreate, admin: TokenClaims = Depends(require_admin)):
    job = await jobs_repo.create_job(admin.user_id, payload.model_dump())
    posters = await jobs_repo.posters_for([job])
    return job_out(job, posters.get(job.posted_by))

@router.delete("/jobs/{job_id}", response_model=MessageOut, response_model_exclude_none=True)
async def delete_job(job_id: str, admin: TokenClaims = Depends(require_admin)):
    action, job = await jobs_repo.close_or_delete(job_id, admin.user_id)
    if action == "closed":
        posters = await jobs_repo.posters_for([job])
        return MessageOut(
            message="Job marked as closed due to existing applications",
            job=job_out(job, posters.get(job.posted_by)),
        )
    return MessageOut(message="Job deleted successfully")

@router.get("/my-jobs", response_model=List[MyJobOut])
async def my_jobs(admin: TokenClaims = Depends(require_admin)):
    rows = await jobs_repo.list_my_jobs(admin.user_id)
    posters = await jobs_repo.posters_for([j for j, _ in rows])
    return [my_job_out(j, posters.get(j.posted_by), count) for j, count in rows]
