# devboard/api/v1/saved_jobs.py
from typing import List

from fastapi import APIRouter, Depends

from devboard.api.v1.auth import get_current_user
from devboard.api.v1.schemas import CheckSavedOut, MessageOut, SavedJobOut, SaveJobIn, saved_job_out
from devboard.core.errors import ValidationError
from devboard.core.security import TokenClaims
from devboard.repositories import saved_jobs as saved_repo
from devboard.repositories.jobs import posters_for

router = APIRouter()


@router.post("/save-job", status_code=201, response_model=MessageOut, response_model_exclude_none=True)
async def save_job(payload: SaveJobIn, current_user: TokenClaims = Depends(get_current_user)):
    if not payload.job_id:
        raise ValidationError("Job ID is required")
    await saved_repo.save(payload.job_id, current_user.user_id)
    return MessageOut(message="Job saved successfully")

@router.delete("/save-job/{job_id}", response_model=MessageOut, response_model_exclude_none=True)
async def unsave_job(job_id: str, current_user: TokenClaims = Depends(get_current_user)):
    await saved_repo.unsave(job_id, current_user.user_id)
    return MessageOut(message="Job unsaved successfully")

@router.get("/saved-jobs", response_model=List[SavedJobOut])
async def saved_jobs(current_user: TokenClaims = Depends(get_current_user)):
    rows = await saved_repo.list_for_user(current_user.user_id)
    posters = await posters_for([job for _, job in rows])
    return [saved_job_out(s, job, posters.get(job.posted_by)) for s, job in rows]

@router.get("/check-saved/{job_id}", response_model=CheckSavedOut)
async def check_saved(job_id: str, current_user: TokenClaims = Depends(get_current_user)):
    return CheckSavedOut(is_saved=await saved_repo.is_saved(job_id, current_user.user_id))
