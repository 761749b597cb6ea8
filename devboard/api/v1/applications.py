# devboard/api/v1/applications.py
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import FileResponse

from devboard.api.v1.auth import get_current_user, require_admin
from devboard.api.v1.schemas import ApplicationOut, CheckApplicationOut, StatusUpdate, application_out
from devboard.core.errors import NotFound, ValidationError
from devboard.core.security import TokenClaims
from devboard.repositories import applications as apps_repo
from devboard.services import storage

router = APIRouter()


async def _expanded_out(applications) -> List[ApplicationOut]:
    return [application_out(a, user, job) for a, user, job in await apps_repo.expand(applications)]


@router.post("/apply", status_code=201, response_model=ApplicationOut)
async def apply(
    job_id: Optional[str] = Form(None, alias="jobId"),
    cover_letter: Optional[str] = Form(None, alias="coverLetter"),
    resume: Optional[List[UploadFile]] = File(None),
    current_user: TokenClaims = Depends(get_current_user),
):
    """Multipart: ``jobId``, optional ``coverLetter`` and a single ``resume`` file."""
    if not job_id:
        raise ValidationError("Job ID is required")
    file = storage.pick_single_resume(resume)
    application = await apps_repo.apply(job_id, current_user.user_id, file, cover_letter)
    return (await _expanded_out([application]))[0]

@router.get("/applications", response_model=List[ApplicationOut])
async def list_applications(current_user: TokenClaims = Depends(get_current_user)):
    return await _expanded_out(await apps_repo.list_for_caller(current_user))

@router.get("/applications/{job_id}", response_model=List[ApplicationOut])
async def list_job_applications(job_id: str, admin: TokenClaims = Depends(require_admin)):
    return await _expanded_out(await apps_repo.list_for_job(job_id, admin.user_id))

@router.put("/applications/{application_id}", response_model=ApplicationOut)
async def update_application(application_id: str, payload: StatusUpdate, admin: TokenClaims = Depends(require_admin)):
    application = await apps_repo.update_status(application_id, payload.status, admin.user_id)
    return (await _expanded_out([application]))[0]

@router.get("/check-application/{job_id}", response_model=CheckApplicationOut)
async def check_application(job_id: str, current_user: TokenClaims = Depends(get_current_user)):
    has_applied, application = await apps_repo.check_applied(job_id, current_user.user_id)
    return CheckApplicationOut(
        has_applied=has_applied,
        application=application_out(application) if application else None,
    )

@router.get("/resume/{filename}")
async def download_resume(filename: str, admin: TokenClaims = Depends(require_admin)):
    path, file_path = storage.resolve_resume(filename)
    await apps_repo.resume_permission(path, admin.user_id)
    if not file_path.is_file():
        raise NotFound("Resume file not found")
    return FileResponse(file_path, media_type="application/octet-stream", filename=filename)
