# devboard/services/storage.py
"""
Resume storage on the local filesystem.

Files are written under ``settings.UPLOAD_DIR`` with a generated name
(``<epoch ms>-<random>-<sanitized original>``) so user supplied names never
reach the filesystem as-is. The path recorded on an Application is
``"<UPLOAD_DIR>/<stored name>"``; that exact string is what the download
route matches against.
"""
import logging
import os
import re
import secrets
import time
from pathlib import Path
from typing import List, Optional, Tuple

import aiofiles
import aiofiles.os
from fastapi import UploadFile

from devboard.core.config import settings
from devboard.core.errors import ValidationError

logger = logging.getLogger(__name__)

ALLOWED_RESUME_TYPES = {
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}
CHUNK_SIZE = 64 * 1024
_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def upload_dir() -> Path:
    return Path(settings.UPLOAD_DIR)

def ensure_upload_dir() -> Path:
    path = upload_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path

def sanitize_filename(filename: Optional[str]) -> str:
    name = os.path.basename((filename or "").replace("\\", "/"))
    name = _UNSAFE_CHARS.sub("_", name).lstrip(".")
    return name[-100:] or "resume"

def stored_name_for(filename: Optional[str]) -> str:
    stamp = int(time.time() * 1000)
    return f"{stamp}-{secrets.randbelow(10 ** 9):09d}-{sanitize_filename(filename)}"

def recorded_path(stored_name: str) -> str:
    return f"{settings.UPLOAD_DIR}/{stored_name}"

def pick_single_resume(files: Optional[List[UploadFile]]) -> UploadFile:
    """Exactly one resume per application request."""
    files = [f for f in (files or []) if f is not None and f.filename]
    if not files:
        raise ValidationError("Resume file is required")
    if len(files) > 1:
        raise ValidationError("Only one resume file can be uploaded")
    return files[0]

def check_resume_type(file: UploadFile) -> None:
    content_type = (file.content_type or "").split(";")[0].strip().lower()
    if content_type not in ALLOWED_RESUME_TYPES:
        raise ValidationError("Only PDF, DOC, and DOCX files are allowed")

async def store_resume(file: UploadFile) -> str:
    """
    Validate and write ``file``; returns the recorded path. A file that
    grows past the size limit is removed before the error is raised.
    """
    check_resume_type(file)
    target = ensure_upload_dir() / stored_name_for(file.filename)
    limit = settings.MAX_RESUME_BYTES
    written = 0
    try:
        async with aiofiles.open(target, "wb") as out:
            while True:
                chunk = await file.read(CHUNK_SIZE)
                if not chunk:
                    break
                written += len(chunk)
                if written > limit:
                    break
                await out.write(chunk)
    except BaseException:
        # a failed write leaves no partial file behind
        await discard(str(target))
        raise

    if written > limit:
        await discard(str(target))
        raise ValidationError(f"File size too large. Maximum size is {limit // (1024 * 1024)}MB.")

    path = recorded_path(target.name)
    logger.info("Stored resume %s (%s bytes)", path, written)
    return path

async def discard(path: Optional[str]) -> None:
    """Remove a stored file; failures are logged only."""
    if not path:
        return
    try:
        await aiofiles.os.remove(path)
        logger.info("Removed orphaned resume %s", path)
    except FileNotFoundError:
        pass
    except OSError:
        logger.exception("Error deleting file %s", path)

def resolve_resume(filename: str) -> Tuple[str, Path]:
    """
    Map a download filename onto (recorded path, file on disk). Traversal
    attempts are rejected before anything touches the filesystem.
    """
    if not filename or ".." in filename or "/" in filename or "\\" in filename:
        raise ValidationError("Invalid filename")
    return recorded_path(filename), upload_dir() / filename
