# devboard/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from devboard.api.v1.applications import router as applications_router
from devboard.api.v1.auth import router as auth_router
from devboard.api.v1.dashboard import router as dashboard_router
from devboard.api.v1.jobs import router as jobs_router
from devboard.api.v1.saved_jobs import router as saved_jobs_router
from devboard.core.config import settings
from devboard.core.errors import DevBoardError
from devboard.core.logging import configure_logging
from devboard.db.mongo import close_db, init_db
from devboard.services.storage import ensure_upload_dir

logger = logging.getLogger(__name__)

app = FastAPI(title="DevBoard API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list or ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# All routes live at the service root
app.include_router(auth_router)
app.include_router(jobs_router)
app.include_router(applications_router)
app.include_router(saved_jobs_router)
app.include_router(dashboard_router)


@app.get("/health")
async def health():
    return {"status": "ok"}


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})

@app.exception_handler(DevBoardError)
async def devboard_error_handler(request: Request, exc: DevBoardError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return _error(exc.status_code, exc.message)

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # report the first problem only, as "<field>: <message>"
    errors = exc.errors()
    if not errors:
        return _error(400, "Invalid request")
    first = errors[0]
    field = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path", "form"))
    message = first.get("msg", "Invalid value")
    return _error(400, f"{field}: {message}" if field else message)

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404 and exc.detail == "Not Found":
        return _error(404, "Endpoint not found")
    return _error(exc.status_code, str(exc.detail))

@app.exception_handler(PyMongoError)
async def database_error_handler(request: Request, exc: PyMongoError):
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return _error(500, "Database error")

@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error(500, "Internal server error")


@app.on_event("startup")
async def startup_event():
    configure_logging()
    ensure_upload_dir()
    await init_db()
    logger.info("DevBoard API started (env=%s)", settings.APP_ENV)


@app.on_event("shutdown")
async def shutdown_event():
    close_db()


def run() -> None:
    import uvicorn

    configure_logging()
    uvicorn.run("devboard.main:app", host="0.0.0.0", port=settings.PORT)
