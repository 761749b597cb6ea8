# devboard/core/errors.py
"""
Error taxonomy shared by the repositories, services and routers.

Every error carries the HTTP status the API gateway answers with; the
handlers in devboard.main turn them into ``{"error": message}`` bodies.
"""
from typing import Optional


class DevBoardError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(DevBoardError):
    status_code = 400
    default_message = "Invalid request"


class Unauthorized(DevBoardError):
    status_code = 401
    default_message = "Unauthorized"


class Forbidden(DevBoardError):
    status_code = 403
    default_message = "Forbidden"


class NotFound(DevBoardError):
    status_code = 404
    default_message = "Not found"


class Conflict(DevBoardError):
    # duplicates are reported as 400 to the clients
    status_code = 400
    default_message = "Already exists"


class UpstreamFailure(DevBoardError):
    status_code = 500
    default_message = "Server error"
