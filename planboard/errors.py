from typing import Any, Optional


class ApiError(Exception):
    """Error carrying the HTTP status and envelope code it is rendered with."""

    status_code = 500
    code = "internal_error"

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(ApiError):
    status_code = 400
    code = "validation_error"


class Conflict(ApiError):
    # duplicate names are reported as a bad request, not 409
    status_code = 400
    code = "conflict"


class NotFound(ApiError):
    status_code = 404
    code = "not_found"


class Unauthorized(ApiError):
    status_code = 401
    code = "unauthorized"


class Forbidden(ApiError):
    status_code = 403
    code = "forbidden"
