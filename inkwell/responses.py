"""
Inkwell API error types and error response rendering.
"""
from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from typing import Any, Dict, Optional
from datetime import datetime, timezone

from .logging_config import api_logger


# ============================================================
# ERROR TYPES
# ============================================================

class ApiException(HTTPException):
    """API exception carrying a stable error code and optional details"""

    status_code_default = 400
    error_code_default = "BAD_REQUEST"

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
    ):
        self.error_code = error_code or self.error_code_default
        self.details = details
        super().__init__(status_code=status_code or self.status_code_default, detail=message)


class NotFoundError(ApiException):
    """Referenced approval request, post or user does not exist."""

    status_code_default = 404
    error_code_default = "NOT_FOUND"


class ForbiddenError(ApiException):
    """Caller is not the author/requester or lacks review privilege."""

    status_code_default = 403
    error_code_default = "FORBIDDEN"


class ConflictError(ApiException):
    """Operation is invalid for the current state of the resource."""

    status_code_default = 409
    error_code_default = "CONFLICT"


def not_found(resource: str = "Resource", id: Any = None):
    message = f"{resource} not found" if id is None else f"{resource} {id} not found"
    raise NotFoundError(message, {"resource": resource, "id": id})


# ============================================================
# EXCEPTION HANDLER
# ============================================================

def error_body(exc: ApiException) -> Dict[str, Any]:
    return {
        "ok": False,
        "error": exc.detail,
        "error_code": exc.error_code,
        "details": exc.details,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


async def api_exception_handler(request: Request, exc: ApiException) -> JSONResponse:
    """Render ApiException subclasses with the standard error envelope"""
    api_logger.warning(
        f"API Error: {exc.detail}",
        status_code=exc.status_code,
        error_code=exc.error_code,
        path=request.url.path,
    )
    return JSONResponse(status_code=exc.status_code, content=error_body(exc))
