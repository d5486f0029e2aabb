from typing import Any, Dict, Optional
from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from pydantic import BaseModel, Field

from otms_ref_server.errors import OTMSException
from otms_ref_server.logging_setup import get_logger

log = get_logger(__name__)


class OTMSError(BaseModel):
    code: str = Field(..., description="Stable machine-readable code")
    message: str = Field(..., description="Human-readable explanation")
    status: int = Field(..., description="HTTP status code duplicated here for convenience")
    details: Optional[Dict[str, Any]] = Field(default=None, description="Optional diagnostic details")

    @staticmethod
    def code_for_status(status: int) -> str:
        return {
            400: "bad_request",
            403: "forbidden",
            404: "not_found",
            409: "conflict",
            422: "unprocessable_entity",
            500: "internal_error",
            502: "bad_gateway",
            503: "unavailable",
        }.get(status, "error")


def _respond(err: OTMSError) -> JSONResponse:
    return JSONResponse({"error": err.model_dump()}, status_code=err.status)


def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Error"
    details = exc.detail if isinstance(exc.detail, dict) else None
    return _respond(OTMSError(
        code=OTMSError.code_for_status(exc.status_code),
        message=message,
        status=exc.status_code,
        details=details,
    ))


def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Normalize FastAPI/Pydantic 422 into 400 with consistent shape
    errors = [{k: v for k, v in e.items() if k in ("type", "loc", "msg")} for e in exc.errors()]
    return _respond(OTMSError(
        code="bad_request",
        message="Invalid request",
        status=400,
        details={"errors": errors},
    ))


def otms_exception_handler(request: Request, exc: OTMSException) -> JSONResponse:
    if exc.status >= 500:
        log.warning("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.code)
    return _respond(OTMSError(code=exc.code, message=exc.message, status=exc.status, details=exc.details))
