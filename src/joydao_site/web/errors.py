# ABOUTME: Exception handlers rendering failures as structured error bodies.
# ABOUTME: No internal detail or stack information is returned to callers.

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from joydao_site.errors import SiteError, StoreUnavailable, ValidationFailed

log = structlog.get_logger()


def _error_response(error: SiteError) -> JSONResponse:
    return JSONResponse(status_code=error.http_status, content={"error": error.to_dict()})


def validation_message(exc: RequestValidationError) -> str:
    """First field-attributable message from a request validation failure.

    Messages raised by our validators ("Name is required") pass through as-is;
    other pydantic errors are prefixed with the offending field.
    """
    errors = exc.errors()
    if not errors:
        return ValidationFailed.default_message
    first = errors[0]
    cause = (first.get("ctx") or {}).get("error")
    if isinstance(cause, ValueError):
        return str(cause)
    field = ".".join(str(part) for part in first.get("loc", ())[1:])
    return f"{field}: {first['msg']}" if field else first["msg"]


def register_error_handlers(app: FastAPI) -> None:
    """Attach handlers for the site error taxonomy."""

    @app.exception_handler(SiteError)
    async def handle_site_error(request: Request, exc: SiteError) -> JSONResponse:
        if isinstance(exc, StoreUnavailable):
            log.error("store_fault", path=request.url.path)
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _error_response(ValidationFailed(validation_message(exc)))

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        log.exception("unhandled_error", path=request.url.path)
        return _error_response(SiteError())
