"""Mapping of domain errors to HTTP responses."""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..core.errors import ErrorKind, PRReviewerError
from ..core.schemas import ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)

# Non-standard, as used by nginx for requests the client abandoned
CLIENT_CLOSED_REQUEST = 499

STATUS_BY_CODE: dict[str, int] = {
    "TEAM_EXISTS": 400,
    "PR_EXISTS": 409,
    "PR_MERGED": 409,
    "NOT_ASSIGNED": 409,
    "NO_CANDIDATE": 409,
}

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.ALREADY_EXISTS: 409,
    ErrorKind.CONFLICT: 409,
    ErrorKind.TRANSIENT: 503,
    ErrorKind.CANCELED: CLIENT_CLOSED_REQUEST,
    ErrorKind.INTERNAL: 500,
}


def error_body(code: str, message: str) -> dict:
    return ErrorResponse(error=ErrorDetail(code=code, message=message)).model_dump()


def error_responses(*status_codes: int) -> dict[int, dict]:
    """OpenAPI `responses=` entries documenting the error envelope."""
    return {status_code: {"model": ErrorResponse} for status_code in status_codes}


def status_for(error: PRReviewerError) -> int:
    """HTTP status for a domain error; every kind maps to something."""
    return STATUS_BY_CODE.get(error.code, STATUS_BY_KIND.get(error.kind, 500))


async def handle_domain_error(request: Request, exc: PRReviewerError) -> JSONResponse:
    status_code = status_for(exc)

    if exc.kind is ErrorKind.INTERNAL:
        logger.error(f"Unexpected error on {request.url.path}: {exc!r}", exc_info=exc)
        return JSONResponse(status_code=status_code, content=error_body("INTERNAL", "internal error"))

    if exc.kind is ErrorKind.CANCELED:
        return JSONResponse(
            status_code=status_code, content=error_body("CLIENT_CLOSED", exc.message)
        )

    return JSONResponse(status_code=status_code, content=error_body(exc.code, exc.message))


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning(f"Invalid request on {request.url.path}: {exc.errors()}")
    fields = ", ".join(
        ".".join(str(part) for part in error["loc"] if part != "body") for error in exc.errors()
    )
    return JSONResponse(
        status_code=400, content=error_body("BAD_REQUEST", f"invalid or missing fields: {fields}")
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PRReviewerError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
