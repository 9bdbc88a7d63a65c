"""
Exception handlers: every error leaves the API as {"error": "<message>"}.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from cms.utils.exceptions import (
    CMSError,
    ConflictError,
    Forbidden,
    NotFoundError,
    StorageError,
    Unauthorized,
    ValidationError,
)
from cms.utils.logger import get_logger

logger = get_logger(__name__)

STATUS_CODES = {
    Unauthorized: status.HTTP_401_UNAUTHORIZED,
    Forbidden: status.HTTP_403_FORBIDDEN,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    ConflictError: status.HTTP_409_CONFLICT,
}


def error_response(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


async def cms_error_handler(request: Request, exc: CMSError) -> JSONResponse:
    for error_type, status_code in STATUS_CODES.items():
        if isinstance(exc, error_type):
            headers = {"WWW-Authenticate": "Bearer"} if error_type is Unauthorized else None
            return error_response(status_code, str(exc), headers)

    if isinstance(exc, StorageError):
        logger.error(
            "Storage operation failed",
            method=request.method,
            path=request.url.path,
            status_code=exc.status_code,
            error=str(exc),
        )
    else:
        logger.error("Unhandled CMS error", method=request.method, path=request.url.path, error=str(exc))
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if any(err.get("type") == "json_invalid" for err in errors):
        return error_response(status.HTTP_400_BAD_REQUEST, "Invalid JSON body")
    fields = [str(err["loc"][-1]) for err in errors if err.get("loc")]
    message = "Invalid request"
    if fields:
        message += f": {', '.join(fields)}"
    return error_response(status.HTTP_400_BAD_REQUEST, message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CMSError, cms_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
