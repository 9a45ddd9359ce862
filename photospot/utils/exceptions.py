import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from photospot.utils.response import error_response

logger = logging.getLogger(__name__)

NO_STORE = {"Cache-Control": "private, no-store"}

HTTP_ERROR_CODES = {
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


class AppException(Exception):
    code = "APP_ERROR"
    status_code = 400

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
        details: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code
        self.details = details
        self.headers = headers


class InvalidInputError(AppException):
    code = "INVALID_INPUT"
    status_code = 400


class InvalidCredentialsError(AppException):
    code = "INVALID_CREDENTIALS"
    status_code = 400


class NotFoundError(AppException):
    code = "PHOTO_NOT_FOUND"
    status_code = 404


class ForbiddenError(AppException):
    code = "FORBIDDEN"
    status_code = 403

    def __init__(self, message: str = "You do not have permission to view this photo", **kwargs):
        kwargs.setdefault("headers", NO_STORE)
        super().__init__(message, **kwargs)


class InfrastructureError(AppException):
    """A backend call failed or timed out. Safe for the caller to retry."""

    code = "SERVICE_UNAVAILABLE"
    status_code = 503


class InternalError(AppException):
    """A contract violation, e.g. the backend returned a row breaking an invariant."""

    code = "INTERNAL_ERROR"
    status_code = 500


def _validation_issues(exc: RequestValidationError) -> list[dict]:
    return [
        {
            "path": ".".join(str(part) for part in err.get("loc", ()) if part not in ("query", "path", "body")),
            "message": err.get("msg", ""),
        }
        for err in exc.errors()
    ]


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s on %s %s: %s", exc.code, request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(exc.code, exc.message, exc.details),
            headers=exc.headers,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR"), str(exc.detail)),
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content=error_response(
                InvalidInputError.code,
                "Invalid request parameters",
                {"issues": _validation_issues(exc)},
            ),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content=error_response(InternalError.code, "An unexpected error occurred"),
        )
