# server/middleware/error_handler.py
"""Global error handling middleware"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from utils.exceptions import MaintenanceDeskException
from core.logger import get_logger

logger = get_logger(__name__)

GENERIC_ERROR_MESSAGE = "An error occurred. Please try again later."


def _error_body(request: Request, code: str, message: str, **extra) -> dict:
    body = {
        "error": code,
        "message": message,
        "path": str(request.url.path),
    }
    body.update(extra)
    return body


def _field_name(loc) -> str:
    # ("body", "code") -> "code"; ("query", "limit") -> "limit"
    parts = [str(p) for p in loc if p not in ("body", "query", "path", "header", "form")]
    return ".".join(parts) or "request"


def register_error_handlers(app: FastAPI):
    """Register error handlers with FastAPI app"""

    @app.exception_handler(MaintenanceDeskException)
    async def maintenance_desk_exception_handler(request: Request, exc: MaintenanceDeskException):
        """Handle custom Maintenance Desk exceptions"""
        if exc.status_code >= 500:
            logger.error(f"{exc.code}: {exc.message}")
        else:
            logger.warning(f"{exc.code}: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(request, exc.code, exc.message, **exc.to_dict()),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        """Malformed query, path or body values"""
        fields = sorted({_field_name(err.get("loc", ())) for err in exc.errors()})
        logger.warning(f"VALIDATION_ERROR: invalid request fields {fields}")
        return JSONResponse(
            status_code=400,
            content=_error_body(request, "VALIDATION_ERROR", "Invalid request", fields=fields),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Routing errors and HTTPExceptions raised by routes"""
        code = "NOT_FOUND" if exc.status_code == 404 else "HTTP_ERROR"
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(request, code, str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions"""
        logger.error(f"Unexpected error: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content=_error_body(request, "INTERNAL_SERVER_ERROR", GENERIC_ERROR_MESSAGE),
        )
