"""
Error handlers for the FastAPI application.

Pipeline failures never reach here; they become search statuses. What does
arrive is request validation, unknown place ids, pushes to a location
service that does not take them, and unexpected crashes. Every one of them
is rendered as a StandardErrorResponse carrying the request id.
"""

from collections import Counter
from datetime import datetime, timezone
from typing import Any, Dict, Optional
import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from coffee_finder.core.exceptions import CoffeeFinderException, ErrorCode
from coffee_finder.schemas.base import StandardErrorResponse

logger = logging.getLogger(__name__)

_HTTP_STATUS_CODES = {
    400: ErrorCode.VALIDATION_ERROR,
    404: ErrorCode.NOT_FOUND,
    405: ErrorCode.VALIDATION_ERROR,
    422: ErrorCode.VALIDATION_ERROR,
}

# Repeated failures of one kind get an extra warning every this many hits.
ALERT_EVERY = 10


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


class ErrorHandler:
    """Renders errors as the standard envelope and counts them per code and route."""

    def __init__(self):
        self.by_code: Counter = Counter()
        self.by_route: Counter = Counter()

    def render(
        self,
        request: Request,
        error_code: ErrorCode,
        message: str,
        status_code: int,
        details: Optional[Dict[str, Any]] = None,
    ) -> JSONResponse:
        request_id = _request_id(request)
        self._count(error_code, request)
        body = StandardErrorResponse(
            error_code=error_code.value,
            message=message,
            details=details,
            request_id=request_id,
            timestamp=datetime.now(timezone.utc),
        )
        return JSONResponse(
            status_code=status_code,
            content=body.model_dump(mode="json"),
            headers={"X-Request-ID": request_id},
        )

    async def handle_coffee_finder_exception(self, request: Request, exc: CoffeeFinderException) -> JSONResponse:
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            f"{exc.error_code.value} on {request.method} {request.url.path}: {exc.message}",
            extra={"request_id": _request_id(request), "error_code": exc.error_code.value, "details": exc.details},
        )
        return self.render(request, exc.error_code, exc.message, exc.status_code, exc.details)

    async def handle_validation_error(self, request: Request, exc: RequestValidationError) -> JSONResponse:
        fields = [
            {
                "field": ".".join(str(part) for part in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            }
            for error in exc.errors()
        ]
        logger.warning(
            f"Rejected {request.method} {request.url.path}: {len(fields)} invalid field(s)",
            extra={"request_id": _request_id(request), "validation_errors": fields},
        )
        return self.render(
            request,
            ErrorCode.VALIDATION_ERROR,
            "Request validation failed",
            422,
            {"validation_errors": fields},
        )

    async def handle_http_exception(self, request: Request, exc: StarletteHTTPException) -> JSONResponse:
        error_code = _HTTP_STATUS_CODES.get(exc.status_code, ErrorCode.INTERNAL_SERVER_ERROR)
        logger.info(
            f"{exc.status_code} on {request.method} {request.url.path}: {exc.detail}",
            extra={"request_id": _request_id(request)},
        )
        return self.render(request, error_code, str(exc.detail), exc.status_code)

    async def handle_generic_exception(self, request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}",
            exc_info=exc,
            extra={"request_id": _request_id(request)},
        )
        # never leak internals to the client
        return self.render(request, ErrorCode.INTERNAL_SERVER_ERROR, "An internal server error occurred", 500)

    def _count(self, error_code: ErrorCode, request: Request) -> None:
        self.by_code[error_code.value] += 1
        self.by_route[f"{request.method} {request.url.path}"] += 1
        hits = self.by_code[error_code.value]
        if hits % ALERT_EVERY == 0:
            logger.warning(f"{error_code.value} has now occurred {hits} times")

    def get_error_statistics(self) -> Dict[str, Any]:
        return {
            "error_counts": dict(self.by_code),
            "by_route": dict(self.by_route),
            "total_errors": sum(self.by_code.values()),
        }

    def reset(self) -> None:
        self.by_code.clear()
        self.by_route.clear()


# Global error handler instance
error_handler = ErrorHandler()


def setup_error_handlers(app):
    """Register the envelope renderers on ``app``."""
    app.add_exception_handler(CoffeeFinderException, error_handler.handle_coffee_finder_exception)
    app.add_exception_handler(RequestValidationError, error_handler.handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, error_handler.handle_http_exception)
    app.add_exception_handler(Exception, error_handler.handle_generic_exception)
