"""
Error Handling for the Thrift Fashion Proxy

Centralized exception handlers for the FastAPI application. Every failure is
caught at the boundary of its own request and reported as `{"error": ...}`:
400 for missing parameters, 500 for everything else.

Usage:
    from services.error_handler import setup_error_handlers

    app = FastAPI()
    setup_error_handlers(app)
"""

import logging
import traceback
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from services.exceptions import ProxyException, ValidationError

logger = logging.getLogger(__name__)


# ============================================================
# Error Response Helpers
# ============================================================

def create_error_response(
    error: ProxyException,
    status_code: int = 500,
    request: Optional[Request] = None,
) -> JSONResponse:
    """Create a standardized JSON error response."""
    return JSONResponse(status_code=status_code, content=error.to_dict())


def get_status_code(exc: ProxyException) -> int:
    """Determine HTTP status code for exception."""
    if isinstance(exc, ValidationError):
        return 400
    return 500


def _log_error(exc: ProxyException, status_code: int, path: str):
    """Log error with appropriate severity."""
    if status_code >= 500:
        logger.error(f"[{exc.code}] {path}: {exc}", extra={"details": exc.details})
    else:
        logger.warning(f"[{exc.code}] {path}: {exc.message}", extra={"details": exc.details})


# ============================================================
# Exception Handlers
# ============================================================

async def handle_proxy_exception(
    request: Request,
    exc: ProxyException,
) -> JSONResponse:
    """Handle ProxyException and its subclasses."""
    status_code = get_status_code(exc)
    _log_error(exc, status_code, request.url.path)
    return create_error_response(exc, status_code, request)


async def handle_validation_exception(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Malformed query parameters (e.g. page=abc) share the 400 shape."""
    errors = exc.errors()
    if errors:
        loc = ".".join(str(part) for part in errors[0].get("loc", ()) if part != "query")
        message = f"Invalid parameter '{loc}': {errors[0].get('msg', 'invalid value')}"
    else:
        message = "Invalid request parameters"
    logger.warning(f"[VALIDATION_ERROR] {request.url.path}: {message}")
    return JSONResponse(status_code=400, content={"error": message})


def build_generic_handler(debug: bool = False):
    """Create the catch-all handler for unexpected exceptions."""

    async def handle_generic_exception(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        logger.error(
            f"Unhandled exception in {request.url.path}: {type(exc).__name__}: {exc}",
            exc_info=True,
        )

        content = {"error": str(exc) or type(exc).__name__}
        if debug:
            content["debug"] = {
                "exception": type(exc).__name__,
                "traceback": traceback.format_exc(),
            }
        return JSONResponse(status_code=500, content=content)

    return handle_generic_exception


# ============================================================
# Setup Function
# ============================================================

def setup_error_handlers(app: FastAPI, debug: bool = False):
    """
    Configure error handlers for the FastAPI application.

    Args:
        app: The FastAPI application instance
        debug: If True, include traceback info in 500 responses
    """
    app.add_exception_handler(ProxyException, handle_proxy_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_exception)
    app.add_exception_handler(Exception, build_generic_handler(debug))

    logger.info(f"[ERROR HANDLER] Configured (debug={debug})")
