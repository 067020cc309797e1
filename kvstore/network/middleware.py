"""
Request Middleware

HTTP middleware functions with the FastAPI ``(request, call_next)``
signature. create_app registers DEFAULT_MIDDLEWARE with
``app.middleware("http")`` so the first function listed runs outermost:

    security_headers -> access_log -> body_size_limit -> recovery -> routes
"""

import logging
import time
from typing import Dict

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

SECURITY_HEADERS: Dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Content-Security-Policy": "default-src 'self'; frame-ancestors 'none'",
    "Referrer-Policy": "no-referrer",
    "Permissions-Policy": "geolocation=()",
}


def error_response(status_code: int, message: str, **kwargs) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, **kwargs)


async def security_headers(request: Request, call_next):
    """Add SECURITY_HEADERS to every response, keeping values a route already set."""
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


async def access_log(request: Request, call_next):
    """Log method, path, status, duration and client address of each request."""
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000

    client = f"{request.client.host}:{request.client.port}" if request.client else "-"
    logger.info(
        f"Request: {request.method} {request.url.path} | Status: {response.status_code} "
        f"| Duration: {duration_ms:.3f}ms | Client: {client}"
    )
    return response


async def body_size_limit(request: Request, call_next):
    """Reject requests whose declared Content-Length exceeds MAX_BODY_SIZE."""
    declared = request.headers.get("content-length")
    if declared is not None:
        try:
            length = int(declared)
        except ValueError:
            return error_response(400, "invalid Content-Length header")
        max_size = request.app.state.settings.MAX_BODY_SIZE
        if length > max_size:
            logger.warning(f"Rejected {request.method} {request.url.path}: body of {length} bytes exceeds {max_size}")
            return error_response(413, "request body too large")

    return await call_next(request)


async def recovery(request: Request, call_next):
    """Turn unexpected route exceptions into 500 responses."""
    try:
        return await call_next(request)
    except Exception:
        logger.exception(f"Unhandled error for {request.method} {request.url.path}")
        return error_response(500, "internal server error")


DEFAULT_MIDDLEWARE = (security_headers, access_log, body_size_limit, recovery)
