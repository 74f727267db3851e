"""
Request size limiting middleware for FastAPI.
Rejects template payloads larger than config.MAX_TEMPLATE_BYTES.
"""
from typing import Set
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.types import ASGIApp

from cfn_cost.core.config import config


logger = logging.getLogger(__name__)

# Endpoints that accept template bodies
PROTECTED_ENDPOINTS: Set[str] = {
    "/api/estimate",
    "/api/compare",
}


def _too_large(path: str, body_size: int) -> JSONResponse:
    logger.info(
        "Request body size exceeded for %s: %d bytes (limit: %d)",
        path, body_size, config.MAX_TEMPLATE_BYTES,
    )
    return JSONResponse(
        status_code=413,
        content={
            "status": "error",
            "error": "request_too_large",
            "message": f"Request body size exceeds allowed limit of {config.MAX_TEMPLATE_BYTES} bytes.",
        }
    )


class RequestSizeLimiterMiddleware(BaseHTTPMiddleware):
    """
    FastAPI middleware for request size limiting.

    Applies the limit only to the template endpoints.
    Other routes pass through untouched.
    """

    async def dispatch(self, request: Request, call_next: ASGIApp):
        """
        Process request and apply the size limit if applicable.

        Args:
            request: FastAPI request object
            call_next: Next middleware or route handler

        Returns:
            Response object
        """
        path = request.url.path
        if path not in PROTECTED_ENDPOINTS:
            return await call_next(request)

        # Content-Length lets oversized requests fail before the body is read
        content_length = request.headers.get("Content-Length")
        if content_length:
            try:
                declared_size = int(content_length)
            except ValueError:
                declared_size = 0
            if declared_size > config.MAX_TEMPLATE_BYTES:
                return _too_large(path, declared_size)

        body_bytes = await request.body()
        if len(body_bytes) > config.MAX_TEMPLATE_BYTES:
            return _too_large(path, len(body_bytes))

        # Starlette requires the body to be restored for the route handler
        async def receive():
            return {"type": "http.request", "body": body_bytes, "more_body": False}

        request._receive = receive

        return await call_next(request)
