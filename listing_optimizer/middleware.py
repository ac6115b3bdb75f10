"""
Request logging middleware with unique request IDs
"""
import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from .errors import UNEXPECTED_ERROR_MESSAGE

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tags each request with an id and logs its start, status and duration"""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        start = time.monotonic()

        logger.info(f"[{request_id}] --> {request.method} {request.url.path}")
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(f"[{request_id}] Unhandled exception: {e}", exc_info=True)
            response = JSONResponse(
                status_code=500,
                content={"success": False, "error": UNEXPECTED_ERROR_MESSAGE},
            )
        elapsed_ms = (time.monotonic() - start) * 1000

        response.headers["X-Request-ID"] = request_id
        line = f"[{request_id}] <-- {request.method} {request.url.path} - {response.status_code} ({elapsed_ms:.0f}ms)"
        if response.status_code >= 400:
            logger.error(f"{line} ERROR")
        else:
            logger.info(line)
        return response


def get_request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")
