"""
FastAPI middleware for request context and logging
"""
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from marketplace_kernel.logging_config import LogContext, get_logger

logger = get_logger("api.requests")

REQUEST_ID_HEADER = "X-Request-ID"


class LoggingContextMiddleware(BaseHTTPMiddleware):
    """Bind request_id and profile_id to every log line of a request"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        profile_id = request.headers.get("profile_id")

        with LogContext.bind(request_id=request_id, profile_id=profile_id):
            start_time = time.perf_counter()
            response = await call_next(request)
            duration_ms = int((time.perf_counter() - start_time) * 1000)

            logger.info(
                "request_completed",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": duration_ms,
                },
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
