"""
Logging middleware
Logs every request with its outcome and timing
"""

import logging
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from quizhub.core.config import settings

logger = logging.getLogger("quizhub.request")

QUIET_PATHS = {"/health", f"{settings.API_V1_STR}/health"}


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware to log HTTP requests and responses

    Quiz-taking requests carry the caller's session id, which is logged
    alongside the request id so a whole quiz run can be followed.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        context = {
            "request_id": getattr(request.state, "request_id", "unknown"),
            "method": request.method,
            "path": request.url.path,
            "session_id": request.headers.get("X-Session-ID"),
            "user_id": request.headers.get("X-User-ID"),
        }

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed",
                extra={
                    **context,
                    "process_time": round(time.perf_counter() - start_time, 3),
                    "error": str(e),
                },
                exc_info=True,
            )
            raise

        process_time = time.perf_counter() - start_time
        level = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(
            level,
            "Request completed",
            extra={
                **context,
                "status_code": response.status_code,
                "process_time": round(process_time, 3),
            },
        )
        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        return response
