"""
Logging Middleware for Request/Response Logging

Logs one line per HTTP request:
    METHOD PATH STATUS_CODE PROCESS_TIME_MS IP:CLIENT_IP

and adds an X-Process-Time header to the response. Requests that raise
are logged with a 500 status before the exception is re-raised.
"""

import logging
import time

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("shortlinks")


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware for logging HTTP requests and responses.
    """

    async def dispatch(self, request: Request, call_next):
        client_ip = self._get_client_ip(request)
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            process_time = time.perf_counter() - start_time
            logger.exception(
                f"{request.method} {request.url.path} 500 "
                f"{process_time*1000:.2f}ms IP:{client_ip}"
            )
            raise

        process_time = time.perf_counter() - start_time
        logger.info(
            f"{request.method} {request.url.path} "
            f"{response.status_code} {process_time*1000:.2f}ms "
            f"IP:{client_ip}"
        )

        response.headers["X-Process-Time"] = str(process_time)
        return response

    def _get_client_ip(self, request: Request) -> str:
        """
        Extract client IP address, preferring the first X-Forwarded-For hop.
        """
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        return request.client.host if request.client else "unknown"


def add_logging_middleware(app: FastAPI) -> None:
    app.add_middleware(LoggingMiddleware)
