import time
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from clinicdesk.core.logger import get_logger

logger = get_logger("http")

class LogMiddleware(BaseHTTPMiddleware):
    """Access log line per request; also reports the handling time in X-Process-Time."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - started

        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        client = request.client.host if request.client else "-"
        level = logger.warning if response.status_code >= 500 else logger.info
        level(
            f"{client} | {request.method} {request.url.path} | "
            f"Status: {response.status_code} | Duration: {elapsed:.4f}s"
        )

        return response
