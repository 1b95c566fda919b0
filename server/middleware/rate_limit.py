# server/middleware/rate_limit.py
"""
Rate limiting for the public intake endpoint

Only ticket submissions (POST /api/tickets) are counted; staff routes are
not limited.
"""
import asyncio
import time
from typing import Callable, Dict, List

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from core.config import INTAKE_RATE_LIMIT, INTAKE_RATE_WINDOW
from core.logger import get_logger

logger = get_logger(__name__)

INTAKE_PATH = "/api/tickets"


class IntakeRateLimitMiddleware(BaseHTTPMiddleware):
    """
    Sliding-window limit on ticket submissions per client IP.

    Defaults: 10 submissions per IP per hour.
    """

    def __init__(
        self,
        app,
        limit: int = INTAKE_RATE_LIMIT,
        window: int = INTAKE_RATE_WINDOW,
        clock: Callable[[], float] = time.time,
    ):
        super().__init__(app)
        self.limit = limit
        self.window = window
        self.clock = clock
        self.request_log: Dict[str, List[float]] = {}  # IP -> timestamp list
        self.lock = asyncio.Lock()

    @staticmethod
    def _is_intake(request: Request) -> bool:
        return request.method == "POST" and request.url.path.rstrip("/") == INTAKE_PATH

    async def dispatch(self, request: Request, call_next):
        if not self._is_intake(request):
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        now = self.clock()

        async with self.lock:
            cutoff = now - self.window
            recent = [ts for ts in self.request_log.get(client_ip, []) if ts > cutoff]

            if len(recent) >= self.limit:
                self.request_log[client_ip] = recent
                retry_after = int(recent[0] + self.window - now) + 1
                logger.warning(
                    f"Intake rate limit exceeded for {client_ip}: "
                    f"{len(recent)} submissions in {self.window}s"
                )
                return JSONResponse(
                    status_code=429,
                    content={
                        "error": "RATE_LIMITED",
                        "message": "Too many ticket submissions. Please try again later.",
                        "path": str(request.url.path),
                    },
                    headers={"Retry-After": str(max(retry_after, 1))},
                )

            recent.append(now)
            self.request_log[client_ip] = recent

        response = await call_next(request)

        response.headers["X-RateLimit-Limit"] = str(self.limit)
        response.headers["X-RateLimit-Remaining"] = str(max(0, self.limit - len(recent)))
        return response
