"""
Rate limit по IP для записи: каждый POST/PUT/DELETE перезаписывает файлы на диске.

Чтение (GET) не ограничивается — store перечитывает все домены после каждого сохранения.
Лимит задаётся в config: RATE_LIMIT (например, "100/minute").
При превышении — 429 и структурированный ответ ErrorResponse.
"""
import time
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from app.core.config import settings
from app.schemas.common import ErrorResponse

LIMITED_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


def _get_client_ip(request: Request) -> str:
    """IP клиента: X-Forwarded-For (первый) или request.client.host."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Middleware: счётчик записей по IP в фиксированном окне, при превышении лимита — 429."""

    def __init__(
        self,
        app,
        key_func: Callable[[Request], str] | None = None,
        limit: tuple[int, int] | None = None,
    ):
        super().__init__(app)
        self.key_func = key_func or _get_client_ip
        self.max_requests, self.window_seconds = limit or settings.rate_limit_parsed()
        # ip -> (count, window_start)
        self._storage: dict[str, tuple[int, float]] = {}

    def _hit(self, key: str) -> bool:
        """Учесть запрос. False — лимит исчерпан."""
        now = time.monotonic()
        count, start = self._storage.get(key, (0, now))
        if now - start >= self.window_seconds:
            count, start = 0, now
        count += 1
        self._storage[key] = (count, start)
        return count <= self.max_requests

    async def dispatch(self, request: Request, call_next):
        if request.method in LIMITED_METHODS and not self._hit(self.key_func(request)):
            body = ErrorResponse(
                error="rate_limit_exceeded",
                message=f"Too many requests. Limit: {self.max_requests} per {self.window_seconds}s.",
            )
            return JSONResponse(status_code=429, content=body.model_dump())
        return await call_next(request)
