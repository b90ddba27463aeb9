from __future__ import annotations

import math
import time
from typing import TYPE_CHECKING

from fastapi import HTTPException, status

from thoughtdump.utils.logging import get_logger

if TYPE_CHECKING:
    from fastapi import Request

    from thoughtdump.config import Settings

logger = get_logger(__name__)


class LoginRateLimiter:
    """In-memory sliding-window limiter for auth attempts, keyed by operation and IP.

    One instance lives on `app.state` for the lifetime of the process.
    """

    def __init__(self, *, max_attempts: int, window_seconds: int, enabled: bool = True) -> None:
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self.enabled = enabled
        self._attempts: dict[str, list[float]] = {}

    @classmethod
    def from_settings(cls, settings: Settings) -> LoginRateLimiter:
        return cls(
            max_attempts=settings.max_login_attempts,
            window_seconds=settings.login_attempt_window,
            enabled=settings.enable_rate_limiting,
        )

    def _prune(self, identifier: str, now: float) -> list[float]:
        window_start = now - self.window_seconds
        attempts = [ts for ts in self._attempts.get(identifier, []) if ts > window_start]
        if attempts:
            self._attempts[identifier] = attempts
        else:
            self._attempts.pop(identifier, None)
        return attempts

    def hit(self, identifier: str, now: float | None = None) -> bool:
        """Record an attempt; return True if the identifier is over the limit."""
        if not self.enabled:
            return False
        now = time.time() if now is None else now
        attempts = self._prune(identifier, now)
        if len(attempts) >= self.max_attempts:
            return True
        attempts.append(now)
        self._attempts[identifier] = attempts
        return False

    def seconds_until_reset(self, identifier: str, now: float | None = None) -> int:
        now = time.time() if now is None else now
        attempts = self._prune(identifier, now)
        earliest_attempt = min(attempts) if attempts else now
        return max(1, math.ceil(self.window_seconds - (now - earliest_attempt)))

    def check(self, request: Request, operation: str = "default") -> None:
        """Raise 429 when the caller's IP has exhausted its attempts for `operation`."""
        client_ip = request.client.host if request.client else "unknown"
        identifier = f"{operation}:{client_ip}"
        if not self.hit(identifier):
            return

        logger.warning(f"Rate limited {operation} attempt", extra={"ip": client_ip})
        reset = self.seconds_until_reset(identifier)
        headers = {
            "Retry-After": str(reset),
            "RateLimit-Limit": str(self.max_attempts),
            "RateLimit-Remaining": "0",
            "RateLimit-Reset": str(reset),
        }
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=f"Too many {operation} attempts. Please try again later.",
            headers=headers,
        )
