from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware

from thoughtdump.utils.logging import get_logger

if TYPE_CHECKING:
    from fastapi import Request
    from starlette.types import ASGIApp

logger = get_logger(__name__)

# JSON-only API; Gemini is called server-side so browsers only need Supabase
CONTENT_SECURITY_POLICY = "; ".join(
    [
        "default-src 'none'",
        "connect-src 'self' https://*.supabase.co",
        "frame-ancestors 'none'",
        "base-uri 'none'",
    ]
)

STATIC_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Content-Security-Policy": CONTENT_SECURITY_POLICY,
    "Cache-Control": "no-store",
    "Pragma": "no-cache",
}


class SecurityMiddleware(BaseHTTPMiddleware):
    """Attach security headers to every response and log hits on the auth routes."""

    def __init__(self, app: ASGIApp, api_prefix: str = "/api/v1"):
        super().__init__(app)
        self.auth_prefix = f"{api_prefix.rstrip('/')}/auth"

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.update(STATIC_HEADERS)
        if request.url.scheme == "https":
            response.headers["Strict-Transport-Security"] = "max-age=15552000; includeSubDomains"

        if request.url.path.startswith(self.auth_prefix):
            logger.info(
                "Auth endpoint accessed",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "ip": request.client.host if request.client else "unknown",
                    "status_code": response.status_code,
                },
            )
        return response
