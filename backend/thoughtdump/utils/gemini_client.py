from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

from thoughtdump.utils.logging import get_logger

if TYPE_CHECKING:
    from thoughtdump.config import Settings


def create_gemini_http_client(settings: Settings) -> httpx.AsyncClient:
    """Return an HTTP client rooted at the Gemini REST API.

    The caller owns the client and must close it (the application lifespan
    does this on shutdown). Timeouts are left at the httpx defaults.
    """
    logger = get_logger(__name__)
    logger.debug("Initializing Gemini HTTP client for %s", settings.gemini_base_url)
    return httpx.AsyncClient(
        base_url=settings.gemini_base_url,
        headers={"Content-Type": "application/json"},
    )
