from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.gzip import GZipMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from .api.middleware.security import SecurityMiddleware
from .api.v1.router import api_router
from .config import Settings, get_settings
from .core.services.classification_service import GeminiClassifier
from .utils.gemini_client import create_gemini_http_client
from .utils.logging import get_logger, setup_logging
from .utils.rate_limit import LoginRateLimiter

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Own the process-wide collaborators: Gemini HTTP client, classifier, rate limiter."""
    settings: Settings = app.state.settings
    http_client = create_gemini_http_client(settings)
    app.state.classifier = GeminiClassifier.from_settings(http_client, settings)
    app.state.rate_limiter = LoginRateLimiter.from_settings(settings)
    if not app.state.classifier.enabled:
        logger.warning("APP_GEMINI_API_KEY is not set; thoughts will be filed as random/thought")
    try:
        yield
    finally:
        await http_client.aclose()
        logger.info("Gemini HTTP client closed")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title="Thought Dump API",
        debug=settings.debug,
        version="0.1.0",
        root_path=settings.root_path or "",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_origin_regex=settings.cors_origin_regex,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=[
            "Accept",
            "Accept-Language",
            "Content-Language",
            "Content-Type",
            "Authorization",
            "X-Requested-With",
            "X-CSRF-Token"
        ],
        max_age=600,  # Cache preflight requests for 10 minutes
    )

    # Proxy headers (X-Forwarded-*) when behind ALB/ingress
    app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=["*"])

    # Trusted hosts (configure in env for production)
    app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.trusted_hosts)

    # GZip compression
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    app.add_middleware(SecurityMiddleware, api_prefix=settings.api_prefix)

    app.include_router(api_router, prefix=settings.api_prefix)
    return app
