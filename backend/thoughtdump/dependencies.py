from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from thoughtdump.config import Settings
from thoughtdump.core.repositories.implementations.supabase.thought_repository import (
    SupabaseThoughtRepository,
)
from thoughtdump.core.schemas.auth import AuthUser
from thoughtdump.core.services.auth_service import AuthService
from thoughtdump.core.services.focus_service import FocusService
from thoughtdump.core.services.insights_service import InsightsService
from thoughtdump.core.services.thought_service import ThoughtService
from thoughtdump.db.base import create_request_supabase_client
from thoughtdump.utils.logging import get_logger

logger = get_logger(__name__)

# Use auto_error=False to handle missing tokens gracefully
http_bearer = HTTPBearer(auto_error=False)

if TYPE_CHECKING:
    from supabase import Client

    from thoughtdump.core.repositories.thought_repository import ThoughtRepository
    from thoughtdump.core.services.classification_service import GeminiClassifier
    from thoughtdump.utils.rate_limit import LoginRateLimiter


async def _run_blocking(func):
    """Run blocking functions in a thread pool."""
    import asyncio
    return await asyncio.to_thread(func)


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was created with."""
    return request.app.state.settings


def get_classifier(request: Request) -> GeminiClassifier:
    """Classifier owned by the application lifespan."""
    return request.app.state.classifier


def get_rate_limiter(request: Request) -> LoginRateLimiter:
    return request.app.state.rate_limiter


def _bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("authorization") or request.headers.get("Authorization")
    if auth_header and auth_header.lower().startswith("bearer "):
        return auth_header.split(" ", 1)[1].strip()
    return None


def get_request_supabase_client(
    request: Request,
    settings: Settings = Depends(get_app_settings),
) -> Client:
    """Create a request-scoped Supabase client and set PostgREST bearer.

    Extracts the Authorization: Bearer <jwt> header if present and configures
    PostgREST to enforce RLS for the user.
    """
    return create_request_supabase_client(settings, _bearer_token(request))


def get_thought_repository(
    client: Client = Depends(get_request_supabase_client),
    settings: Settings = Depends(get_app_settings),
) -> ThoughtRepository:
    """Get a request-scoped thought repository instance using request client."""
    return SupabaseThoughtRepository(client, table_name=settings.thoughts_table)


def get_thought_service(
    repo: ThoughtRepository = Depends(get_thought_repository),
    classifier: GeminiClassifier = Depends(get_classifier),
) -> ThoughtService:
    """Get a request-scoped thought service instance."""
    return ThoughtService(repo, classifier)


def get_focus_service(repo: ThoughtRepository = Depends(get_thought_repository)) -> FocusService:
    return FocusService(repo)


def get_insights_service(repo: ThoughtRepository = Depends(get_thought_repository)) -> InsightsService:
    return InsightsService(repo)


def get_auth_service(
    client: Client = Depends(get_request_supabase_client),
    rate_limiter: LoginRateLimiter = Depends(get_rate_limiter),
    settings: Settings = Depends(get_app_settings),
) -> AuthService:
    """Get a request-scoped auth service instance."""
    return AuthService(
        client,
        rate_limiter,
        password_reset_redirect_url=settings.password_reset_redirect_url,
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Security(http_bearer),
    settings: Settings = Depends(get_app_settings),
) -> AuthUser:
    """Validate JWT via Supabase and return authenticated user."""
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    jwt = credentials.credentials
    if not jwt or len(jwt.split(".")) != 3:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token format",
            headers={"WWW-Authenticate": "Bearer"},
        )
    supabase = create_request_supabase_client(settings, jwt)
    try:
        resp = await _run_blocking(lambda: supabase.auth.get_user(jwt))
    except Exception as err:
        error_msg = str(err).lower()
        logger.warning(
            "JWT validation failed",
            extra={
                "error_type": type(err).__name__,
                "error_summary": error_msg[:100] if error_msg else "Unknown error",
                "jwt_length": len(jwt) if jwt else 0,
            }
        )
        if "invalid" in error_msg or "expired" in error_msg:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token is invalid or expired",
                headers={"WWW-Authenticate": "Bearer"},
            ) from err
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication failed",
            headers={"WWW-Authenticate": "Bearer"},
        ) from err
    user = getattr(resp, "user", None)
    user_id = getattr(user, "id", None) if user else None
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user data",
            headers={"WWW-Authenticate": "Bearer"},
        )
    metadata = getattr(user, "user_metadata", None) or {}
    return AuthUser(
        id=user_id,
        email=getattr(user, "email", None) or "",
        role=getattr(user, "role", None),
        display_name=metadata.get("display_name"),
    )


def get_bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Security(http_bearer),
) -> str:
    if not credentials or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return credentials.credentials
