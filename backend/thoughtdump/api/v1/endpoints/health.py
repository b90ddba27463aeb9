from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, Depends

from thoughtdump.config import Settings
from thoughtdump.db.base import create_request_supabase_client
from thoughtdump.dependencies import get_app_settings, get_classifier
from thoughtdump.utils.logging import get_logger

if TYPE_CHECKING:
    from thoughtdump.core.services.classification_service import GeminiClassifier

logger = get_logger(__name__)

router = APIRouter()

SERVICE_NAME = "thoughtdump-api"
SERVICE_VERSION = "0.1.0"


def _classifier_status(classifier: GeminiClassifier) -> dict[str, Any]:
    # Without a key every thought is filed as random/thought
    return {
        "mode": "gemini" if classifier.enabled else "fallback-only",
        "model": getattr(classifier, "model", None),
    }


@router.get("/")
async def health_check(classifier: GeminiClassifier = Depends(get_classifier)) -> dict[str, Any]:
    """Liveness: the process is up and knows how it will classify."""
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "classifier": _classifier_status(classifier),
    }


@router.get("/ready")
async def readiness_check(
    settings: Settings = Depends(get_app_settings),
    classifier: GeminiClassifier = Depends(get_classifier),
) -> dict[str, Any]:
    """Readiness: the thoughts table answers a one-row select."""
    try:
        client = create_request_supabase_client(settings)
        await asyncio.to_thread(
            lambda: client.table(settings.thoughts_table).select("id").limit(1).execute()
        )
        database = "connected"
    except Exception as err:
        logger.warning("Readiness check failed", extra={"error_type": type(err).__name__})
        database = f"error: {type(err).__name__}"

    return {
        "status": "ready" if database == "connected" else "degraded",
        "database": database,
        "thoughts_table": settings.thoughts_table,
        "classifier": _classifier_status(classifier),
    }
