from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends

from thoughtdump.api.v1.schemas.thought import ClassifyRequest
from thoughtdump.core.schemas.classification import ClassificationResult
from thoughtdump.dependencies import get_classifier, get_current_user

if TYPE_CHECKING:
    from thoughtdump.core.schemas.auth import AuthUser
    from thoughtdump.core.services.classification_service import GeminiClassifier

router = APIRouter()


@router.post("", response_model=ClassificationResult)
async def classify_text(
    payload: ClassifyRequest,
    current_user: AuthUser = Depends(get_current_user),
    classifier: GeminiClassifier = Depends(get_classifier),
):
    """Preview how a thought would be filed, without storing it."""
    _ = current_user  # authenticated callers only
    return await classifier.classify(payload.content)
