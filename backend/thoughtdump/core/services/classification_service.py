from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from thoughtdump.core.classification.normalizer import normalize_category, normalize_type
from thoughtdump.core.models.thought import Category, ThoughtType
from thoughtdump.core.schemas.classification import ClassificationResult, ClassificationSource
from thoughtdump.utils.logging import get_logger

if TYPE_CHECKING:
    import httpx

    from thoughtdump.config import Settings

logger = get_logger(__name__)

_JSON_OBJECT = re.compile(r"\{[^}]*\}")
_CATEGORY_FIELD = re.compile(r"category[\"\s:]*([a-zA-Z]+)", re.IGNORECASE)
_TYPE_FIELD = re.compile(r"type[\"\s:]*([a-zA-Z]+)", re.IGNORECASE)

PROMPT_TEMPLATE = """Analyze the following user input and provide a JSON response with two determinations:

1. CATEGORY: Categorize into one of these exact categories: {categories}
2. TYPE: Determine if this is an actionable task or just a thought/statement

IMPORTANT INSTRUCTIONS:
- Respond with valid JSON only: {{"category": "...", "type": "..."}}
- Category must be one of: {categories}
- Type must be either "task" or "thought"

TYPE DEFINITIONS:
- "task": Something actionable the user can do, complete, or accomplish (e.g., "buy groceries", "call mom", "finish report", "go for a run")
- "thought": A reflection, idea, statement, or observation without a clear action (e.g., "I love sunsets", "wondering about life", "feeling grateful", "random idea about flying cars")

EXAMPLES:
- "Buy groceries tomorrow" → {{"category": "shopping", "type": "task"}}
- "I love how peaceful mornings are" → {{"category": "personal", "type": "thought"}}
- "Schedule dentist appointment" → {{"category": "health", "type": "task"}}
- "What if we could teleport?" → {{"category": "idea", "type": "thought"}}
- "Finish the quarterly report" → {{"category": "work", "type": "task"}}
- "Feeling grateful for my family" → {{"category": "personal", "type": "thought"}}

User input: "{text}"

JSON Response:"""


def build_prompt(text: str) -> str:
    """Render the few-shot classification prompt for a single thought."""
    categories = ", ".join(c.value for c in Category)
    return PROMPT_TEMPLATE.format(categories=categories, text=text)


def extract_completion_text(payload: Any) -> str:
    """Return ``candidates[0].content.parts[0].text`` or an empty string."""
    try:
        text = payload["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return ""
    return text if isinstance(text, str) else ""


def parse_completion(raw: str) -> ClassificationResult:
    """Turn the model's free text into a classification.

    The first ``{...}`` span is parsed as JSON when present; otherwise, or if
    that span is not valid JSON, ``category``/``type`` fields are scraped with
    regular expressions. Whatever is found goes through the normalizers.
    """
    match = _JSON_OBJECT.search(raw)
    if match:
        try:
            parsed = json.loads(match.group(0))
        except json.JSONDecodeError as err:
            logger.warning("Failed to parse JSON from model output: %s", err)
        else:
            if isinstance(parsed, dict):
                return ClassificationResult(
                    category=normalize_category(parsed.get("category")),
                    type=normalize_type(parsed.get("type")),
                    source=ClassificationSource.MODEL,
                )

    category_match = _CATEGORY_FIELD.search(raw)
    type_match = _TYPE_FIELD.search(raw)
    raw_category = category_match.group(1) if category_match else Category.RANDOM.value
    raw_type = type_match.group(1) if type_match else ThoughtType.THOUGHT.value
    logger.debug("Regex fallback extracted category=%r type=%r", raw_category, raw_type)

    return ClassificationResult(
        category=normalize_category(raw_category),
        type=normalize_type(raw_type),
        source=ClassificationSource.MODEL,
    )


@dataclass(frozen=True)
class GenerationConfig:
    """Sampling parameters sent with every classification request."""

    temperature: float = 0.1
    max_output_tokens: int = 50
    top_p: float = 0.8
    top_k: int = 10

    def to_payload(self) -> dict[str, Any]:
        return {
            "temperature": self.temperature,
            "maxOutputTokens": self.max_output_tokens,
            "topP": self.top_p,
            "topK": self.top_k,
        }


class GeminiClassifier:
    """Classify thoughts with a single Gemini ``generateContent`` call.

    ``classify`` never raises: a missing key, a transport error, a non-2xx
    status or any unexpected failure all yield ``ClassificationResult.fallback()``.
    There are no retries and no caching.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        api_key: str | None,
        model: str = "gemini-1.5-flash",
        generation_config: GenerationConfig | None = None,
    ) -> None:
        self._http = http_client
        self._api_key = api_key
        self._model = model
        self._generation_config = generation_config or GenerationConfig()

    @classmethod
    def from_settings(cls, http_client: httpx.AsyncClient, settings: Settings) -> GeminiClassifier:
        return cls(
            http_client,
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            generation_config=GenerationConfig(
                temperature=settings.gemini_temperature,
                max_output_tokens=settings.gemini_max_output_tokens,
                top_p=settings.gemini_top_p,
                top_k=settings.gemini_top_k,
            ),
        )

    @property
    def enabled(self) -> bool:
        return bool(self._api_key)

    @property
    def model(self) -> str:
        return self._model

    @property
    def endpoint(self) -> str:
        return f"/models/{self._model}:generateContent"

    def build_request_body(self, text: str) -> dict[str, Any]:
        return {
            "contents": [{"parts": [{"text": build_prompt(text)}]}],
            "generationConfig": self._generation_config.to_payload(),
        }

    async def classify(self, text: str) -> ClassificationResult:
        if not self.enabled:
            logger.info("Gemini API key not configured, using fallback classification")
            return ClassificationResult.fallback()

        logger.info("Classifying thought (length: %d)", len(text))
        try:
            response = await self._http.post(
                self.endpoint,
                params={"key": self._api_key},
                json=self.build_request_body(text),
            )
            if response.is_error:
                logger.warning(
                    "Gemini API error: %s %s, using fallback classification",
                    response.status_code,
                    response.reason_phrase,
                )
                return ClassificationResult.fallback()

            raw = extract_completion_text(response.json())
            logger.debug("Raw Gemini completion: %r", raw)

            result = parse_completion(raw)
            logger.info(
                "Classification result - category: %s, type: %s",
                result.category.value,
                result.type.value,
            )
            return result
        except Exception as err:
            logger.error("Gemini classification failed: %s", err)
            logger.error("Error type: %s", type(err).__name__)
            return ClassificationResult.fallback()
