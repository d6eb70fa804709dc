"""AI extraction service.

Sends the raw document to an LLM gateway and coerces the returned JSON
into a ParsedDocument. Every failure surfaces as RemoteServiceError so
the caller can fall back to the heuristic parser.
"""

import logging
import random
from typing import Any, Optional

from src.llm.gateway import LLMGateway, load_schema
from src.llm.prompt_registry import PromptRegistry

from .models import MAX_IMAGE_PROMPTS, STRING_FIELDS, ParsedDocument, RemoteServiceError
from .sampling import (
    IMAGE_GENERATOR_CATALOG,
    LLM_CATALOG,
    choose_tool,
    default_rng,
    sample_keywords,
)

logger = logging.getLogger(__name__)

PROMPT_ID = "document_extract"


def _coerce_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return str(value).strip()


def _coerce_list(value: Any) -> list[str]:
    """Non-list values become []; items are stringified and blanks dropped."""
    if not isinstance(value, list):
        return []
    items = [_coerce_str(item) for item in value]
    return [item for item in items if item]


def coerce_payload(payload: Any, rng: Optional[random.Random] = None) -> ParsedDocument:
    """Build a ParsedDocument from a loosely-shaped service payload.

    Missing or null strings become "", keywords are sampled down to at
    most seven, prompts are truncated to five, and blank AI-tool fields
    get a random catalog default.
    """
    if not isinstance(payload, dict):
        raise RemoteServiceError(
            f"Expected a JSON object, got {type(payload).__name__}"
        )
    rng = rng or default_rng()

    fields = {attr: _coerce_str(payload.get(wire)) for attr, wire in STRING_FIELDS}
    fields["ai_llm"] = choose_tool(fields["ai_llm"], LLM_CATALOG, rng)
    fields["ai_image_generator"] = choose_tool(
        fields["ai_image_generator"], IMAGE_GENERATOR_CATALOG, rng
    )

    return ParsedDocument(
        keywords=sample_keywords(_coerce_list(payload.get("keywords")), rng),
        image_prompts=_coerce_list(payload.get("imagePrompts"))[:MAX_IMAGE_PROMPTS],
        **fields,
    )


class AIExtractionService:
    """Best-effort remote extraction through an LLM gateway."""

    def __init__(
        self,
        gateway: LLMGateway,
        prompt_registry: Optional[PromptRegistry] = None,
        rng: Optional[random.Random] = None,
    ):
        self.gateway = gateway
        self.registry = prompt_registry or PromptRegistry()
        self.rng = rng

    def extract(self, text: str) -> ParsedDocument:
        """Extract a record from raw text.

        Raises:
            RemoteServiceError: On any gateway, transport, or payload failure.
        """
        try:
            prompt = self.registry.get_prompt(PROMPT_ID)
            schema = load_schema(prompt.schema_name)
            response = self.gateway.run_structured(
                prompt.template,
                {"document": text},
                schema,
                options={"temperature": 0.0},
            )
        except Exception as e:
            raise RemoteServiceError(str(e)) from e

        document = coerce_payload(response.content, self.rng)
        logger.info(
            "Remote extraction via %s: %d keywords, %d prompts",
            response.model, len(document.keywords), len(document.image_prompts),
        )
        return document
