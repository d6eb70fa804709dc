"""Document parser: raw listing document to ParsedDocument."""

from .models import (
    MAX_IMAGE_PROMPTS,
    MAX_KEYWORDS,
    DocumentParseError,
    EmptyInputError,
    HeuristicParseError,
    ParsedDocument,
    ParseResult,
    ParseState,
    RemoteServiceError,
    SectionIndex,
)
from .heuristic import HeuristicParser
from .pipeline import DocumentParser
from .remote import AIExtractionService, coerce_payload
from .sampling import IMAGE_GENERATOR_CATALOG, LLM_CATALOG, choose_tool, sample_keywords
from .sections import SectionLocator

__all__ = [
    "MAX_IMAGE_PROMPTS",
    "MAX_KEYWORDS",
    "DocumentParseError",
    "EmptyInputError",
    "HeuristicParseError",
    "ParsedDocument",
    "ParseResult",
    "ParseState",
    "RemoteServiceError",
    "SectionIndex",
    "HeuristicParser",
    "DocumentParser",
    "AIExtractionService",
    "coerce_payload",
    "IMAGE_GENERATOR_CATALOG",
    "LLM_CATALOG",
    "choose_tool",
    "sample_keywords",
    "SectionLocator",
]
