"""LLM module for gateway and prompt management."""

from .gateway import (
    LLMGateway,
    ClaudeGateway,
    MockGateway,
    LLMResponse,
    LLMError,
    LLMCallError,
    extract_json,
    load_schema
)
from .prompt_registry import PromptRegistry, PromptTemplate, PromptVersion

__all__ = [
    "LLMGateway",
    "ClaudeGateway",
    "MockGateway",
    "LLMResponse",
    "LLMError",
    "LLMCallError",
    "extract_json",
    "load_schema",
    "PromptRegistry",
    "PromptTemplate",
    "PromptVersion"
]
