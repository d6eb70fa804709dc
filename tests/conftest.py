"""
Shared pytest fixtures for all tests.
"""

import random
import sys
from pathlib import Path

import pytest

# Add repo root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.llm.gateway import MockGateway
from src.llm.prompt_registry import PromptRegistry
from src.parser.remote import AIExtractionService


# =============================================================================
# Randomness
# =============================================================================

@pytest.fixture
def rng():
    """Seeded random source for reproducible sampling."""
    return random.Random(1234)


# =============================================================================
# LLM Fixtures
# =============================================================================

@pytest.fixture
def mock_gateway():
    """Mock LLM gateway for testing without API calls."""
    return MockGateway()


@pytest.fixture
def prompt_registry():
    """Prompt registry pointing to actual prompts."""
    prompts_dir = Path(__file__).parent.parent / "src" / "prompts"
    return PromptRegistry(prompts_dir)


@pytest.fixture
def remote_service(mock_gateway, prompt_registry, rng):
    """AI extraction service backed by the mock gateway."""
    return AIExtractionService(mock_gateway, prompt_registry, rng=rng)


# =============================================================================
# Config Fixtures
# =============================================================================

@pytest.fixture
def config_home(tmp_path, monkeypatch):
    """Isolated XDG config home with no API key in the environment."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    monkeypatch.delenv("DOCSHEET_AI_EXTRACTION", raising=False)
    return tmp_path / "config"


# =============================================================================
# Remote Payload Fixtures
# =============================================================================

@pytest.fixture
def full_payload():
    """A well-formed AI extraction payload."""
    return {
        "bookTitle": "The Quiet Garden",
        "subtitle": "A Year of Slow Living",
        "authorFirstName": "Joan Grace",
        "authorLastName": "Amira",
        "htmlSalesletter": "<p>Discover slow living.</p>",
        "backBookCover": "A gentle guide.",
        "aiLlm": "Claude",
        "aiImageGenerator": "Midjourney",
        "keywords": ["slow living", "mindfulness", "gardening"],
        "imagePrompts": ["A sunlit garden", "A teacup"],
    }
