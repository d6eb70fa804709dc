"""Random keyword sampling and AI-tool defaults.

Every function takes its random source explicitly. Pass a seeded
random.Random for reproducible draws; leave it None for a fresh
SystemRandom per call.
"""

import random
from typing import Optional, Sequence

from .models import MAX_KEYWORDS

LLM_CATALOG = ("Claude", "Sonnet", "ChatGPT", "OpenAI", "Gemini", "Deepseek")
IMAGE_GENERATOR_CATALOG = ("Ideogram", "ChatGPT", "Imagen", "Recraft", "Canva", "Midjourney")


def default_rng() -> random.Random:
    return random.SystemRandom()


def sample_keywords(
    candidates: Sequence[str],
    rng: Optional[random.Random] = None,
    limit: int = MAX_KEYWORDS,
) -> list[str]:
    """Shuffle a copy of candidates and take the first `limit` items.

    Fewer candidates than `limit` yields all of them, reordered.
    """
    rng = rng or default_rng()
    pool = list(candidates)
    rng.shuffle(pool)
    return pool[:limit]


def choose_tool(
    value: Optional[str],
    catalog: Sequence[str],
    rng: Optional[random.Random] = None,
) -> str:
    """Keep an extracted tool name, or draw one from the catalog."""
    if value and value.strip():
        return value.strip()
    rng = rng or default_rng()
    return rng.choice(list(catalog))
