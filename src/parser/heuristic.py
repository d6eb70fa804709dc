"""Deterministic heuristic parser.

Runs the full rule-based extraction: normalize lines, locate sections,
run each field extractor, then sample keywords and default AI tools.
"""

import logging
import random
from typing import Optional

from .fields import (
    extract_image_prompts,
    extract_keyword_candidates,
    extract_paragraph,
    extract_title_block,
)
from .lines import normalize_lines
from .models import ParsedDocument
from .sampling import (
    IMAGE_GENERATOR_CATALOG,
    LLM_CATALOG,
    choose_tool,
    default_rng,
    sample_keywords,
)
from .sections import SectionLocator, stop_rules_for

logger = logging.getLogger(__name__)


class HeuristicParser:
    """Builds a ParsedDocument from raw text using fixed rules."""

    def __init__(
        self,
        locator: Optional[SectionLocator] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Args:
            locator: Section locator (default thresholds if omitted).
            rng: Random source for keyword sampling and tool defaults.
        """
        self.locator = locator or SectionLocator()
        self.rng = rng

    def parse(self, text: str) -> ParsedDocument:
        lines = normalize_lines(text)
        index = self.locator.locate(lines)
        rng = self.rng or default_rng()

        title_block = extract_title_block(lines)

        sales = extract_paragraph(
            lines, index.sales, stop_rules_for("sales"),
            inclusive=index.sales_inclusive,
        )
        back_cover = extract_paragraph(lines, index.back_cover, stop_rules_for("back_cover"))
        ai_llm = extract_paragraph(lines, index.ai_llm, stop_rules_for("ai_llm"))
        ai_image = extract_paragraph(
            lines, index.ai_image_generator, stop_rules_for("ai_image_generator")
        )

        candidates = extract_keyword_candidates(
            lines, index.keywords, stop_rules_for("keywords")
        )
        prompts = extract_image_prompts(
            lines, index.image_prompts, stop_rules_for("image_prompts")
        )

        document = ParsedDocument(
            html_salesletter=sales,
            back_book_cover=back_cover,
            ai_llm=choose_tool(ai_llm, LLM_CATALOG, rng),
            ai_image_generator=choose_tool(ai_image, IMAGE_GENERATOR_CATALOG, rng),
            keywords=sample_keywords(candidates, rng),
            image_prompts=prompts,
            **title_block,
        )

        logger.info(
            "Heuristic parse: %d lines, %d keyword candidates, %d prompts",
            len(lines), len(candidates), len(prompts),
        )
        return document
