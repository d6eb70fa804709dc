"""Section location for pasted listing documents.

Finds the start line of each recognized section using case-insensitive
header rules, with an HTML-density fallback for unlabeled sales copy.
Section bodies are read lazily by scan_section(), which stops at the
first line matching another section's header.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterator, Optional

from .models import SectionIndex

logger = logging.getLogger(__name__)

HTML_TAG_THRESHOLD = 3

HTML_TAGS = [
    "<p>", "<div>", "<strong>", "<em>", "<br>", "<span>",
    "<h1>", "<h2>", "<h3>", "<h4>", "<h5>", "<h6>",
    "<ul>", "<li>", "<ol>", "<a>", "<img>",
    "</p>", "</div>", "</strong>", "</em>", "</span>",
    "</h1>", "</h2>", "</h3>", "</h4>", "</h5>", "</h6>",
    "</ul>", "</li>", "</ol>", "</a>", "</img>",
]

_HTML_TAG_RE = re.compile("|".join(re.escape(t) for t in HTML_TAGS), re.IGNORECASE)


@dataclass(frozen=True)
class HeaderRule:
    """A header pattern: whole-line equality or substring, case-insensitive."""
    section: str
    exact: tuple[str, ...] = ()
    contains: tuple[str, ...] = ()

    def matches(self, line: str) -> bool:
        lowered = line.strip().lower()
        if lowered in self.exact:
            return True
        return any(needle in lowered for needle in self.contains)


SALESLETTER = HeaderRule("sales", exact=("salesletter",))
SALES_LABEL = HeaderRule(
    "sales",
    contains=("amazon book description", "sales copy", "book description"),
)
BACK_COVER = HeaderRule("back_cover", contains=("back book cover",))
AI_LLM = HeaderRule("ai_llm", contains=("ai llm",))
AI_IMAGE_GENERATOR = HeaderRule("ai_image_generator", contains=("ai image generator",))
KEYWORDS = HeaderRule("keywords", exact=("keywords",))
IMAGE_PROMPTS = HeaderRule("image_prompts", contains=("image prompt",))

# Priority order within a section matters: earlier rules win
SECTION_RULES: dict[str, list[HeaderRule]] = {
    "sales": [SALESLETTER, SALES_LABEL],
    "back_cover": [BACK_COVER],
    "ai_llm": [AI_LLM],
    "ai_image_generator": [AI_IMAGE_GENERATOR],
    "keywords": [KEYWORDS],
    "image_prompts": [IMAGE_PROMPTS],
}


def stop_rules_for(section: str) -> list[HeaderRule]:
    """Header rules of every section other than the given one."""
    if section not in SECTION_RULES:
        raise ValueError(f"Unknown section: {section}")
    return [
        rule
        for name, rules in SECTION_RULES.items()
        if name != section
        for rule in rules
    ]


def find_first(lines: list[str], rule: HeaderRule) -> Optional[int]:
    """Index of the first line matching rule, or None."""
    for idx, line in enumerate(lines):
        if rule.matches(line):
            return idx
    return None


def count_html_tags(line: str) -> int:
    """Count tag occurrences from HTML_TAGS on a single line.

    >>> count_html_tags("<p>Hello</p><strong>World</strong><br>")
    5
    """
    return len(_HTML_TAG_RE.findall(line))


def detect_html_start(
    lines: list[str],
    threshold: int = HTML_TAG_THRESHOLD,
) -> Optional[int]:
    """First line with at least `threshold` tag occurrences, or None.

    Tags are counted per line only; markup spread thinly across many
    short lines is not detected.
    """
    for idx, line in enumerate(lines):
        if count_html_tags(line) >= threshold:
            return idx
    return None


def scan_section(
    lines: list[str],
    start: Optional[int],
    stop_rules: list[HeaderRule],
    inclusive: bool = False,
) -> Iterator[str]:
    """Yield the body lines of a section.

    Starts after the header at `start` (or at `start` itself when
    inclusive) and stops before the first line matching any stop rule,
    or at end of document.
    """
    if start is None:
        return
    begin = start if inclusive else start + 1
    for line in lines[begin:]:
        if any(rule.matches(line) for rule in stop_rules):
            return
        if line.strip():
            yield line


class SectionLocator:
    """Maps section names to their start lines in a normalized document."""

    def __init__(self, html_threshold: int = HTML_TAG_THRESHOLD):
        self.html_threshold = html_threshold

    def locate(self, lines: list[str]) -> SectionIndex:
        index = SectionIndex(
            back_cover=self._first_by_priority(lines, "back_cover"),
            ai_llm=self._first_by_priority(lines, "ai_llm"),
            ai_image_generator=self._first_by_priority(lines, "ai_image_generator"),
            keywords=self._first_by_priority(lines, "keywords"),
            image_prompts=self._first_by_priority(lines, "image_prompts"),
        )

        sales = self._first_by_priority(lines, "sales")
        if sales is None:
            sales = detect_html_start(lines, self.html_threshold)
            index.sales_inclusive = sales is not None
        index.sales = sales

        logger.debug("Located sections: %s", index.found())
        return index

    def _first_by_priority(self, lines: list[str], section: str) -> Optional[int]:
        """Try each rule of a section in priority order over the whole document."""
        for rule in SECTION_RULES[section]:
            idx = find_first(lines, rule)
            if idx is not None:
                return idx
        return None
