"""Field extractors.

Each extractor reads the normalized lines (and, where relevant, a
section start from SectionLocator) and returns plain values for one
group of ParsedDocument fields.
"""

import re
from typing import Optional

from .models import MAX_IMAGE_PROMPTS
from .sections import HeaderRule, scan_section

# Words that disqualify a colon line from being the title line
TITLE_EXCLUDED_WORDS = ("author", "keyword", "image", "prompt")

_BY_SEPARATOR = " by "
_NUMBER_MARKER_RE = re.compile(r"^\d+\.\s*")
_BULLET_MARKER_RE = re.compile(r"^•\s*")


def split_author_name(name: str) -> tuple[str, str]:
    """Split an author name into (first, last).

    All tokens but the last form the first name, so middle names stay
    with it. A single token is a first name only.

    >>> split_author_name("Jane Q Public")
    ('Jane Q', 'Public')
    >>> split_author_name("Prince")
    ('Prince', '')
    """
    parts = name.split()
    if len(parts) >= 2:
        return " ".join(parts[:-1]), parts[-1]
    if len(parts) == 1:
        return parts[0], ""
    return "", ""


def find_title_line(lines: list[str]) -> Optional[str]:
    for line in lines:
        lowered = line.lower()
        if ":" not in line:
            continue
        if any(word in lowered for word in TITLE_EXCLUDED_WORDS):
            continue
        return line
    return None


def find_author_line(lines: list[str]) -> Optional[str]:
    for line in lines:
        if "author" in line.lower() and ":" in line:
            return line
    return None


def extract_title_block(lines: list[str]) -> dict[str, str]:
    """Extract title, subtitle and author names.

    The title line is split on its first colon. A " by " in the
    after-colon text separates subtitle from author. When that yields no
    author first name, a separate "Author: ..." line is used instead;
    the title line's author always wins when present.

    Returns a dict with book_title, subtitle, author_first_name and
    author_last_name (empty strings when not found).
    """
    result = {
        "book_title": "",
        "subtitle": "",
        "author_first_name": "",
        "author_last_name": "",
    }

    title_line = find_title_line(lines)
    if title_line is not None:
        title, _, after_colon = title_line.partition(":")
        after_colon = after_colon.strip()
        result["book_title"] = title.strip()

        by_idx = after_colon.lower().find(_BY_SEPARATOR)
        if by_idx != -1:
            result["subtitle"] = after_colon[:by_idx].strip()
            author = after_colon[by_idx + len(_BY_SEPARATOR):].strip()
            first, last = split_author_name(author)
            result["author_first_name"] = first
            result["author_last_name"] = last
        else:
            result["subtitle"] = after_colon

    if not result["author_first_name"]:
        author_line = find_author_line(lines)
        if author_line is not None:
            # Only the text between the first and second colon is the name
            name = author_line.split(":")[1].strip()
            first, last = split_author_name(name)
            result["author_first_name"] = first
            result["author_last_name"] = last

    return result


def extract_paragraph(
    lines: list[str],
    start: Optional[int],
    stop_rules: list[HeaderRule],
    inclusive: bool = False,
) -> str:
    """Join a section's body lines into one space-separated paragraph."""
    return " ".join(scan_section(lines, start, stop_rules, inclusive)).strip()


def extract_keyword_candidates(
    lines: list[str],
    start: Optional[int],
    stop_rules: list[HeaderRule],
) -> list[str]:
    """All comma-separated keyword tokens in the section, in encounter order."""
    candidates: list[str] = []
    for line in scan_section(lines, start, stop_rules):
        candidates.extend(token.strip() for token in line.split(",") if token.strip())
    return candidates


def strip_prompt_marker(line: str) -> str:
    """Remove a leading "1." style number or "•" bullet.

    >>> strip_prompt_marker("1. A dragon")
    'A dragon'
    >>> strip_prompt_marker("• A castle")
    'A castle'
    """
    cleaned = _NUMBER_MARKER_RE.sub("", line.strip())
    cleaned = _BULLET_MARKER_RE.sub("", cleaned)
    return cleaned.strip()


def extract_image_prompts(
    lines: list[str],
    start: Optional[int],
    stop_rules: list[HeaderRule],
    limit: int = MAX_IMAGE_PROMPTS,
) -> list[str]:
    """Up to `limit` prompts with enumeration markers stripped.

    Lines that are empty once stripped are skipped and do not count
    toward the limit.
    """
    prompts: list[str] = []
    for line in scan_section(lines, start, stop_rules):
        if len(prompts) >= limit:
            break
        cleaned = strip_prompt_marker(line)
        if cleaned:
            prompts.append(cleaned)
    return prompts
