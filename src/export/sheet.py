"""Spreadsheet text rendering.

Turns a ParsedDocument into the three-column, tab-separated block that
pastes into a sheet: one header row, an ebook block, then a paperback
block with its own keyword draw.
"""

import random
from typing import Optional, Sequence

from src.parser.models import MAX_IMAGE_PROMPTS, MAX_KEYWORDS, ParsedDocument
from src.parser.sampling import default_rng, sample_keywords

HEADER = ("Classification", "Values", "Selectors")

FIXED_ROWS = [
    ("Book Title", "book_title"),
    ("Subtitle", "subtitle"),
    ("Author First Name", "author_first_name"),
    ("Author Last Name", "author_last_name"),
    ("HTML Salesletter", "html_salesletter"),
    ("Back Book Cover", "back_book_cover"),
    ("AI LLM", "ai_llm"),
    ("AI Image Generator", "ai_image_generator"),
]

COLUMN_SEP = "\t"
ROW_SEP = "\n"


def row_count(include_image_prompts: bool) -> int:
    """Total rows in a formatted sheet, header included."""
    per_block = len(FIXED_ROWS) + MAX_KEYWORDS + (MAX_IMAGE_PROMPTS if include_image_prompts else 0)
    return 1 + 2 * per_block


def _cell(value: str) -> str:
    # Embedded separators would shift rows or columns
    return " ".join(value.replace(COLUMN_SEP, " ").splitlines())


def _padded(values: Sequence[str], size: int) -> list[str]:
    values = list(values)[:size]
    return values + [""] * (size - len(values))


def _row(label: str, value: str) -> str:
    # Trailing empty Selectors cell
    return COLUMN_SEP.join([label, _cell(value), ""])


def build_block(
    document: ParsedDocument,
    keywords: Sequence[str],
    include_image_prompts: bool = False,
) -> list[str]:
    """Rows for one ebook/paperback block (no header)."""
    rows = [_row(label, getattr(document, attr)) for label, attr in FIXED_ROWS]
    rows.extend(
        _row(f"Keyword {i}", kw)
        for i, kw in enumerate(_padded(keywords, MAX_KEYWORDS), start=1)
    )
    if include_image_prompts:
        rows.extend(
            _row(f"Image Prompt {i}", prompt)
            for i, prompt in enumerate(_padded(document.image_prompts, MAX_IMAGE_PROMPTS), start=1)
        )
    return rows


def format_sheet(
    document: ParsedDocument,
    include_image_prompts: bool,
    ebook_keywords: Sequence[str],
    paperback_keywords: Sequence[str],
) -> str:
    """Render the full sheet text from pre-sampled keyword subsets.

    Pure: the same arguments always give byte-identical output.
    """
    rows = [COLUMN_SEP.join(HEADER)]
    rows.extend(build_block(document, ebook_keywords, include_image_prompts))
    rows.extend(build_block(document, paperback_keywords, include_image_prompts))
    return ROW_SEP.join(rows)


def render_sheet(
    document: ParsedDocument,
    include_image_prompts: bool = False,
    rng: Optional[random.Random] = None,
) -> str:
    """Draw fresh ebook and paperback keyword subsets and format the sheet.

    Each call draws two new independent permutations; nothing is cached.
    """
    rng = rng or default_rng()
    ebook = sample_keywords(document.keywords, rng)
    paperback = sample_keywords(document.keywords, rng)
    return format_sheet(document, include_image_prompts, ebook, paperback)
