"""Data models for the document parser.

All values passed between the normalizer, section locator, field
extractors, and the sheet formatter.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


MAX_KEYWORDS = 7
MAX_IMAGE_PROMPTS = 5

# (attribute, wire name) for the string fields, in sheet row order
STRING_FIELDS = [
    ("book_title", "bookTitle"),
    ("subtitle", "subtitle"),
    ("author_first_name", "authorFirstName"),
    ("author_last_name", "authorLastName"),
    ("html_salesletter", "htmlSalesletter"),
    ("back_book_cover", "backBookCover"),
    ("ai_llm", "aiLlm"),
    ("ai_image_generator", "aiImageGenerator"),
]


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class DocumentParseError(Exception):
    """Base class for parse failures."""


class EmptyInputError(DocumentParseError):
    """Raw text was blank or whitespace-only."""


class RemoteServiceError(DocumentParseError):
    """The AI extraction service could not produce a record."""


class HeuristicParseError(DocumentParseError):
    """Unexpected failure inside the deterministic extractors."""


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

@dataclass
class ParsedDocument:
    """The structured record extracted from one document."""
    book_title: str = ""
    subtitle: str = ""
    author_first_name: str = ""
    author_last_name: str = ""
    html_salesletter: str = ""
    back_book_cover: str = ""
    ai_llm: str = ""
    ai_image_generator: str = ""
    keywords: list[str] = field(default_factory=list)
    image_prompts: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        data = {wire: getattr(self, attr) for attr, wire in STRING_FIELDS}
        data["keywords"] = list(self.keywords)
        data["imagePrompts"] = list(self.image_prompts)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "ParsedDocument":
        kwargs = {attr: data.get(wire) or "" for attr, wire in STRING_FIELDS}
        return cls(
            keywords=list(data.get("keywords") or []),
            image_prompts=list(data.get("imagePrompts") or []),
            **kwargs,
        )


@dataclass
class SectionIndex:
    """Start line of each located section, or None when absent.

    sales_inclusive is set when the sales start came from HTML detection:
    that line is content, not a header, so the scan includes it.
    """
    sales: Optional[int] = None
    sales_inclusive: bool = False
    back_cover: Optional[int] = None
    ai_llm: Optional[int] = None
    ai_image_generator: Optional[int] = None
    keywords: Optional[int] = None
    image_prompts: Optional[int] = None

    def found(self) -> dict[str, int]:
        """Located sections only, for logging."""
        names = [
            "sales", "back_cover", "ai_llm", "ai_image_generator",
            "keywords", "image_prompts",
        ]
        return {n: getattr(self, n) for n in names if getattr(self, n) is not None}


# ---------------------------------------------------------------------------
# Parse request
# ---------------------------------------------------------------------------

class ParseState(Enum):
    """Lifecycle of a single parse request."""
    IDLE = "idle"
    PARSING = "parsing"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class ParseResult:
    """Outcome of DocumentParser.parse()."""
    state: ParseState
    document: Optional[ParsedDocument] = None
    source: str = ""            # "remote" or "heuristic"
    error: str = ""             # user-visible message on FAILED
    fallback_reason: str = ""   # why the remote stage did not supply the record

    @property
    def ok(self) -> bool:
        return self.state == ParseState.SUCCESS
