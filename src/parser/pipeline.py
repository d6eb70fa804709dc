"""Two-stage document parse.

Idle -> Parsing -> Success | Failed. The AI extraction service, when
configured, gets the first attempt; any failure there falls through
silently to the heuristic parser. Only blank input or a heuristic
failure is reported to the user.
"""

import logging
import random
from typing import Callable, Optional

from .heuristic import HeuristicParser
from .models import (
    EmptyInputError,
    HeuristicParseError,
    ParseResult,
    ParseState,
    ParsedDocument,
)
from .remote import AIExtractionService

logger = logging.getLogger(__name__)

EMPTY_INPUT_MESSAGE = "Please paste your document first"
PARSE_ERROR_MESSAGE = "Error parsing document. Please check the format."


class DocumentParser:
    """Parses one document at a time into a ParsedDocument."""

    def __init__(
        self,
        remote: Optional[AIExtractionService] = None,
        heuristic: Optional[HeuristicParser] = None,
        rng: Optional[random.Random] = None,
        on_fallback: Optional[Callable[[str], None]] = None,
        remote_unavailable_reason: str = "",
    ):
        """
        Args:
            remote: Optional AI extraction service tried first.
            heuristic: Deterministic parser (built with `rng` if omitted).
            rng: Random source shared by the default heuristic parser.
            on_fallback: Observability hook called with the reason whenever
                the remote stage does not supply the record.
            remote_unavailable_reason: Reported as the fallback reason when
                no remote service is configured (e.g. missing API key).
        """
        self.remote = remote
        self.heuristic = heuristic or HeuristicParser(rng=rng)
        self._on_fallback = on_fallback or (lambda reason: None)
        self._remote_unavailable_reason = remote_unavailable_reason
        self.state = ParseState.IDLE

    def parse(self, text: str) -> ParseResult:
        try:
            self._require_text(text)
        except EmptyInputError as e:
            self.state = ParseState.IDLE
            return ParseResult(state=ParseState.FAILED, error=str(e))

        self.state = ParseState.PARSING
        fallback_reason = self._remote_unavailable_reason

        if self.remote is not None:
            try:
                document = self.remote.extract(text)
            except Exception as e:
                fallback_reason = f"{type(e).__name__}: {e}"
                logger.info("AI extraction failed, falling back to heuristic parsing: %s", e)
                self._on_fallback(fallback_reason)
            else:
                self.state = ParseState.SUCCESS
                return ParseResult(state=ParseState.SUCCESS, document=document, source="remote")
        elif fallback_reason:
            self._on_fallback(fallback_reason)

        try:
            document = self._parse_heuristic(text)
        except HeuristicParseError:
            self.state = ParseState.IDLE
            return ParseResult(
                state=ParseState.FAILED,
                error=PARSE_ERROR_MESSAGE,
                fallback_reason=fallback_reason,
            )

        self.state = ParseState.SUCCESS
        return ParseResult(
            state=ParseState.SUCCESS,
            document=document,
            source="heuristic",
            fallback_reason=fallback_reason,
        )

    def parse_or_raise(self, text: str) -> ParsedDocument:
        """Like parse(), but raise instead of returning a FAILED result."""
        self._require_text(text)
        result = self.parse(text)
        if not result.ok:
            raise HeuristicParseError(result.error)
        return result.document

    def _require_text(self, text: str) -> None:
        if not text or not text.strip():
            raise EmptyInputError(EMPTY_INPUT_MESSAGE)

    def _parse_heuristic(self, text: str) -> ParsedDocument:
        try:
            return self.heuristic.parse(text)
        except Exception as e:
            logger.exception("Heuristic parsing failed")
            raise HeuristicParseError(str(e)) from e
