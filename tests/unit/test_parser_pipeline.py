"""Tests for the two-stage DocumentParser."""

import logging

import pytest

from src.parser.heuristic import HeuristicParser
from src.parser.models import EmptyInputError, HeuristicParseError, ParseState
from src.parser.pipeline import EMPTY_INPUT_MESSAGE, PARSE_ERROR_MESSAGE, DocumentParser
from tests.fixtures.documents import full_document


class ExplodingParser(HeuristicParser):
    def parse(self, text):
        raise RuntimeError("boom")


class TestEmptyInput:
    @pytest.mark.parametrize("text", ["", "   ", "\n\t\n"])
    def test_blank_text_fails_without_document(self, text, rng):
        parser = DocumentParser(rng=rng)
        result = parser.parse(text)

        assert result.state == ParseState.FAILED
        assert result.error == EMPTY_INPUT_MESSAGE
        assert result.document is None
        assert parser.state == ParseState.IDLE

    def test_blank_text_skips_remote(self, remote_service, mock_gateway):
        DocumentParser(remote=remote_service).parse("  ")
        assert mock_gateway.call_log == []

    def test_parse_or_raise(self, rng):
        with pytest.raises(EmptyInputError):
            DocumentParser(rng=rng).parse_or_raise("")


class TestHeuristicOnly:
    def test_success(self, rng):
        parser = DocumentParser(rng=rng)
        result = parser.parse(full_document())

        assert result.ok
        assert result.source == "heuristic"
        assert result.document.book_title == "The Quiet Garden"
        assert result.fallback_reason == ""
        assert parser.state == ParseState.SUCCESS

    def test_unavailable_reason_reported(self, rng):
        reasons = []
        parser = DocumentParser(
            rng=rng,
            on_fallback=reasons.append,
            remote_unavailable_reason="No API key configured",
        )
        result = parser.parse(full_document())

        assert result.ok
        assert result.fallback_reason == "No API key configured"
        assert reasons == ["No API key configured"]

    def test_heuristic_failure_is_generic_error(self, caplog):
        parser = DocumentParser(heuristic=ExplodingParser())

        with caplog.at_level(logging.ERROR, logger="src.parser.pipeline"):
            result = parser.parse("Title: Sub")

        assert result.state == ParseState.FAILED
        assert result.error == PARSE_ERROR_MESSAGE
        assert result.document is None
        assert parser.state == ParseState.IDLE
        assert "Heuristic parsing failed" in caplog.text

    def test_parse_or_raise_heuristic_failure(self):
        with pytest.raises(HeuristicParseError):
            DocumentParser(heuristic=ExplodingParser()).parse_or_raise("Title: Sub")


class TestRemoteFirst:
    def test_remote_success(self, remote_service, mock_gateway, full_payload, rng):
        mock_gateway.set_response("Document to parse", full_payload)
        parser = DocumentParser(remote=remote_service, rng=rng)

        result = parser.parse("anything at all")

        assert result.ok
        assert result.source == "remote"
        assert result.document.subtitle == "A Year of Slow Living"
        assert len(mock_gateway.call_log) == 1

    def test_remote_failure_falls_back_silently(self, remote_service, mock_gateway, rng, caplog):
        mock_gateway.fail_with("api_error", "503 Service Unavailable")
        reasons = []
        parser = DocumentParser(remote=remote_service, rng=rng, on_fallback=reasons.append)

        with caplog.at_level(logging.INFO, logger="src.parser.pipeline"):
            result = parser.parse(full_document())

        assert result.ok
        assert result.error == ""
        assert result.source == "heuristic"
        assert result.document.book_title == "The Quiet Garden"
        assert "503 Service Unavailable" in result.fallback_reason
        assert len(reasons) == 1
        assert "falling back" in caplog.text
        assert all(record.levelno < logging.WARNING for record in caplog.records)

    def test_remote_is_not_retried(self, remote_service, mock_gateway, rng):
        mock_gateway.fail_with("api_error", "timeout")
        DocumentParser(remote=remote_service, rng=rng).parse(full_document())
        assert len(mock_gateway.call_log) == 1

    def test_remote_and_heuristic_both_fail(self, remote_service, mock_gateway):
        mock_gateway.fail_with("api_error", "down")
        parser = DocumentParser(remote=remote_service, heuristic=ExplodingParser())

        result = parser.parse("Title: Sub")

        assert result.state == ParseState.FAILED
        assert result.error == PARSE_ERROR_MESSAGE
        assert "down" in result.fallback_reason
