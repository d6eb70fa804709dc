"""Test fixtures for docsheet tests."""

from .documents import (
    full_document,
    minimal_document,
    html_only_document,
    author_line_document,
    labelled_sales_document,
)

__all__ = [
    "full_document",
    "minimal_document",
    "html_only_document",
    "author_line_document",
    "labelled_sales_document",
]
