"""Sheet export for parsed documents."""

from .sheet import build_block, format_sheet, render_sheet, row_count

__all__ = ["build_block", "format_sheet", "render_sheet", "row_count"]
