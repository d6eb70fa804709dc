"""
docsheet CLI.

Commands:
  parse    Parse a document and print sheet rows (or the record as JSON/YAML)
  login    Store an Anthropic API key for AI extraction
  logout   Remove the stored API key
"""

import argparse
import json
import logging
import random
import sys
from pathlib import Path

import yaml

from src.config import (
    clear_api_key, get_api_key, get_config_path, get_model,
    interactive_login, is_ai_enabled,
)
from src.cli.spinner import Spinner
from src.export.sheet import FIXED_ROWS, render_sheet
from src.llm.gateway import ClaudeGateway
from src.llm.prompt_registry import PromptRegistry
from src.parser.models import MAX_IMAGE_PROMPTS, MAX_KEYWORDS, ParsedDocument
from src.parser.pipeline import DocumentParser
from src.parser.remote import AIExtractionService

logger = logging.getLogger(__name__)

NOT_FOUND = "Not found"


def configure_logging(verbosity: int) -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _read_input(path: str | None) -> str:
    if path is None or path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _make_rng(seed):
    return random.Random(seed) if seed is not None else None


def _make_parser(args, rng) -> DocumentParser:
    """Build the two-stage parser, with the remote stage when it can run."""
    remote = None
    unavailable = ""

    if args.no_ai or not is_ai_enabled():
        unavailable = "AI extraction disabled"
    else:
        api_key = get_api_key()
        if not api_key:
            unavailable = "No API key configured"
        else:
            try:
                gateway = ClaudeGateway(api_key=api_key, model=get_model())
            except ImportError as e:
                unavailable = str(e)
            else:
                remote = AIExtractionService(gateway, PromptRegistry(), rng=rng)

    return DocumentParser(
        remote=remote,
        rng=rng,
        on_fallback=lambda reason: logger.info("Using heuristic parser: %s", reason),
        remote_unavailable_reason=unavailable,
    )


def format_preview(document: ParsedDocument, include_image_prompts: bool) -> str:
    """Labelled two-column preview with placeholders for missing fields."""
    rows = [(label, getattr(document, attr)) for label, attr in FIXED_ROWS]
    for i in range(MAX_KEYWORDS):
        value = document.keywords[i] if i < len(document.keywords) else ""
        rows.append((f"Keyword {i + 1}", value))
    if include_image_prompts:
        for i in range(MAX_IMAGE_PROMPTS):
            value = document.image_prompts[i] if i < len(document.image_prompts) else ""
            rows.append((f"Image Prompt {i + 1}", value))

    width = max(len(label) for label, _ in rows)
    return "\n".join(f"{label.ljust(width)}  {value or NOT_FOUND}" for label, value in rows)


def parse_cmd(args) -> int:
    """Parse a document and print the requested output."""
    try:
        text = _read_input(args.input)
    except OSError as e:
        print(f"Error: cannot read {args.input}: {e}", file=sys.stderr)
        return 1

    rng = _make_rng(args.seed)
    parser = _make_parser(args, rng)

    with Spinner("Extracting"):
        result = parser.parse(text)

    if not result.ok:
        print(f"Error: {result.error}", file=sys.stderr)
        return 1

    document = result.document
    if args.preview:
        print(format_preview(document, args.images), file=sys.stderr)
        print(file=sys.stderr)

    if args.format == "json":
        output = json.dumps(document.to_dict(), indent=2, ensure_ascii=False)
    elif args.format == "yaml":
        output = yaml.safe_dump(document.to_dict(), sort_keys=False, allow_unicode=True).rstrip("\n")
    else:
        output = render_sheet(document, include_image_prompts=args.images, rng=rng)

    if args.output:
        Path(args.output).write_text(output, encoding="utf-8")
        print(f"Wrote {args.format} output to {args.output} ({result.source} parse)", file=sys.stderr)
    else:
        print(output)
    return 0


def login_cmd(args) -> int:
    """Interactive login to set up API key."""
    return 0 if interactive_login() else 1


def logout_cmd(args) -> int:
    """Remove stored API key."""
    clear_api_key()
    print(f"Logged out. API key removed from {get_config_path()}")
    return 0


def build_parser():
    parser = argparse.ArgumentParser(
        description="docsheet - parse a book listing document into spreadsheet rows"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase log output (-v info, -vv debug)",
    )

    sub = parser.add_subparsers(dest="command")

    # parse
    parse_parser = sub.add_parser("parse", help="Parse a document into sheet rows")
    parse_parser.add_argument("input", nargs="?", default=None, help="Document file (default: stdin)")
    parse_parser.add_argument("--images", action="store_true", help="Include image prompt rows")
    parse_parser.add_argument("--output", "-o", help="Write output to a file instead of stdout")
    parse_parser.add_argument("--no-ai", action="store_true", help="Skip AI extraction; heuristic only")
    parse_parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible sampling")
    parse_parser.add_argument(
        "--format",
        choices=["tsv", "json", "yaml"],
        default="tsv",
        help="Output format (default: tsv)",
    )
    parse_parser.add_argument("--preview", action="store_true", help="Print a labelled preview to stderr")
    parse_parser.set_defaults(func=parse_cmd)

    # login
    login_parser = sub.add_parser("login", help="Set up API key")
    login_parser.set_defaults(func=login_cmd)

    # logout
    logout_parser = sub.add_parser("logout", help="Remove stored API key")
    logout_parser.set_defaults(func=logout_cmd)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return 0
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
