"""Minimal CLI entry point for manual testing of email-extract."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from email_extract.config.settings import EmailExtractSettings
from email_extract.core.converter import MarkdownConverter
from email_extract.core.exceptions import EmailExtractError
from email_extract.core.extracted import ExtractedEntities
from email_extract.core.models import to_jsonable
from email_extract.core.parser import parse_email

logger = logging.getLogger(__name__)


def setup_logging(level: str) -> None:
    """Configure logging with timestamp and module info."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def _add_output_args(subparser: argparse.ArgumentParser) -> None:
    """Add --format and --indent flags to a subparser."""
    subparser.add_argument(
        "--format",
        "-f",
        choices=("json", "markdown"),
        default=None,
        dest="output_format",
        help="Output format (default: from settings)",
    )
    subparser.add_argument(
        "--indent",
        type=int,
        default=None,
        help="JSON indentation (default: from settings)",
    )


def _validate_args(args: argparse.Namespace) -> None:
    """Reject out-of-range numeric flags."""
    if getattr(args, "uid", 1) < 0:
        print("Error: --uid must be non-negative", file=sys.stderr)
        sys.exit(1)
    if getattr(args, "indent", None) is not None and args.indent < 0:
        print("Error: --indent must be non-negative", file=sys.stderr)
        sys.exit(1)


def run_parse(args: argparse.Namespace, settings: EmailExtractSettings) -> int:
    """Parse each .eml file and print it. Returns the number of failures."""
    output_format = args.output_format or settings.output_format
    indent = args.indent if args.indent is not None else settings.json_indent
    converter = MarkdownConverter(favor_recall=settings.markdown_favor_recall)

    failures = 0
    for offset, path in enumerate(args.paths):
        uid = args.uid + offset
        try:
            email = parse_email(uid, Path(path).read_bytes())
            if output_format == "markdown":
                print(converter.convert(email))
            else:
                print(json.dumps(email.to_dict(), indent=indent, ensure_ascii=False))
        except (OSError, EmailExtractError) as e:
            logger.error("Failed to parse %s: %s", path, e)
            failures += 1

    return failures


def run_extract(args: argparse.Namespace, settings: EmailExtractSettings) -> None:
    """Extract entities from a text file (or stdin) and print them as JSON."""
    indent = args.indent if args.indent is not None else settings.json_indent
    if args.path and args.path != "-":
        text = Path(args.path).read_text(encoding="utf-8")
    else:
        text = sys.stdin.read()

    entities = ExtractedEntities.extract(text)
    print(json.dumps(to_jsonable(entities), indent=indent, ensure_ascii=False))


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="email-extract - Parse emails into structured records"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # parse command
    parse_parser = subparsers.add_parser("parse", help="Parse .eml files")
    parse_parser.add_argument("paths", nargs="+", help="Paths to .eml files")
    parse_parser.add_argument(
        "--uid", type=int, default=1, help="UID of the first message (default: 1)"
    )
    _add_output_args(parse_parser)

    # extract command
    extract_parser = subparsers.add_parser("extract", help="Extract entities from text")
    extract_parser.add_argument("path", nargs="?", help="Text file (default: stdin)")
    extract_parser.add_argument("--indent", type=int, default=None, help="JSON indentation")

    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        sys.exit(1)

    _validate_args(args)

    settings = EmailExtractSettings()
    setup_logging(settings.log_level)

    try:
        if args.command == "parse":
            failures = run_parse(args, settings)
            if failures:
                sys.exit(1)

        elif args.command == "extract":
            run_extract(args, settings)

    except KeyboardInterrupt:
        print("\n\nInterrupted by user", file=sys.stderr)
        sys.exit(130)
    except OSError as e:
        print(f"\nError: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
