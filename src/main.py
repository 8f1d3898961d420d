# src/main.py — v2
"""CLI entry point for the medtranslate commands.

Usage:
    medtranslate process <file> [--mime TYPE]
    medtranslate text <text>
    medtranslate translate <text> --from LANG --to LANG
    medtranslate reports [--limit N]
    medtranslate search <query>

Results are printed as JSON on stdout; logs go to stderr.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from medtranslate.core.errors import PipelineError
from medtranslate.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    from medtranslate.config.settings import ConfigurationError, load_settings

    try:
        settings = load_settings()
    except (ConfigurationError, ValueError) as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    _setup_logging(settings, args.verbose)

    try:
        return asyncio.run(_run(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except PipelineError as exc:
        logger.error("%s", exc)
        return 1
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="medtranslate",
        description=f"medtranslate v{__version__}: medical document translation pipeline",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--actor", default="cli",
        help="Identity that rate limits are tracked against (default: cli)",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- process ---
    p_process = subparsers.add_parser(
        "process", help="Extract, analyze and store a PDF or image",
    )
    p_process.add_argument("file", type=Path, help="Path to PDF or image")
    p_process.add_argument(
        "--mime", default=None,
        help="MIME type (guessed from the file name if omitted)",
    )
    p_process.set_defaults(func=_cmd_process)

    # --- text ---
    p_text = subparsers.add_parser("text", help="Analyze and store pasted text")
    p_text.add_argument("text", help="Document text")
    p_text.set_defaults(func=_cmd_text)

    # --- translate ---
    p_translate = subparsers.add_parser("translate", help="Translate a text")
    p_translate.add_argument("text", help="Text to translate")
    p_translate.add_argument("--from", dest="source", required=True, help="Source language")
    p_translate.add_argument("--to", dest="target", required=True, help="Target language")
    p_translate.set_defaults(func=_cmd_translate)

    # --- reports ---
    p_reports = subparsers.add_parser("reports", help="List stored documents")
    p_reports.add_argument("--limit", type=int, default=20, help="Maximum documents (default: 20)")
    p_reports.set_defaults(func=_cmd_reports)

    # --- search ---
    p_search = subparsers.add_parser("search", help="Search stored documents")
    p_search.add_argument("query", help="Search text")
    p_search.set_defaults(func=_cmd_search)

    return parser


async def _run(args: argparse.Namespace, settings) -> int:
    from medtranslate.api.context import PipelineContext

    async with await PipelineContext.create(settings) as ctx:
        return await args.func(args, ctx)


async def _cmd_process(args: argparse.Namespace, ctx) -> int:
    """Process a single uploaded file."""
    from medtranslate.core.models import UploadedFile

    file_path: Path = args.file
    if not file_path.is_file():
        logger.error("File not found: %s", file_path)
        return 1

    upload = UploadedFile.from_path(file_path, mime_type=args.mime)
    document = await ctx.pipeline.process_file(upload, actor_id=args.actor)
    _print_json(document.model_dump(mode="json"))
    return 0


async def _cmd_text(args: argparse.Namespace, ctx) -> int:
    document = await ctx.pipeline.process_text(args.text, actor_id=args.actor)
    _print_json(document.model_dump(mode="json"))
    return 0


async def _cmd_translate(args: argparse.Namespace, ctx) -> int:
    result = await ctx.orchestrator.translate(
        args.text, args.source, args.target, actor_id=args.actor
    )
    _print_json(result.model_dump(mode="json"))
    return 0


async def _cmd_reports(args: argparse.Namespace, ctx) -> int:
    documents = await ctx.pipeline.load_reports(limit=args.limit)
    _print_json([d.model_dump(mode="json") for d in documents])
    return 0


async def _cmd_search(args: argparse.Namespace, ctx) -> int:
    hits = await ctx.pipeline.search_reports(args.query)
    _print_json([h.model_dump(mode="json") for h in hits])
    return 0


def _print_json(payload: object) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def _setup_logging(settings, verbose: bool) -> None:
    """Configure logging for CLI usage."""
    from medtranslate.logging.logger import setup_logging

    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )
    # Quiet noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


if __name__ == "__main__":
    sys.exit(main())
