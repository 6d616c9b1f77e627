#!/usr/bin/env python3
"""
html-chunk - chunk a converted HTML source from the command line.

Reads an HTML file, chunks it in structured or flat mode, writes the
ChunkingResult JSON below the data directory and prints a summary.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from .config import ChunkingServiceConfig
from .exceptions import ChunkingError
from .logging_config import get_logger, resolve_log_level, setup_logging
from .models import ChunkingConfig, ChunkingResult, ChunkMode
from .quality import evaluate_chunks
from .service import ChunkingService

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="html-chunk",
        description="Split converted HTML sources into heading-annotated chunks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s notes.html
  %(prog)s paper.html --mime-type application/pdf --evaluate
  %(prog)s notes.html --target-words 200 --max-words 300 -o out/
        """
    )
    parser.add_argument(
        "html_path",
        type=Path,
        help="Path to the HTML file to chunk"
    )
    parser.add_argument(
        "--mime-type",
        default=None,
        help="MIME type of the original source (application/pdf selects flat mode)"
    )
    parser.add_argument(
        "--mode",
        choices=[m.value for m in ChunkMode],
        default=None,
        help="Force a chunking mode instead of deriving it from --mime-type"
    )
    parser.add_argument("--title", default=None, help="Source title (default: file stem)")
    parser.add_argument("--target-words", type=int, default=None)
    parser.add_argument("--max-words", type=int, default=None)
    parser.add_argument("--min-words", type=int, default=None)
    parser.add_argument("--overlap-sentences", type=int, default=None)
    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Data directory for chunk JSON (default: CHUNKING_DATA_DIR or data/chunking)"
    )
    parser.add_argument(
        "--evaluate",
        action="store_true",
        help="Run the chunk quality checks and print the report"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show detailed output"
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress progress output"
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write DEBUG logs to this file"
    )
    return parser


def build_config(args: argparse.Namespace) -> ChunkingServiceConfig:
    config = ChunkingServiceConfig.from_env()
    overrides = {
        "target_words": args.target_words,
        "max_words": args.max_words,
        "min_words": args.min_words,
        "overlap_sentences": args.overlap_sentences,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if overrides:
        config.chunking = ChunkingConfig(**{**config.chunking.model_dump(), **overrides})
    if args.output:
        config.data_dir = str(args.output)
    return config


def print_summary(result: ChunkingResult, output_path: str) -> None:
    stats = result.stats
    print(f"Source:   {result.source_title} ({result.source_id})")
    print(f"Mode:     {result.mode.value}")
    print(f"Chunks:   {stats.total_chunks}")
    if stats.total_chunks:
        print(
            f"Words:    {stats.min_chunk_words}-{stats.max_chunk_words} "
            f"(avg {stats.avg_chunk_words:.0f})"
        )
    print(f"Merged:   {stats.merged_fragments} fragment(s)")
    print(f"Output:   {output_path}")


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    setup_logging(level=resolve_log_level(args.verbose, args.quiet), log_file=args.log_file)

    if not args.html_path.exists():
        logger.error(f"HTML file not found: {args.html_path}")
        return 1

    try:
        service = ChunkingService(build_config(args))
        if args.mode:
            html = args.html_path.read_text(encoding="utf-8")
            source_id = args.html_path.stem
            result = service.chunker.chunk_document(
                source_id, args.title or source_id, html, args.mode
            )
            output_path = str(service.storage.save(result).chunk_file)
        else:
            result, output_path = service.chunk_and_save(
                str(args.html_path), args.mime_type, args.title
            )
    except ChunkingError as e:
        logger.error(str(e))
        return 1
    except ValueError as e:
        logger.error(f"Invalid input: {e}")
        return 1

    if not args.quiet:
        print_summary(result, output_path)

    if args.evaluate:
        report = evaluate_chunks(result.chunks, result.mode, result.config)
        print(json.dumps(report.to_dict(), indent=2))
        return 0 if report.passed else 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
