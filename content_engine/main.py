"""Generate FAQ, product and comparison page documents from a product record."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from content_engine.config import settings
from content_engine.core.exceptions import ContentEngineError
from content_engine.core.logging import setup_logging
from content_engine.integrations.document_io import JsonDocumentWriter, load_raw_product
from content_engine.services.pipeline import ContentPipeline

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Build CLI parser."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--input",
        default="data/product.json",
        help="Path to the raw product JSON record (default: data/product.json)",
    )
    parser.add_argument(
        "--output-dir",
        default=settings.output_dir,
        help=f"Directory for generated page documents (default: {settings.output_dir})",
    )
    parser.add_argument(
        "--sequential",
        action="store_true",
        help="Build pages one after another instead of concurrently",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    return parser.parse_args(argv)


async def async_main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level)

    writer = JsonDocumentWriter(args.output_dir)
    pipeline = ContentPipeline(
        writer=writer,
        concurrent=False if args.sequential else None,
    )

    try:
        raw = load_raw_product(args.input)
        result = await pipeline.run(raw)
    except ContentEngineError as exc:
        print(f"error: {type(exc).__name__}: {exc.message}", file=sys.stderr)
        return 1

    for page_type in result.documents:
        print(f"wrote {page_type}: {writer.path_for(page_type)}")
    for page_type, failure in result.failures.items():
        print(f"failed {page_type}: {failure.error}: {failure.message}", file=sys.stderr)

    return 0 if result.succeeded else 2


def main() -> int:
    """Sync wrapper."""
    return asyncio.run(async_main())


if __name__ == "__main__":
    raise SystemExit(main())
