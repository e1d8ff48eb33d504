"""Command-line entry point for the page collector."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import time
from pathlib import Path
from typing import Callable, Optional, Sequence

from .collector import run_collection
from .config import MAX_CANDIDATES, MIN_IMAGE_BYTES, CollectConfig, SelectionMode
from .errors import DiscoveryError
from .models import RunSummary

logger = logging.getLogger("page_harvest.cli")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Render a web page with Playwright, find linked articles and galleries, "
            "and download their largest images into a per-domain, per-day folder."
        ),
    )
    parser.add_argument("url", nargs="?", help="Page to start from")
    parser.add_argument("-u", "--url", dest="url_option", help="Page to start from")
    parser.add_argument(
        "--output",
        default="downloads",
        type=Path,
        help="Root directory under which {domain}/{date} folders are created",
    )
    parser.add_argument(
        "--daily",
        action="store_true",
        help="Look for daily updates (recorded as a hint)",
    )
    parser.add_argument(
        "--interactive",
        action="store_true",
        help="Choose which candidates to download instead of taking all of them",
    )
    parser.add_argument(
        "--articles",
        action="store_true",
        help="Also save a reader-view HTML copy of every processed page",
    )
    parser.add_argument(
        "--max-candidates",
        type=int,
        default=MAX_CANDIDATES,
        help="Maximum number of discovered links to offer or process",
    )
    parser.add_argument(
        "--min-size-kb",
        type=int,
        default=MIN_IMAGE_BYTES // 1024,
        help="Skip images smaller than this many KiB",
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=1,
        help="Number of images to download at once per page",
    )
    parser.add_argument(
        "--wait",
        type=float,
        default=1.0,
        help="Seconds to wait after network idle before reading HTML",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Navigation timeout in seconds",
    )
    parser.add_argument(
        "--request-timeout",
        type=float,
        default=15.0,
        help="Image download timeout in seconds",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    argv = list(sys.argv[1:] if argv is None else argv)
    return parser.parse_args(argv)


def prompt_for_url(input_fn: Callable[[str], str] = input) -> str:
    while True:
        answer = input_fn("Please enter the website URL to scrape: ").strip()
        if answer.startswith("http"):
            return answer
        print("Must start with http/https")


def build_config(args: argparse.Namespace) -> CollectConfig:
    return CollectConfig(
        output_root=Path(args.output).resolve(),
        selection_mode=(
            SelectionMode.INTERACTIVE if args.interactive else SelectionMode.AUTO
        ),
        max_candidates=args.max_candidates,
        min_image_bytes=args.min_size_kb * 1024,
        save_articles=args.articles,
        daily=args.daily,
        wait_after_load=args.wait,
        navigation_timeout=args.timeout,
        request_timeout=args.request_timeout,
        max_concurrent_downloads=max(1, args.concurrency),
    )


def report_summary(summary: RunSummary, elapsed: float) -> None:
    logger.info(
        "Finished in %.2fs: %d pages (%d failed), %d saved, %d duplicates, "
        "%d too small, %d failed",
        elapsed,
        len(summary.pages),
        summary.failed_pages,
        summary.saved,
        summary.duplicates,
        summary.too_small,
        summary.failed,
    )
    for page in summary.pages:
        if page.error:
            logger.debug("Page %s failed: %s", page.url, page.error)
            continue
        logger.debug(
            "Page %s -> %s (%d images)",
            page.url,
            page.output_dir,
            len(page.images),
        )


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )

    url: Optional[str] = args.url_option or args.url
    if not url:
        url = prompt_for_url()
    if not url.startswith("http"):
        logger.error("URL must start with http/https: %s", url)
        return 1

    config = build_config(args)
    overall_start = time.perf_counter()
    try:
        summary = asyncio.run(run_collection(url, config))
    except DiscoveryError as exc:
        logger.error("Fatal Error: %s", exc)
        return 1
    report_summary(summary, time.perf_counter() - overall_start)
    return 0


if __name__ == "__main__":
    sys.exit(main())
