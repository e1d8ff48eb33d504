"""MCP server exposing the page collector as a tool."""

from __future__ import annotations

import logging
from pathlib import Path

from mcp.server.fastmcp import FastMCP

from .collector import run_collection
from .config import CollectConfig
from .models import RunSummary

logger = logging.getLogger("page_harvest.mcp")
logger.setLevel(logging.ERROR)

mcp = FastMCP(name="page-harvest")


def format_summary(summary: RunSummary) -> str:
    lines = [
        f"Seed: {summary.seed_url}",
        f"Candidates found: {len(summary.candidates)}",
        f"Pages processed: {len(summary.pages)} ({summary.failed_pages} failed)",
        (
            f"Images: {summary.saved} saved, {summary.duplicates} duplicates, "
            f"{summary.too_small} too small, {summary.failed} failed"
        ),
    ]
    for page in summary.pages:
        if page.error:
            lines.append(f"- {page.url}: error: {page.error}")
            continue
        lines.append(f"- {page.url} -> {page.output_dir}")
        for result in page.images:
            if result.saved:
                lines.append(f"  - saved {result.path}")
    return "\n".join(lines) + "\n"


@mcp.tool()
async def collect(
    url: str,
    output: str = "downloads",
    save_articles: bool = False,
) -> str:
    """Render a page, follow up to 15 candidate links and download their largest images."""

    config = CollectConfig(
        output_root=Path(output).expanduser().resolve(),
        save_articles=save_articles,
    )
    summary = await run_collection(url, config)
    return format_summary(summary)


def main() -> None:
    """Entry point for running the MCP server."""
    logging.basicConfig(level=logging.ERROR)
    mcp.run()


if __name__ == "__main__":
    main()
