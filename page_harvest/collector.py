"""High-level orchestration: render, discover, select and download."""

from __future__ import annotations

import asyncio
import logging
from contextlib import AsyncExitStack
from pathlib import Path
from typing import AsyncContextManager, Callable, List, Optional, Sequence
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from playwright.async_api import (
    Error as PlaywrightError,
    TimeoutError as PlaywrightTimeoutError,
)

from .article import save_article
from .config import CollectConfig
from .discovery import collect_image_urls, discover_candidates, parse_html
from .errors import DiscoveryError, SubPageError
from .images import ImageDownloader
from .models import DownloadResult, PageReport, RunSummary
from .paths import destination_for
from .renderer import RenderedPage, RenderSession
from .selection import Chooser, select_candidates

logger = logging.getLogger("page_harvest")

SessionFactory = Callable[[CollectConfig], AsyncContextManager[RenderSession]]


def _describe(exc: Exception) -> str:
    if isinstance(exc, PlaywrightTimeoutError):
        return f"timed out: {exc}"
    return str(exc)


class Collector:
    """Owns the rendering session for a run and drives every stage of it."""

    def __init__(
        self,
        config: CollectConfig,
        session_factory: SessionFactory = RenderSession,
        downloader: Optional[ImageDownloader] = None,
        chooser: Optional[Chooser] = None,
    ) -> None:
        self.config = config
        self.session_factory = session_factory
        self.downloader = downloader
        self.chooser = chooser

    def _make_downloader(self) -> ImageDownloader:
        return ImageDownloader(
            min_bytes=self.config.min_image_bytes,
            timeout=self.config.request_timeout,
        )

    async def run(self, url: str) -> RunSummary:
        """Collect everything reachable from ``url``.

        Raises :class:`DiscoveryError` if the seed page cannot be rendered;
        failures on individual pages or images are recorded in the summary.
        """
        summary = RunSummary(seed_url=url)
        downloader = self.downloader or self._make_downloader()
        if self.config.daily:
            logger.info("Daily mode requested; looking for recent updates on %s", url)
        logger.info("Analyzing %s...", url)
        try:
            async with AsyncExitStack() as stack:
                session = await self._open_session(stack, url)
                seed = await self._render_seed(session, url)
                soup = parse_html(seed.html)
                summary.candidates = discover_candidates(soup)

                if not summary.candidates:
                    logger.warning(
                        "No obvious articles or galleries found. "
                        "Extracting images from current page..."
                    )
                    report = await self.process_rendered(seed, downloader, soup)
                    summary.pages.append(report)
                    return summary

                summary.selected = select_candidates(
                    summary.candidates,
                    self.config.selection_mode,
                    self.config.max_candidates,
                    self.chooser,
                )
                for link in summary.selected:
                    absolute_url = urljoin(seed.final_url, link)
                    logger.info("Processing: %s", absolute_url)
                    report = await self.process_page(session, absolute_url, downloader)
                    summary.pages.append(report)
        finally:
            if self.downloader is None:
                downloader.close()
        return summary

    async def _open_session(self, stack: AsyncExitStack, url: str) -> RenderSession:
        try:
            return await stack.enter_async_context(self.session_factory(self.config))
        except PlaywrightError as exc:
            raise DiscoveryError(url, _describe(exc)) from exc

    async def _render_seed(self, session: RenderSession, url: str) -> RenderedPage:
        try:
            return await session.render(url)
        except PlaywrightError as exc:
            raise DiscoveryError(url, _describe(exc)) from exc

    async def process_page(
        self,
        session: RenderSession,
        url: str,
        downloader: ImageDownloader,
    ) -> PageReport:
        """Render one selected page and collect its content."""
        try:
            page = await session.render(url)
        except PlaywrightError as exc:
            error = SubPageError(url, _describe(exc))
            logger.error("  [Error] %s", error)
            return PageReport(url=url, error=error.reason)
        return await self.process_rendered(page, downloader)

    async def process_rendered(
        self,
        page: RenderedPage,
        downloader: ImageDownloader,
        soup: Optional[BeautifulSoup] = None,
    ) -> PageReport:
        """Save the article (if enabled) and images of an already-rendered page."""
        soup = soup if soup is not None else parse_html(page.html)
        output_dir = destination_for(self.config.output_root, page.url)
        report = PageReport(url=page.url, output_dir=output_dir)

        if self.config.save_articles:
            try:
                report.article_path = save_article(
                    page.final_url,
                    page.html,
                    output_dir,
                    min_text_chars=self.config.min_article_chars,
                )
            except OSError as exc:
                logger.warning("Failed to write article for %s: %s", page.url, exc)

        image_urls = collect_image_urls(soup, page.final_url)
        logger.info("  Found %d images. Checking sizes...", len(image_urls))
        report.images = await self.download_all(downloader, image_urls, output_dir)
        return report

    async def download_all(
        self,
        downloader: ImageDownloader,
        urls: Sequence[str],
        output_dir: Path,
    ) -> List[DownloadResult]:
        """Download ``urls`` off the event loop, in order, optionally a few at a time."""
        limit = self.config.max_concurrent_downloads
        if limit <= 1:
            results: List[DownloadResult] = []
            for url in urls:
                results.append(await asyncio.to_thread(downloader.download, url, output_dir))
            return results

        semaphore = asyncio.Semaphore(limit)

        async def bounded(url: str) -> DownloadResult:
            async with semaphore:
                return await asyncio.to_thread(downloader.download, url, output_dir)

        return list(await asyncio.gather(*(bounded(url) for url in urls)))


async def run_collection(
    url: str,
    config: CollectConfig,
    chooser: Optional[Chooser] = None,
) -> RunSummary:
    return await Collector(config, chooser=chooser).run(url)
