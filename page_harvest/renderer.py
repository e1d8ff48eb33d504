"""Headless browser session that renders pages to their final HTML."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Optional

from playwright.async_api import (
    Browser,
    Error as PlaywrightError,
    Page,
    Playwright,
    async_playwright,
)

from .config import CollectConfig

logger = logging.getLogger("page_harvest")


@dataclass
class RenderedPage:
    """HTML captured after the page's network activity settled."""

    url: str
    final_url: str
    html: str


class RenderSession:
    """One Chromium instance shared by every page rendered during a run.

    Use as an async context manager; the browser is closed on exit and each
    page opened by :meth:`render` is closed as soon as its HTML is captured.
    """

    def __init__(self, config: CollectConfig) -> None:
        self.config = config
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    async def __aenter__(self) -> "RenderSession":
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(headless=True)
        except BaseException:
            await self._playwright.stop()
            self._playwright = None
            raise
        return self

    async def __aexit__(self, *exc_info) -> None:
        try:
            if self._browser is not None:
                await self._browser.close()
        except PlaywrightError as exc:
            logger.warning("Failed to close browser cleanly: %s", exc)
        finally:
            self._browser = None
            if self._playwright is not None:
                await self._playwright.stop()
                self._playwright = None

    @asynccontextmanager
    async def page(self) -> AsyncIterator[Page]:
        if self._browser is None:
            raise RuntimeError("RenderSession is not open")
        page = await self._browser.new_page(
            viewport={
                "width": self.config.viewport_width,
                "height": self.config.viewport_height,
            }
        )
        page.set_default_navigation_timeout(self.config.navigation_timeout * 1000)
        try:
            yield page
        finally:
            await page.close()

    async def render(self, url: str) -> RenderedPage:
        """Navigate to ``url``, wait for the network to go idle and return the DOM."""
        async with self.page() as page:
            logger.info("Loading %s", url)
            await page.goto(url, wait_until="networkidle")
            if self.config.wait_after_load:
                await page.wait_for_timeout(int(self.config.wait_after_load * 1000))
            html = await page.content()
            return RenderedPage(url=url, final_url=page.url, html=html)
