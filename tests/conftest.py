from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Optional
from unittest.mock import MagicMock

import pytest
import requests
from playwright.async_api import Error as PlaywrightError

from page_harvest.models import DownloadResult, DownloadStatus
from page_harvest.renderer import RenderedPage


class FakeRenderSession:
    """Stands in for the browser: serves canned HTML per URL."""

    def __init__(self, pages: Dict[str, str], failing: Iterable[str] = ()) -> None:
        self.pages = pages
        self.failing = set(failing)
        self.rendered: List[str] = []
        self.entered = False
        self.closed = False

    def __call__(self, config) -> "FakeRenderSession":
        return self

    async def __aenter__(self) -> "FakeRenderSession":
        self.entered = True
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.closed = True

    async def render(self, url: str) -> RenderedPage:
        self.rendered.append(url)
        if url in self.failing:
            raise PlaywrightError(f"net::ERR_CONNECTION_REFUSED at {url}")
        return RenderedPage(url=url, final_url=url, html=self.pages.get(url, "<html></html>"))


class RecordingDownloader:
    """Downloader double that records calls and reports every image as saved."""

    def __init__(self) -> None:
        self.calls: List[tuple] = []
        self.closed = False

    def download(self, url: str, destination: Path) -> DownloadResult:
        self.calls.append((url, destination))
        return DownloadResult(url, DownloadStatus.SAVED, path=destination / "x.jpg")

    def close(self) -> None:
        self.closed = True


def make_http_session(
    payloads: Dict[str, bytes],
    errors: Optional[Dict[str, Exception]] = None,
) -> MagicMock:
    """Mock ``requests.Session`` returning ``payloads`` keyed by URL."""
    errors = errors or {}

    def fake_get(url, timeout=None):
        if url in errors:
            raise errors[url]
        resp = MagicMock()
        if url not in payloads:
            resp.raise_for_status.side_effect = requests.HTTPError(f"404 Client Error for url: {url}")
            resp.content = b""
        else:
            resp.raise_for_status.return_value = None
            resp.content = payloads[url]
        return resp

    session = MagicMock(spec=requests.Session)
    session.headers = {}
    session.get.side_effect = fake_get
    return session


@pytest.fixture
def big_payload() -> bytes:
    return b"\xff\xd8\xff" + b"a" * (400 * 1024)
