"""Data models used throughout the collection pipeline."""

from __future__ import annotations

import html
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from .utils import sanitize_title

ARTICLE_STYLESHEET = (
    "body { font-family: sans-serif; max-width: 800px; margin: 0 auto; "
    "padding: 20px; line-height: 1.6; } img { max-width: 100%; height: auto; }"
)


@dataclass
class Candidate:
    """Link on a rendered page that may lead to an article or gallery."""

    title: str
    href: str
    has_image: bool


@dataclass
class SrcsetEntry:
    """One resolution variant declared in an ``srcset`` attribute."""

    url: str
    width: int = 0


class DownloadStatus(str, Enum):
    SAVED = "saved"
    DUPLICATE = "duplicate"
    TOO_SMALL = "too_small"
    FAILED = "failed"


@dataclass
class DownloadResult:
    """Outcome of fetching a single image URL."""

    url: str
    status: DownloadStatus
    path: Optional[Path] = None
    size: int = 0
    error: Optional[str] = None

    @property
    def saved(self) -> bool:
        return self.status is DownloadStatus.SAVED

    @property
    def skipped(self) -> bool:
        return self.status in (DownloadStatus.DUPLICATE, DownloadStatus.TOO_SMALL)

    @property
    def failed(self) -> bool:
        return self.status is DownloadStatus.FAILED


@dataclass
class ArticleDocument:
    """Reader-view rendition of a page, ready to be written as HTML."""

    title: str
    body_html: str
    byline: Optional[str] = None
    source_url: Optional[str] = None

    @property
    def filename(self) -> str:
        return f"{sanitize_title(self.title, fallback='article')}.html"

    def to_html(self) -> str:
        """Wrap the extracted body in a minimal standalone document."""
        title = html.escape(self.title)
        byline = html.escape(self.byline or "Unknown")
        return (
            "<!DOCTYPE html>\n"
            "<html>\n"
            "<head>\n"
            '<meta charset="utf-8">\n'
            f"<title>{title}</title>\n"
            f"<style>{ARTICLE_STYLESHEET}</style>\n"
            "</head>\n"
            "<body>\n"
            f"<h1>{title}</h1>\n"
            f"<p><em>By {byline}</em></p>\n"
            "<hr>\n"
            f"{self.body_html}\n"
            "</body>\n"
            "</html>\n"
        )


@dataclass
class PageReport:
    """Everything that happened while processing one page."""

    url: str
    output_dir: Optional[Path] = None
    images: List[DownloadResult] = field(default_factory=list)
    article_path: Optional[Path] = None
    error: Optional[str] = None


@dataclass
class RunSummary:
    """Aggregate outcome of a collection run."""

    seed_url: str
    candidates: List[Candidate] = field(default_factory=list)
    selected: List[str] = field(default_factory=list)
    pages: List[PageReport] = field(default_factory=list)

    def _count(self, status: DownloadStatus) -> int:
        return sum(
            1 for page in self.pages for result in page.images if result.status is status
        )

    @property
    def saved(self) -> int:
        return self._count(DownloadStatus.SAVED)

    @property
    def duplicates(self) -> int:
        return self._count(DownloadStatus.DUPLICATE)

    @property
    def too_small(self) -> int:
        return self._count(DownloadStatus.TOO_SMALL)

    @property
    def failed(self) -> int:
        return self._count(DownloadStatus.FAILED)

    @property
    def failed_pages(self) -> int:
        return sum(1 for page in self.pages if page.error)
