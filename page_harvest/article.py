"""Reader-view article extraction with a raw-HTML fallback."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from bs4 import BeautifulSoup
from readability import Document
from readability.readability import Unparseable

from .models import ArticleDocument

logger = logging.getLogger("page_harvest")

FULL_PAGE_FILENAME = "full_page.html"
MIN_ARTICLE_CHARS = 200
_MISSING_TITLES = {"", "[no-title]"}


def _page_title(soup: BeautifulSoup) -> Optional[str]:
    if soup.title and soup.title.string:
        return soup.title.string.strip()
    return None


def _page_byline(soup: BeautifulSoup) -> Optional[str]:
    author_tag = soup.find("meta", attrs={"name": "author"})
    if author_tag and author_tag.get("content"):
        return author_tag["content"].strip()
    return None


def extract_article(
    page_url: str,
    raw_html: str,
    min_text_chars: int = MIN_ARTICLE_CHARS,
) -> Optional[ArticleDocument]:
    """Run readability over ``raw_html``.

    Returns ``None`` when readability cannot identify main content, either
    because it gives up or because what it returns carries too little text.
    """
    if not raw_html or not raw_html.strip():
        return None

    document = Document(raw_html, url=page_url)
    try:
        body_html = document.summary(html_partial=True)
    except Unparseable as exc:
        logger.debug("Readability could not parse %s: %s", page_url, exc)
        return None

    plain_text = BeautifulSoup(body_html, "html.parser").get_text(" ", strip=True)
    if len(plain_text) < min_text_chars:
        logger.debug(
            "Readability found only %d characters of text on %s",
            len(plain_text),
            page_url,
        )
        return None

    soup_full = BeautifulSoup(raw_html, "html.parser")
    title = document.short_title().strip()
    if title in _MISSING_TITLES:
        title = _page_title(soup_full) or "Untitled"

    return ArticleDocument(
        title=title,
        body_html=body_html,
        byline=_page_byline(soup_full),
        source_url=page_url,
    )


def save_article(
    page_url: str,
    raw_html: str,
    destination: Path,
    min_text_chars: int = MIN_ARTICLE_CHARS,
) -> Path:
    """Persist the reader view of a page, or the untouched markup if there is none."""
    article = extract_article(page_url, raw_html, min_text_chars=min_text_chars)
    if article is None:
        logger.warning(
            "  [Warn] Readability could not parse article content. Saving raw HTML."
        )
        output_path = destination / FULL_PAGE_FILENAME
        output_path.write_bytes(raw_html.encode("utf-8"))
        return output_path

    output_path = destination / article.filename
    output_path.write_text(article.to_html(), encoding="utf-8")
    logger.info("  [Saved Article] %s", article.filename)
    return output_path
