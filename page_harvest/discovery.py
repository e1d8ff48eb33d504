"""Candidate link discovery and image enumeration on rendered pages."""

from __future__ import annotations

from typing import List, Set
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from .images import select_largest_image
from .models import Candidate

CANDIDATE_KEYWORDS = ("article", "post", "blog")
UNTITLED = "Untitled"


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def discover_candidates(soup: BeautifulSoup) -> List[Candidate]:
    """Collect anchors that look like they lead to articles or galleries.

    An anchor qualifies when it has an ``href`` that mentions one of
    ``CANDIDATE_KEYWORDS`` or when it wraps an image. Results keep document
    order and each ``href`` appears once.
    """
    candidates: List[Candidate] = []
    seen: Set[str] = set()
    for anchor in soup.find_all("a"):
        href = anchor.get("href")
        if not href or href in seen:
            continue
        img = anchor.find("img")
        has_image = bool(img and img.get("src"))
        if not has_image and not any(word in href for word in CANDIDATE_KEYWORDS):
            continue
        title = " ".join(anchor.get_text(" ").split())
        if not title and img:
            title = (img.get("alt") or "").strip()
        seen.add(href)
        candidates.append(Candidate(title=title or UNTITLED, href=href, has_image=has_image))
    return candidates


def collect_image_urls(soup: BeautifulSoup, base_url: str) -> List[str]:
    """Resolve every ``<img>`` to the absolute URL of its largest variant."""
    urls: List[str] = []
    for img in soup.find_all("img"):
        largest = select_largest_image(img.get("src"), img.get("srcset"))
        if not largest or largest.startswith("data:"):
            continue
        urls.append(urljoin(base_url, largest))
    return urls
