"""Configuration objects and constants for the collector."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

MIN_IMAGE_BYTES = 380 * 1024
MAX_CANDIDATES = 15


class SelectionMode(str, Enum):
    """How discovered candidates are turned into pages to process."""

    AUTO = "auto"
    INTERACTIVE = "interactive"


@dataclass
class CollectConfig:
    """Top-level settings that control rendering, selection and downloads."""

    output_root: Path
    selection_mode: SelectionMode = SelectionMode.AUTO
    max_candidates: int = MAX_CANDIDATES
    min_image_bytes: int = MIN_IMAGE_BYTES
    save_articles: bool = False
    daily: bool = False
    wait_after_load: float = 1.0
    navigation_timeout: float = 30.0
    request_timeout: float = 15.0
    max_concurrent_downloads: int = 1
    min_article_chars: int = 200
    viewport_width: int = 1280
    viewport_height: int = 800
