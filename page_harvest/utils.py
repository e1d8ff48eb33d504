"""Utility helpers for string normalization and path handling."""

from __future__ import annotations

import re

TITLE_PATTERN = re.compile(r"[^A-Za-z0-9]+")
MAX_TITLE_CHARS = 50


def sanitize_title(value: str, fallback: str = "page") -> str:
    """Strip everything but ASCII letters and digits and cap the length."""
    cleaned = TITLE_PATTERN.sub("", value or "")[:MAX_TITLE_CHARS]
    return cleaned or fallback
