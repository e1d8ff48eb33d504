"""Destination folder layout: ``{root}/{domain}/{YYYY-MM-DD}``."""

from __future__ import annotations

import datetime as dt
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

UNKNOWN_HOST = "unknown-host"


def destination_for(
    root: Path,
    url: str,
    now: Optional[dt.datetime] = None,
) -> Path:
    """Return (and create) the folder that content from ``url`` is filed under."""
    now = now or dt.datetime.now()
    domain = urlparse(url).hostname or UNKNOWN_HOST
    output_dir = Path(root) / domain / now.date().isoformat()
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir
