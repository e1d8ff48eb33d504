"""Image resolution selection, fingerprinting and downloading."""

from __future__ import annotations

import errno
import hashlib
import logging
import os
import re
import uuid
from pathlib import Path, PurePosixPath
from typing import List, Optional
from urllib.parse import urlparse

import requests

from .config import MIN_IMAGE_BYTES
from .errors import FetchError
from .models import DownloadResult, DownloadStatus, SrcsetEntry

logger = logging.getLogger("page_harvest")

DEFAULT_EXTENSION = ".jpg"
NO_HARDLINK_ERRNOS = {errno.EPERM, errno.ENOTSUP, errno.EOPNOTSUPP, errno.ENOSYS, errno.EXDEV}
WIDTH_PATTERN = re.compile(r"\d+")
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0 Safari/537.36"
)


def parse_srcset(srcset: str) -> List[SrcsetEntry]:
    """Split an ``srcset`` attribute into URL/width pairs, keeping their order."""
    entries: List[SrcsetEntry] = []
    for segment in srcset.split(","):
        parts = segment.split()
        if not parts:
            continue
        width = 0
        if len(parts) > 1 and parts[1].lower().endswith("w"):
            match = WIDTH_PATTERN.match(parts[1])
            width = int(match.group(0)) if match else 0
        entries.append(SrcsetEntry(url=parts[0], width=width))
    return entries


def select_largest_image(src: Optional[str], srcset: Optional[str]) -> Optional[str]:
    """Return the highest-resolution URL an ``<img>`` declares.

    Without an ``srcset`` the ``src`` value is returned as-is, which may be
    ``None``. Ties keep their left-to-right order.
    """
    if not srcset or not srcset.strip():
        return src
    entries = parse_srcset(srcset)
    if not entries:
        return src
    ranked = sorted(entries, key=lambda entry: entry.width, reverse=True)
    return ranked[0].url


def fingerprint(data: bytes) -> str:
    """SHA-256 hex digest of the raw payload."""
    return hashlib.sha256(data).hexdigest()


def extension_for(url: str) -> str:
    suffix = PurePosixPath(urlparse(url).path).suffix
    return suffix or DEFAULT_EXTENSION


def image_filename(url: str, data: bytes) -> str:
    """Content-addressed filename: ``{sha256}{ext}``."""
    return f"{fingerprint(data)}{extension_for(url)}"


def write_exclusive(destination: Path, data: bytes) -> bool:
    """Write ``data`` to ``destination`` unless it already exists.

    The bytes land in a temporary file next to the target first and are then
    hard-linked into place, so the final name never holds a partial payload and
    only one writer can win. On filesystems without hard links the target is
    opened with exclusive create instead. Returns ``False`` if the target
    already existed.
    """
    tmp_path = destination.with_name(f".partial-{uuid.uuid4().hex}")
    flags = os.O_WRONLY | os.O_CREAT | os.O_EXCL | getattr(os, "O_BINARY", 0)
    fd = os.open(tmp_path, flags, 0o666)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
        try:
            os.link(tmp_path, destination)
        except FileExistsError:
            return False
        except OSError as exc:
            if exc.errno not in NO_HARDLINK_ERRNOS:
                raise
            logger.debug("Hard links unsupported in %s: %s", destination.parent, exc)
            return _write_without_link(destination, data)
    finally:
        tmp_path.unlink(missing_ok=True)
    return True


def _write_without_link(destination: Path, data: bytes) -> bool:
    try:
        handle = open(destination, "xb")
    except FileExistsError:
        return False
    try:
        with handle:
            handle.write(data)
    except OSError:
        destination.unlink(missing_ok=True)
        raise
    return True


class ImageDownloader:
    """Fetch images and keep the ones that are new and large enough."""

    def __init__(
        self,
        min_bytes: int = MIN_IMAGE_BYTES,
        timeout: float = 15.0,
        session: Optional[requests.Session] = None,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self.min_bytes = min_bytes
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", user_agent)

    def __enter__(self) -> "ImageDownloader":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    def fetch(self, url: str) -> bytes:
        try:
            resp = self.session.get(url, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise FetchError(url, str(exc)) from exc
        return resp.content

    def download(self, url: str, destination: Path) -> DownloadResult:
        """Fetch ``url`` and file it under ``destination`` by content hash."""
        try:
            data = self.fetch(url)
        except FetchError as exc:
            logger.error("  [Error] %s", exc)
            return DownloadResult(url, DownloadStatus.FAILED, error=exc.reason)

        filename = image_filename(url, data)
        target = destination / filename
        size_kb = len(data) / 1024

        if target.exists():
            logger.info("  [Skip] Duplicate found: %s", filename)
            return DownloadResult(url, DownloadStatus.DUPLICATE, path=target, size=len(data))

        if len(data) < self.min_bytes:
            logger.info(
                "  [Skip] Too small (%.1f KB): %s",
                size_kb,
                PurePosixPath(urlparse(url).path).name or url,
            )
            return DownloadResult(url, DownloadStatus.TOO_SMALL, size=len(data))

        try:
            written = write_exclusive(target, data)
        except OSError as exc:
            logger.warning("Failed to write image %s: %s", target, exc)
            return DownloadResult(url, DownloadStatus.FAILED, size=len(data), error=str(exc))

        if not written:
            logger.info("  [Skip] Duplicate found: %s", filename)
            return DownloadResult(url, DownloadStatus.DUPLICATE, path=target, size=len(data))

        logger.info("  [Saved] %s (%.1f KB)", filename, size_kb)
        return DownloadResult(url, DownloadStatus.SAVED, path=target, size=len(data))
