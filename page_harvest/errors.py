"""Exception types raised by the collection pipeline."""

from __future__ import annotations


class HarvestError(Exception):
    """Base class for collection errors."""


class DiscoveryError(HarvestError):
    """The seed page could not be rendered; the run cannot continue."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to render seed page {url}: {reason}")
        self.url = url
        self.reason = reason


class SubPageError(HarvestError):
    """A selected page could not be rendered and was skipped."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to render {url}: {reason}")
        self.url = url
        self.reason = reason


class FetchError(HarvestError):
    """An image request failed at the network or HTTP level."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason
