"""
Exceptions raised inside the scrape pipeline.

Upstream failures raise; persistence failures are reported as StoreResult
values instead (see channelhub.models.channel).
"""
from typing import Optional


class ChannelHubError(Exception):
    """Base exception for all Channel Hub errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class SourceFetchError(ChannelHubError):
    """The source page could not be fetched (network error, timeout, non-2xx)."""

    def __init__(self, message: str, url: str, status_code: Optional[int] = None):
        super().__init__(message, {"url": url, "status_code": status_code})
        self.url = url
        self.status_code = status_code


class CatalogUnavailableError(ChannelHubError):
    """No catalog could be served: no cache document and nothing scraped."""
