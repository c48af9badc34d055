"""
JSON file cache for the channel catalog.
Provides TTL-based invalidation and a stale read for fallback paths.
"""
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from channelhub.config import get_settings
from channelhub.models.channel import ChannelData, ChannelGroup, StoreResult
from channelhub.services.json_store import read_json, write_json_atomic

logger = logging.getLogger(__name__)

CATALOG_INDENT = 4


class CatalogCache:
    """Persist and load the organized catalog as a timestamped JSON document."""

    def __init__(self, path: Optional[str | Path] = None, ttl: Optional[timedelta] = None):
        settings = get_settings()
        self.path = Path(path) if path else settings.catalog_path
        self.ttl = ttl if ttl is not None else settings.cache_ttl

    def is_fresh(self, data: ChannelData, now: Optional[datetime] = None) -> bool:
        """Check whether a document is inside the freshness window."""
        now = now or datetime.now(timezone.utc)
        last_updated = data.last_updated
        if last_updated.tzinfo is None:
            last_updated = last_updated.replace(tzinfo=timezone.utc)
        return now - last_updated <= self.ttl

    def load(self, ignore_freshness: bool = False) -> Optional[ChannelData]:
        """
        Load the cached catalog.

        Returns None if the document is missing, malformed, has no timestamp,
        or is older than the TTL (unless ignore_freshness is set).
        """
        if not self.path.exists():
            logger.info(f"No catalog cache at {self.path}")
            return None

        try:
            data = ChannelData.model_validate(read_json(self.path))
        except (OSError, ValueError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable catalog cache {self.path}: {e}")
            return None

        if not ignore_freshness and not self.is_fresh(data):
            logger.info("Cache expired, needs refresh")
            return None

        return data

    def save(
        self, groups: list[ChannelGroup], last_updated: Optional[datetime] = None
    ) -> StoreResult:
        """Overwrite the cached catalog with the given groups, stamped now."""
        data = ChannelData(last_updated=last_updated or datetime.now(timezone.utc), groups=groups)
        try:
            write_json_atomic(self.path, data.to_json_dict(), indent=CATALOG_INDENT)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Error saving catalog cache to {self.path}: {e}")
            return StoreResult.failure(str(e))

        logger.info(f"Channel data cached successfully ({len(groups)} groups)")
        return StoreResult.ok()


def get_cache() -> CatalogCache:
    """Build a catalog cache from the current settings."""
    return CatalogCache()
