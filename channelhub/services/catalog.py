"""
Channel catalog service.
Drives the scrape -> organize -> cache pipeline and serves cached channels.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi.concurrency import run_in_threadpool

from channelhub.exceptions import CatalogUnavailableError, SourceFetchError
from channelhub.models.channel import Channel, ChannelData, StoreResult
from channelhub.services.cache import CatalogCache
from channelhub.services.organizer import flatten_groups, organize_channels
from channelhub.services.scraper import ChannelScraper

logger = logging.getLogger(__name__)


class ChannelCatalogService:
    """Service that keeps the cached channel catalog up to date."""

    def __init__(
        self,
        scraper: Optional[ChannelScraper] = None,
        cache: Optional[CatalogCache] = None,
    ):
        self.scraper = scraper or ChannelScraper()
        self.cache = cache or CatalogCache()

    async def _scrape(self) -> list[Channel]:
        """Scrape the source; upstream and parse failures yield an empty list."""
        try:
            return await self.scraper.scrape_channels()
        except SourceFetchError as e:
            logger.error(f"Error scraping channel data: {e}")
        except ValueError as e:
            logger.error(f"Error parsing channel data: {e}")
        return []

    async def _load(self, ignore_freshness: bool = False) -> Optional[ChannelData]:
        return await run_in_threadpool(self.cache.load, ignore_freshness)

    async def _store(self, channels: list[Channel]) -> StoreResult:
        groups = organize_channels(channels)
        result = await run_in_threadpool(self.cache.save, groups)
        if not result.success:
            logger.warning(f"Channel cache not updated: {result.reason}")
        return result

    async def _stale_channels(self) -> list[Channel]:
        data = await self._load(ignore_freshness=True)
        if data:
            logger.info("Using cached channel data after failed refresh")
            return flatten_groups(data.groups)
        return []

    async def get_channels(self, force_refresh: bool = False) -> list[Channel]:
        """
        Get channels, from the cache when it is fresh.

        On a cache miss (or force_refresh) the source is scraped and the
        result cached. If scraping fails or finds nothing, the last cached
        catalog is used regardless of age, else an empty list.
        """
        if not force_refresh:
            data = await self._load()
            if data:
                logger.info("Using cached channel data")
                return flatten_groups(data.groups)

        logger.info("Scraping fresh channel data")
        channels = await self._scrape()
        if not channels:
            return await self._stale_channels()

        await self._store(channels)
        return channels

    async def refresh_channel_cache(self) -> bool:
        """Force a refresh. True iff channels were scraped and cached."""
        channels = await self._scrape()
        if not channels:
            logger.warning("Refresh scraped no channels; keeping existing cache")
            return False
        return (await self._store(channels)).success

    async def get_catalog(self) -> ChannelData:
        """
        Get the grouped catalog document.

        Falls back to a rebuild, then to a stale cache document. Raises
        CatalogUnavailableError when none of those produce a catalog.
        """
        data = await self._load()
        if data:
            return data

        channels = await self._scrape()
        if channels:
            now = datetime.now(timezone.utc)
            groups = organize_channels(channels)
            result = await run_in_threadpool(self.cache.save, groups, now)
            if not result.success:
                logger.warning(f"Channel cache not updated: {result.reason}")
            return ChannelData(last_updated=now, groups=groups)

        data = await self._load(ignore_freshness=True)
        if data:
            logger.info("Serving stale channel data")
            return data

        raise CatalogUnavailableError("No channel data available")

    async def get_channel(self, channel_id: str) -> Optional[Channel]:
        """Look up a single channel by id."""
        for channel in await self.get_channels():
            if channel.id == channel_id:
                return channel
        return None


def get_catalog_service() -> ChannelCatalogService:
    """Build a catalog service from the current settings."""
    return ChannelCatalogService()
