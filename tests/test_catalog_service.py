"""
Tests for the scrape -> organize -> cache pipeline.
"""
import threading
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from channelhub.exceptions import CatalogUnavailableError
from channelhub.models.channel import ChannelType
from channelhub.services.cache import CatalogCache
from channelhub.services.catalog import ChannelCatalogService

from conftest import ACE_DAZN, make_scraper


def seed_cache(service: ChannelCatalogService, age: timedelta):
    """Build the cache from the sample page and backdate it."""
    data = service.cache.load(ignore_freshness=True)
    stamp = datetime.now(timezone.utc) - age
    service.cache.save(data.groups, last_updated=stamp)


class TestGetChannels:

    @pytest.mark.asyncio
    async def test_cache_miss_scrapes_and_saves(self, catalog_service):
        channels = await catalog_service.get_channels()

        assert len(channels) == 4
        data = catalog_service.cache.load()
        assert data is not None
        assert [g.display_name for g in data.groups] == ["Fútbol - LaLiga", "Películas & Series"]

    @pytest.mark.asyncio
    async def test_fresh_cache_is_used(self, catalog_service, failing_scraper):
        await catalog_service.get_channels()

        cached_only = ChannelCatalogService(scraper=failing_scraper, cache=catalog_service.cache)
        channels = await cached_only.get_channels()

        assert [c.name for c in channels][0] == "DAZN LaLiga 1080p"
        assert channels[0].type == ChannelType.ACESTREAM
        assert channels[0].id == ACE_DAZN
        assert channels[2].type == ChannelType.URL

    @pytest.mark.asyncio
    async def test_force_refresh_bypasses_cache(self, catalog_cache, ok_scraper):
        await ChannelCatalogService(scraper=ok_scraper, cache=catalog_cache).get_channels()
        stamp_before = catalog_cache.load().last_updated

        service = ChannelCatalogService(scraper=ok_scraper, cache=catalog_cache)
        channels = await service.get_channels(force_refresh=True)

        assert len(channels) == 4
        assert catalog_cache.load().last_updated >= stamp_before

    @pytest.mark.asyncio
    async def test_fetch_failure_falls_back_to_stale_cache(self, catalog_service, failing_scraper):
        await catalog_service.get_channels()
        seed_cache(catalog_service, timedelta(hours=30))

        service = ChannelCatalogService(scraper=failing_scraper, cache=catalog_service.cache)
        channels = await service.get_channels()

        assert len(channels) == 4

    @pytest.mark.asyncio
    async def test_empty_scrape_falls_back_to_stale_cache(self, catalog_service, empty_scraper):
        await catalog_service.get_channels()
        seed_cache(catalog_service, timedelta(hours=30))

        service = ChannelCatalogService(scraper=empty_scraper, cache=catalog_service.cache)
        assert len(await service.get_channels()) == 4

    @pytest.mark.asyncio
    async def test_failure_without_cache_returns_empty(self, catalog_cache, failing_scraper):
        service = ChannelCatalogService(scraper=failing_scraper, cache=catalog_cache)
        assert await service.get_channels() == []

    @pytest.mark.asyncio
    async def test_save_failure_still_returns_channels(self, tmp_path, ok_scraper):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        service = ChannelCatalogService(scraper=ok_scraper, cache=CatalogCache(blocker / "c.json"))

        assert len(await service.get_channels()) == 4


class TestRefreshChannelCache:

    @pytest.mark.asyncio
    async def test_success(self, catalog_service):
        assert await catalog_service.refresh_channel_cache() is True
        assert catalog_service.cache.load() is not None

    @pytest.mark.asyncio
    async def test_zero_channels_leaves_cache_untouched(self, catalog_service, empty_scraper):
        await catalog_service.refresh_channel_cache()
        before = catalog_service.cache.path.read_text()

        service = ChannelCatalogService(scraper=empty_scraper, cache=catalog_service.cache)

        assert await service.refresh_channel_cache() is False
        assert catalog_service.cache.path.read_text() == before

    @pytest.mark.asyncio
    async def test_fetch_failure(self, catalog_cache, failing_scraper):
        service = ChannelCatalogService(scraper=failing_scraper, cache=catalog_cache)
        assert await service.refresh_channel_cache() is False
        assert not catalog_cache.path.exists()

    @pytest.mark.asyncio
    async def test_save_failure(self, tmp_path, ok_scraper):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        service = ChannelCatalogService(scraper=ok_scraper, cache=CatalogCache(blocker / "c.json"))

        assert await service.refresh_channel_cache() is False


class TestGetCatalog:

    @pytest.mark.asyncio
    async def test_builds_catalog_on_miss(self, catalog_service):
        data = await catalog_service.get_catalog()

        assert len(data.groups) == 2
        assert data.groups[0].id == ACE_DAZN
        assert catalog_service.cache.load().last_updated == data.last_updated

    @pytest.mark.asyncio
    async def test_serves_stale_when_upstream_down(self, catalog_service, failing_scraper):
        await catalog_service.get_catalog()
        seed_cache(catalog_service, timedelta(days=3))

        service = ChannelCatalogService(scraper=failing_scraper, cache=catalog_service.cache)
        data = await service.get_catalog()

        assert len(data.groups) == 2

    @pytest.mark.asyncio
    async def test_unavailable(self, catalog_cache, failing_scraper):
        service = ChannelCatalogService(scraper=failing_scraper, cache=catalog_cache)
        with pytest.raises(CatalogUnavailableError):
            await service.get_catalog()

    @pytest.mark.asyncio
    async def test_get_channel(self, catalog_service):
        channel = await catalog_service.get_channel(ACE_DAZN)
        assert channel is not None
        assert channel.name == "DAZN LaLiga 1080p"
        assert await catalog_service.get_channel("missing") is None

    @pytest.mark.asyncio
    async def test_non_success_status_counts_as_failure(self, catalog_cache):
        scraper = make_scraper(lambda request: httpx.Response(500))
        service = ChannelCatalogService(scraper=scraper, cache=catalog_cache)
        assert await service.refresh_channel_cache() is False


class RecordingCache(CatalogCache):
    """Catalog cache that records which threads touch the file."""

    def __init__(self, path):
        super().__init__(path)
        self.threads = []

    def load(self, ignore_freshness=False):
        self.threads.append(threading.get_ident())
        return super().load(ignore_freshness)

    def save(self, groups, last_updated=None):
        self.threads.append(threading.get_ident())
        return super().save(groups, last_updated)


class TestCacheIO:

    @pytest.mark.asyncio
    async def test_file_io_runs_off_the_event_loop(self, tmp_path, ok_scraper):
        cache = RecordingCache(tmp_path / "channels.json")
        service = ChannelCatalogService(scraper=ok_scraper, cache=cache)

        await service.get_catalog()
        await service.get_channels()
        assert await service.refresh_channel_cache() is True

        assert cache.threads
        assert threading.get_ident() not in cache.threads
