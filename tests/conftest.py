"""
Pytest configuration and fixtures for Channel Hub tests.
"""
import httpx
import pytest

from channelhub.services.cache import CatalogCache
from channelhub.services.catalog import ChannelCatalogService
from channelhub.services.favorites import FavoritesStore
from channelhub.services.scraper import ChannelScraper

ACE_DAZN = "0123456789abcdef0123456789abcdef01234567"
ACE_MOVISTAR = "b" * 40
ACE_CINE = "C" * 20 + "9" * 20

SOURCE_URL = "https://example.com/acestream-ids/"


@pytest.fixture
def sample_html():
    """Source page with two toggle sections and a few malformed entries."""
    return f"""<html><body>
<div class="et_pb_toggle">
<h5 class="et_pb_toggle_title">Fútbol - LaLiga</h5>
<div class="et_pb_toggle_content clearfix">
<p>• DAZN LaLiga 1080p<br />Enlace: <a href="acestream://{ACE_DAZN}">Ver canal</a></p>
<p>• Movistar+ Liga Campeones HD<br>Link: <a href="acestream://{ACE_MOVISTAR}" target="_blank">Ver</a></p>
<p>• Canal roto<br>Enlace: <a href="https://example.com/not-accepted">Ver</a></p>
<p>• Gol Play<br>Enlace: <a href="https://bit.ly/golplay">Ver</a></p>
</div>
</div>
<div class="et_pb_toggle">
<h5 class="et_pb_toggle_title">Películas &amp; Series</h5>
<div class="et_pb_toggle_content clearfix">
<p>&bull; Cine Clásico SD<br>URL: <a href="acestream://{ACE_CINE}">Ver</a></p>
<p>• Short id<br>Enlace: <a href="acestream://abc123">Ver</a></p>
</div>
</div>
</body></html>
"""


@pytest.fixture
def empty_html():
    """Source page without any channel entries."""
    return "<html><body><p>Nothing here</p></body></html>"


def make_scraper(handler) -> ChannelScraper:
    """Scraper whose HTTP requests are answered by handler."""
    return ChannelScraper(
        source_url=SOURCE_URL,
        timeout=5.0,
        transport=httpx.MockTransport(handler),
    )


@pytest.fixture
def ok_scraper(sample_html):
    return make_scraper(lambda request: httpx.Response(200, text=sample_html))


@pytest.fixture
def empty_scraper(empty_html):
    return make_scraper(lambda request: httpx.Response(200, text=empty_html))


@pytest.fixture
def failing_scraper():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)
    return make_scraper(handler)


@pytest.fixture
def catalog_cache(tmp_path):
    return CatalogCache(tmp_path / "channels.json")


@pytest.fixture
def favorites_store(tmp_path):
    return FavoritesStore(tmp_path / "favorites")


@pytest.fixture
def catalog_service(ok_scraper, catalog_cache):
    return ChannelCatalogService(scraper=ok_scraper, cache=catalog_cache)
