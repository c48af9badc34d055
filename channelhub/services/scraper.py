"""
Channel scraper service.
Fetches the source page and extracts acestream / short-link channel entries.
"""
import html
import logging
import re
from typing import Iterator, Optional

import httpx

from channelhub.config import get_settings
from channelhub.exceptions import SourceFetchError
from channelhub.models.channel import Channel, RawChannelEntry
from channelhub.services.classifier import RuleClassifier
from channelhub.services.normalizer import normalize_channel

logger = logging.getLogger(__name__)

# Toggle section: <h5> title followed by its content block
SECTION_PATTERN = re.compile(
    r'<h5\s+class="et_pb_toggle_title">([^<]+)</h5>[\s\S]*?'
    r'<div\s+class="et_pb_toggle_content\s+clearfix">([\s\S]*?)</div>'
)

LINK_PATTERN = (
    r"acestream://[a-zA-Z0-9]{40}"
    r"|https?://tinyurl\.com/[a-zA-Z0-9]+"
    r"|https?://bit\.ly/[a-zA-Z0-9]+"
    r"|https?://(?:goo\.gl|t\.co|is\.gd|buff\.ly)/[a-zA-Z0-9]+"
)

# Entry: "<p>• Channel Name<br>Enlace: <a href="...">...</a></p>"
ENTRY_PATTERN = re.compile(
    r"<p>(?:•|&bull;|&#8226;)?\s*([^<]+)<br[^>]*>(?:Enlace|Link|URL)?:?\s*"
    r'<a[^>]*href="(' + LINK_PATTERN + r')"[^>]*>.*?</a></p>'
)


def extract_entries(page: str) -> Iterator[RawChannelEntry]:
    """
    Lazily extract (group title, channel name, link) triples from the page.

    Sections and entries are yielded in document order. Entries that do not
    have the expected shape are skipped.
    """
    for section in SECTION_PATTERN.finditer(page):
        group_title = html.unescape(section.group(1)).strip()
        for entry in ENTRY_PATTERN.finditer(section.group(2)):
            channel_name = html.unescape(entry.group(1)).strip()
            if not channel_name:
                continue
            yield RawChannelEntry(group_title, channel_name, entry.group(2))


class ChannelScraper:
    """Fetch the channel listing page and turn it into Channel records."""

    def __init__(
        self,
        source_url: Optional[str] = None,
        timeout: Optional[float] = None,
        classifier: Optional[RuleClassifier] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.source_url = source_url or settings.source_url
        self.timeout = timeout or settings.fetch_timeout_seconds
        self.user_agent = settings.user_agent
        self.classifier = classifier or RuleClassifier()
        self._transport = transport

    async def fetch_html(self) -> str:
        """Fetch the source page. Raises SourceFetchError on any failure."""
        logger.info(f"Fetching channel listing from {self.source_url}")
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                headers={"User-Agent": self.user_agent},
                transport=self._transport,
            ) as client:
                response = await client.get(self.source_url)
        except httpx.TimeoutException as e:
            raise SourceFetchError(f"Timed out fetching {self.source_url}: {e}", self.source_url) from e
        except httpx.HTTPError as e:
            raise SourceFetchError(f"Failed to fetch {self.source_url}: {e}", self.source_url) from e

        if not response.is_success:
            raise SourceFetchError(
                f"Failed to fetch: {response.status_code} {response.reason_phrase}",
                self.source_url,
                status_code=response.status_code,
            )
        return response.text

    def parse_channels(self, page: str) -> list[Channel]:
        """Extract and normalize every channel in an already fetched page."""
        return [normalize_channel(entry, self.classifier) for entry in extract_entries(page)]

    async def scrape_channels(self) -> list[Channel]:
        """Fetch the page and return its channels. Raises SourceFetchError."""
        page = await self.fetch_html()
        channels = self.parse_channels(page)
        logger.info(f"Scraped {len(channels)} channels successfully")
        return channels

    async def scrape_channels_safe(self) -> list[Channel]:
        """Like scrape_channels, but logs failures and returns an empty list."""
        try:
            return await self.scrape_channels()
        except SourceFetchError as e:
            logger.error(f"Error scraping channel data: {e}")
            return []
