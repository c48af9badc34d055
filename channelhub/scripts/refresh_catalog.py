"""
Catalog refresh script.
Scrapes the source page (or parses a saved copy) and rewrites the catalog cache.
"""
import argparse
import asyncio
from pathlib import Path

from channelhub.services.cache import get_cache
from channelhub.services.catalog import ChannelCatalogService
from channelhub.services.organizer import organize_channels
from channelhub.services.scraper import ChannelScraper


def print_groups(groups):
    for group in groups:
        print(f"  {group.display_name} [{group.name}] - {len(group.channels)} channels, tags: {', '.join(group.tags)}")


async def refresh_from_source(dry_run: bool) -> int:
    scraper = ChannelScraper()
    print(f"📡 Scraping {scraper.source_url}...")

    if dry_run:
        channels = await scraper.scrape_channels_safe()
        groups = organize_channels(channels)
        print(f"Found {len(channels)} channels in {len(groups)} groups (not saved):")
        print_groups(groups)
        return 0 if channels else 1

    service = ChannelCatalogService(scraper=scraper)
    if not await service.refresh_channel_cache():
        print("❌ Refresh failed, existing cache left untouched")
        return 1

    print(f"✅ Cached catalog to {service.cache.path}")
    data = service.cache.load(ignore_freshness=True)
    if data:
        print_groups(data.groups)
    return 0


def refresh_from_file(html_file: Path, dry_run: bool) -> int:
    channels = ChannelScraper().parse_channels(html_file.read_text(encoding="utf-8"))
    if not channels:
        print(f"❌ No channels found in {html_file}")
        return 1

    groups = organize_channels(channels)
    print(f"Found {len(channels)} channels in {len(groups)} groups")
    print_groups(groups)

    if not dry_run:
        cache = get_cache()
        result = cache.save(groups)
        if not result.success:
            print(f"❌ Failed to save cache: {result.reason}")
            return 1
        print(f"✅ Saved to {cache.path}")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Rebuild the channel catalog cache")
    parser.add_argument("--from-file", type=Path, help="Parse a saved copy of the source page instead of fetching it")
    parser.add_argument("--dry-run", action="store_true", help="Print the groups without writing the cache")
    args = parser.parse_args()

    if args.from_file:
        return refresh_from_file(args.from_file, args.dry_run)
    return asyncio.run(refresh_from_source(args.dry_run))


if __name__ == "__main__":
    raise SystemExit(main())
