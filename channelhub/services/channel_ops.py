"""
Helpers for filtering, sorting and summarizing channels and groups.
"""
from typing import Literal, Optional

from channelhub.models.channel import (
    Channel,
    ChannelFilter,
    ChannelGroup,
    ChannelType,
    GroupChannel,
)
from channelhub.services.normalizer import ACESTREAM_SCHEME

SortField = Literal["name", "quality", "category"]
GroupField = Literal["category", "quality", "group_title"]


def filter_channels(channels: list[Channel], criteria: ChannelFilter) -> list[Channel]:
    """Filter channels by name search, tags (any), categories, quality and type."""
    term = criteria.search_term.lower() if criteria.search_term else None
    result = []
    for channel in channels:
        if term and term not in channel.name.lower():
            continue
        if criteria.tags and not any(tag in channel.tags for tag in criteria.tags):
            continue
        if criteria.categories and channel.category not in criteria.categories:
            continue
        if criteria.quality and channel.quality != criteria.quality:
            continue
        if criteria.type and channel.type != criteria.type:
            continue
        result.append(channel)
    return result


def filter_groups(groups: list[ChannelGroup], criteria: ChannelFilter) -> list[ChannelGroup]:
    """Filter groups by display name search and tags (any)."""
    term = criteria.search_term.lower() if criteria.search_term else None
    return [
        group for group in groups
        if (not term or term in group.display_name.lower())
        and (not criteria.tags or any(tag in group.tags for tag in criteria.tags))
    ]


def get_group_by_name(groups: list[ChannelGroup], name: str) -> Optional[ChannelGroup]:
    return next((group for group in groups if group.name == name), None)


def get_channel_by_id(channels: list[Channel], channel_id: str) -> Optional[Channel]:
    return next((channel for channel in channels if channel.id == channel_id), None)


def sort_channels(
    channels: list[Channel],
    sort_by: SortField = "name",
    descending: bool = False,
) -> list[Channel]:
    """Sort channels case-insensitively by name, quality or category."""
    def key(channel: Channel) -> str:
        value = getattr(channel, sort_by) or ""
        return value.lower()

    return sorted(channels, key=key, reverse=descending)


def group_channels_by(channels: list[Channel], field: GroupField) -> dict[str, list[Channel]]:
    """Bucket channels by a property; missing values go under 'Unknown'."""
    result: dict[str, list[Channel]] = {}
    for channel in channels:
        result.setdefault(getattr(channel, field) or "Unknown", []).append(channel)
    return result


def count_channels_by_category(channels: list[Channel]) -> dict[str, int]:
    return {category: len(items) for category, items in group_channels_by(channels, "category").items()}


def extract_all_tags(groups: list[ChannelGroup]) -> list[str]:
    """Sorted unique tags across all groups."""
    return sorted({tag for group in groups for tag in group.tags})


def extract_categories(channels: list[Channel]) -> list[str]:
    """Unique categories in first-seen order."""
    return list(dict.fromkeys(channel.category for channel in channels if channel.category))


def get_channel_url(channel: Channel | GroupChannel) -> str:
    """Playable URL: the direct url, else the acestream link for the content id."""
    if channel.url:
        return channel.url
    return f"{ACESTREAM_SCHEME}{channel.id}"


def _name_hash(value: str) -> int:
    """32-bit rolling hash (hash * 31 + code point) with signed overflow."""
    result = 0
    for char in value:
        result = (ord(char) + ((result << 5) - result)) & 0xFFFFFFFF
    if result >= 0x80000000:
        result -= 0x100000000
    return result


def get_channel_logo(name: str, channel_type: Optional[ChannelType] = None) -> str:
    """Placeholder logo URL built from the channel's initials and a name-derived hue."""
    initials = "".join(word[0] for word in name.split()[:2]).upper()

    hue = abs(_name_hash(name)) % 360
    if channel_type == ChannelType.URL:
        hue = (hue + 180) % 360

    background = f"hsl({hue}, 70%, 40%)"
    return f"https://placehold.co/64x64/{background}/white?text={initials}"
