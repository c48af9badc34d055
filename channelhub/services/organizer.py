"""
Group organizer.
Partitions scraped channels into named groups and derives group-level tags.
"""
import math
import re
import secrets
from collections import Counter

from channelhub.models.channel import (
    Channel,
    ChannelGroup,
    ChannelType,
    DEFAULT_CATEGORY,
    DEFAULT_GROUP_TITLE,
    GroupChannel,
)

# Percentage of a group's channels a tag must appear on to become a group tag
GROUP_TAG_PERCENT = 30

SLUG_SEPARATOR_PATTERN = re.compile(r"[^a-z0-9]+")


def slugify(display_name: str) -> str:
    """'Fútbol - Liga' -> 'f-tbol-liga'"""
    return SLUG_SEPARATOR_PATTERN.sub("-", display_name.lower()).strip("-")


def generate_random_id() -> str:
    """Fallback id for a group without channels."""
    return secrets.token_hex(6)


def _most_common(items: list[str]) -> str:
    # Counter.most_common keeps first-encountered order among equal counts
    return Counter(items).most_common(1)[0][0]


def determine_group_tags(channels: list[Channel]) -> list[str]:
    """
    Tags shared by at least 30% of the group's channels.

    A channel's category always counts as one of its tags. When no tag
    reaches the threshold the most common category is used instead.
    """
    if not channels:
        return []

    counts: Counter = Counter()
    for channel in channels:
        for tag in channel.tags:
            counts[tag] += 1
        if channel.category:
            counts[channel.category] += 1

    min_occurrences = max(1, math.ceil(len(channels) * GROUP_TAG_PERCENT / 100))
    tags = [tag for tag, count in counts.items() if count >= min_occurrences]

    if not tags:
        tags.append(_most_common([channel.category or DEFAULT_CATEGORY for channel in channels]))

    return tags


def _unique(value: str, used: set[str]) -> str:
    """Append -2, -3, ... until value is not in used."""
    candidate = value
    suffix = 2
    while candidate in used:
        candidate = f"{value}-{suffix}"
        suffix += 1
    used.add(candidate)
    return candidate


def to_group_channel(channel: Channel) -> GroupChannel:
    return GroupChannel(
        name=channel.name,
        id=channel.id,
        url=channel.url,
        quality=channel.quality,
        category=channel.category or DEFAULT_CATEGORY,
        group_title=channel.group_title or DEFAULT_GROUP_TITLE,
        tags=list(channel.tags),
    )


def organize_channels(channels: list[Channel]) -> list[ChannelGroup]:
    """
    Group channels by group title.

    Groups keep first-seen order and channels keep their order within each
    group. Group ids and slugs that collide with an earlier group in the same
    build get a numeric suffix.
    """
    by_title: dict[str, list[Channel]] = {}
    for channel in channels:
        by_title.setdefault(channel.group_title or DEFAULT_GROUP_TITLE, []).append(channel)

    used_ids: set[str] = set()
    used_names: set[str] = set()
    groups = []

    for title, members in by_title.items():
        base_id = members[0].id if members else generate_random_id()
        groups.append(ChannelGroup(
            id=_unique(base_id, used_ids),
            name=_unique(slugify(title) or "group", used_names),
            display_name=title,
            tags=determine_group_tags(members),
            channels=[to_group_channel(channel) for channel in members],
        ))

    return groups


def flatten_groups(groups: list[ChannelGroup]) -> list[Channel]:
    """Convert cached groups back into a flat channel list."""
    channels = []
    for group in groups:
        for item in group.channels:
            channels.append(Channel(
                name=item.name,
                id=item.id,
                url=item.url,
                quality=item.quality,
                category=item.category,
                group_title=item.group_title,
                tags=list(item.tags),
                type=ChannelType.URL if item.url else ChannelType.ACESTREAM,
            ))
    return channels
