"""
Channel normalizer.
Turns raw (group, name, link) triples into canonical Channel records.
"""
import re
import uuid
from typing import Optional

from channelhub.models.channel import Channel, ChannelType, RawChannelEntry
from channelhub.services.classifier import RuleClassifier

ACESTREAM_SCHEME = "acestream://"
ACESTREAM_LINK_PATTERN = re.compile(r"^acestream://([a-zA-Z0-9]{40})$")

QUALITY_PATTERN = re.compile(r"(HD|SD|720p|1080p|\d+fps|4K|UHD)", re.IGNORECASE)

BULLET_PATTERN = re.compile(r"^\s*•\s*|\s*•\s*$")


def clean_channel_name(name: str) -> str:
    """Strip a leading/trailing bullet glyph and surrounding whitespace."""
    return BULLET_PATTERN.sub("", name).strip()


def extract_quality(name: str) -> Optional[str]:
    """Extract a quality marker (HD, 1080p, 50fps, ...) from a channel name."""
    match = QUALITY_PATTERN.search(name)
    return match.group(0) if match else None


def parse_acestream_id(link: str) -> Optional[str]:
    """Return the 40-character content id of an acestream link, else None."""
    match = ACESTREAM_LINK_PATTERN.match(link)
    return match.group(1) if match else None


def normalize_channel(entry: RawChannelEntry, classifier: RuleClassifier) -> Channel:
    """Build a Channel from an extracted entry."""
    name = clean_channel_name(entry.channel_name)
    category, tags = classifier.classify(name, entry.group_title)

    fields = {
        "name": name,
        "quality": extract_quality(name),
        "category": category,
        "group_title": entry.group_title,
        "tags": tags,
    }

    ace_id = parse_acestream_id(entry.target_url)
    if ace_id:
        return Channel(id=ace_id, type=ChannelType.ACESTREAM, **fields)

    return Channel(
        id=str(uuid.uuid4()),
        url=entry.target_url,
        type=ChannelType.URL,
        **fields,
    )
