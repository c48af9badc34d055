"""
Channel, group and catalog data models.
Serialized with the camelCase keys of the persisted catalog document.
"""
from datetime import datetime
from enum import Enum
from typing import NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_GROUP_TITLE = "Otros"
DEFAULT_CATEGORY = "Entertainment"


class ChannelType(str, Enum):
    """How a channel is played: acestream content id or plain URL."""
    ACESTREAM = "acestream"
    URL = "url"


class CatalogModel(BaseModel):
    """Base model accepting both field names and camelCase aliases."""
    model_config = ConfigDict(populate_by_name=True)

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Channel(CatalogModel):
    """A scraped channel.

    `url` is only set for URL channels; acestream channels carry their
    40-character content id in `id`.
    """
    name: str
    id: str
    url: Optional[str] = None
    quality: Optional[str] = None
    category: Optional[str] = None
    group_title: Optional[str] = Field(None, alias="groupTitle")
    tags: list[str] = Field(default_factory=list)
    type: ChannelType


class GroupChannel(CatalogModel):
    """Channel as stored inside a ChannelGroup."""
    name: str
    id: str
    url: Optional[str] = None
    quality: Optional[str] = None
    category: str = DEFAULT_CATEGORY
    group_title: str = Field(DEFAULT_GROUP_TITLE, alias="groupTitle")
    tags: list[str] = Field(default_factory=list)


class ChannelGroup(CatalogModel):
    """Named group of channels with tags shared by the group."""
    id: str
    name: str
    display_name: str = Field(alias="displayName")
    tags: list[str] = Field(default_factory=list)
    channels: list[GroupChannel] = Field(default_factory=list)


class ChannelData(CatalogModel):
    """Persisted catalog document."""
    last_updated: datetime = Field(alias="lastUpdated")
    groups: list[ChannelGroup] = Field(default_factory=list)


class RawChannelEntry(NamedTuple):
    """One (group title, channel name, link) triple found in the source page."""
    group_title: str
    channel_name: str
    target_url: str


class Classification(NamedTuple):
    category: str
    tags: list[str]


class StoreResult(BaseModel):
    """Outcome of a persistence operation."""
    success: bool
    reason: Optional[str] = None

    @classmethod
    def ok(cls) -> "StoreResult":
        return cls(success=True)

    @classmethod
    def failure(cls, reason: str) -> "StoreResult":
        return cls(success=False, reason=reason)


class FavoritesUpdate(BaseModel):
    """Result of adding or removing a favorite."""
    success: bool
    favorites: list[str] = Field(default_factory=list)
    reason: Optional[str] = None


class ChannelFilter(BaseModel):
    """Filter criteria for channel and group listings."""
    search_term: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)
    quality: Optional[str] = None
    type: Optional[ChannelType] = None


# Request / response models for the API
class FavoriteRequest(CatalogModel):
    """Body of POST /api/favorites. Presence of fields is checked by the endpoint."""
    channel_id: Optional[str] = Field(None, alias="channelId")
    action: Optional[str] = None


class RefreshResponse(BaseModel):
    success: bool
    message: str
    error: Optional[str] = None
