"""
Channel catalog API endpoints.
"""
import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse, Response

from channelhub.exceptions import CatalogUnavailableError
from channelhub.models.channel import ChannelFilter, ChannelType
from channelhub.services.catalog import ChannelCatalogService, get_catalog_service
from channelhub.services.channel_ops import (
    count_channels_by_category,
    extract_all_tags,
    filter_channels,
    get_channel_logo,
    get_channel_url,
    sort_channels,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["channels"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET",
    "Access-Control-Allow-Headers": "Content-Type",
}


@router.get("/channels")
async def get_channel_catalog(
    service: ChannelCatalogService = Depends(get_catalog_service),
):
    """
    Get the grouped channel catalog.

    Returns `{lastUpdated, groups}`; readable from any origin.
    """
    try:
        data = await service.get_catalog()
    except Exception as e:
        logger.error(f"Error serving channel data: {e}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to load channel data", "message": str(e)},
            headers={"Access-Control-Allow-Origin": "*"},
        )
    return JSONResponse(content=data.to_json_dict(), headers=CORS_HEADERS)


@router.options("/channels")
async def channels_preflight():
    """CORS preflight for the catalog endpoint."""
    return Response(status_code=204, headers=CORS_HEADERS)


@router.get("/channels/list")
async def list_channels(
    search: Optional[str] = Query(None, description="Search in channel names"),
    tag: list[str] = Query([], description="Match channels having any of these tags"),
    category: list[str] = Query([], description="Match channels in any of these categories"),
    quality: Optional[str] = Query(None, description="Exact quality, e.g. HD or 1080p"),
    channel_type: Optional[ChannelType] = Query(None, alias="type", description="acestream or url"),
    sort_by: Literal["name", "quality", "category"] = Query("name"),
    order: Literal["asc", "desc"] = Query("asc"),
    service: ChannelCatalogService = Depends(get_catalog_service),
):
    """
    List channels as a flat, filtered and sorted list.
    """
    criteria = ChannelFilter(
        search_term=search,
        tags=tag,
        categories=category,
        quality=quality,
        type=channel_type,
    )
    channels = filter_channels(await service.get_channels(), criteria)
    channels = sort_channels(channels, sort_by, descending=(order == "desc"))
    return {
        "channels": [channel.to_json_dict() for channel in channels],
        "total": len(channels),
    }


@router.get("/channels/{channel_id}")
async def get_channel(
    channel_id: str,
    service: ChannelCatalogService = Depends(get_catalog_service),
):
    """
    Get a single channel with its play URL and placeholder logo.
    """
    channel = await service.get_channel(channel_id)
    if not channel:
        raise HTTPException(status_code=404, detail="Channel not found")

    return {
        **channel.to_json_dict(),
        "playUrl": get_channel_url(channel),
        "logo": get_channel_logo(channel.name, channel.type),
    }


@router.get("/tags")
async def list_tags(service: ChannelCatalogService = Depends(get_catalog_service)):
    """
    List all group tags, sorted.
    """
    try:
        data = await service.get_catalog()
    except CatalogUnavailableError:
        raise HTTPException(status_code=503, detail="Channel data unavailable")
    return {"tags": extract_all_tags(data.groups)}


@router.get("/categories")
async def list_categories(service: ChannelCatalogService = Depends(get_catalog_service)):
    """
    List channel categories with counts.
    """
    counts = count_channels_by_category(await service.get_channels())
    return {
        "categories": [{"name": name, "channel_count": count} for name, count in counts.items()]
    }
