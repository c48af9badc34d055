"""
Catalog refresh endpoint.
"""
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from channelhub.models.channel import RefreshResponse
from channelhub.rate_limit import limiter, refresh_limit
from channelhub.services.catalog import ChannelCatalogService, get_catalog_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["refresh"])


@router.post("/refresh-channels")
@limiter.limit(refresh_limit)
async def refresh_channels(
    request: Request,
    service: ChannelCatalogService = Depends(get_catalog_service),
):
    """
    Force a re-scrape of the source and overwrite the cached catalog.
    """
    try:
        success = await service.refresh_channel_cache()
    except Exception as e:
        logger.error(f"Error in refresh-channels endpoint: {e}", exc_info=True)
        body = RefreshResponse(success=False, message="Server error", error=str(e))
        return JSONResponse(status_code=500, content=body.model_dump(exclude_none=True))

    if success:
        body = RefreshResponse(success=True, message="Channel data refreshed successfully")
    else:
        body = RefreshResponse(success=False, message="Failed to refresh channel data")
    return JSONResponse(
        status_code=200 if success else 500,
        content=body.model_dump(exclude_none=True),
    )
