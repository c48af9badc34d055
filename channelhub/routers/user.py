"""
User favorites API endpoints.
The user is identified by the X-User-Id header set by the auth proxy.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from channelhub.models.channel import FavoriteRequest
from channelhub.services.favorites import FavoritesStore, get_favorites_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["user"])

FAVORITE_ACTIONS = {
    "add": "Added to favorites",
    "remove": "Removed from favorites",
}


def get_current_user_id(
    x_user_id: Optional[str] = Header(None, description="Authenticated user id"),
) -> Optional[str]:
    """Resolve the current user's id; None when unauthenticated."""
    if x_user_id and x_user_id.strip():
        return x_user_id.strip()
    return None


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


@router.get("/favorites")
async def get_favorites(
    user_id: Optional[str] = Depends(get_current_user_id),
    store: FavoritesStore = Depends(get_favorites_store),
):
    """Get the user's favorite channel ids."""
    if not user_id:
        return _error(401, "Unauthorized")

    try:
        favorites = await run_in_threadpool(store.get, user_id)
    except Exception as e:
        logger.error(f"Error getting favorites for {user_id}: {e}", exc_info=True)
        return _error(500, "Error getting favorites")

    return {"success": True, "favorites": favorites}


@router.post("/favorites")
async def update_favorites(
    request: Request,
    user_id: Optional[str] = Depends(get_current_user_id),
    store: FavoritesStore = Depends(get_favorites_store),
):
    """Add or remove a favorite: `{"channelId": ..., "action": "add" | "remove"}`."""
    if not user_id:
        return _error(401, "Unauthorized")

    payload = None
    body = await request.body()
    if body.strip():
        try:
            payload = FavoriteRequest.model_validate_json(body)
        except ValidationError as e:
            logger.info(f"Rejected favorites request body from {user_id}: {e.error_count()} error(s)")
            return _error(400, "Invalid request body")

    if not payload or not payload.channel_id or not payload.action:
        return _error(400, "Missing required parameters")
    if payload.action not in FAVORITE_ACTIONS:
        return _error(400, f"Unknown action: {payload.action}")

    operation = store.add if payload.action == "add" else store.remove
    try:
        update = await run_in_threadpool(operation, user_id, payload.channel_id)
    except Exception as e:
        logger.error(f"Error processing favorites for {user_id}: {e}", exc_info=True)
        return _error(500, "Error processing favorites")

    if not update.success:
        logger.error(f"Failed to save favorites for {user_id}: {update.reason}")
        return _error(500, "Error processing favorites")

    return {
        "success": True,
        "favorites": update.favorites,
        "message": FAVORITE_ACTIONS[payload.action],
    }
