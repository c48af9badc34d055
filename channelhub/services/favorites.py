"""
Per-user favorites stored as one JSON file per user.

Writes are last-writer-wins; there is no locking between concurrent
requests for the same user.
"""
import hashlib
import logging
import re
from pathlib import Path
from typing import Optional

from channelhub.config import get_settings
from channelhub.models.channel import FavoritesUpdate, StoreResult
from channelhub.services.json_store import read_json, write_json_atomic

logger = logging.getLogger(__name__)

FAVORITES_INDENT = 2

SAFE_USER_ID = re.compile(r"^[A-Za-z0-9_@-][A-Za-z0-9_.@-]{0,127}$")
HASHED_PREFIX = "~"


class FavoritesStore:
    """Persisted ordered set of favorite channel ids per user."""

    def __init__(self, directory: Optional[str | Path] = None):
        self.directory = Path(directory) if directory else get_settings().favorites_dir

    def path_for(self, user_id: str) -> Path:
        """File holding a user's favorites.

        Unsafe ids are stored as `~<sha1>`, which no safe id can collide with.
        """
        if SAFE_USER_ID.fullmatch(user_id):
            name = user_id
        else:
            name = HASHED_PREFIX + hashlib.sha1(user_id.encode()).hexdigest()
        return self.directory / f"{name}.json"

    def get(self, user_id: str) -> list[str]:
        """Get a user's favorites; empty if missing or unreadable."""
        path = self.path_for(user_id)
        if not path.exists():
            return []
        try:
            data = read_json(path)
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable favorites file {path}: {e}")
            return []
        if not isinstance(data, list):
            return []
        return [str(item) for item in data]

    def set(self, user_id: str, favorites: list[str]) -> StoreResult:
        """Replace a user's favorites."""
        path = self.path_for(user_id)
        try:
            write_json_atomic(path, list(favorites), indent=FAVORITES_INDENT)
        except OSError as e:
            logger.error(f"Error saving favorites for {user_id}: {e}")
            return StoreResult.failure(str(e))
        return StoreResult.ok()

    def add(self, user_id: str, channel_id: str) -> FavoritesUpdate:
        """Add a channel to favorites (no duplicates)."""
        favorites = self.get(user_id)
        if channel_id in favorites:
            return FavoritesUpdate(success=True, favorites=favorites)
        favorites.append(channel_id)
        return self._persist(user_id, favorites)

    def remove(self, user_id: str, channel_id: str) -> FavoritesUpdate:
        """Remove a channel from favorites; absent ids are a no-op."""
        favorites = self.get(user_id)
        if channel_id not in favorites:
            return FavoritesUpdate(success=True, favorites=favorites)
        favorites.remove(channel_id)
        return self._persist(user_id, favorites)

    def is_favorite(self, user_id: str, channel_id: str) -> bool:
        return channel_id in self.get(user_id)

    def _persist(self, user_id: str, favorites: list[str]) -> FavoritesUpdate:
        result = self.set(user_id, favorites)
        return FavoritesUpdate(success=result.success, favorites=favorites, reason=result.reason)


def get_favorites_store() -> FavoritesStore:
    """Build a favorites store from the current settings."""
    return FavoritesStore()
