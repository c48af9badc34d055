"""
Shared slowapi rate limiter.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from channelhub.config import get_settings

limiter = Limiter(key_func=get_remote_address)


def refresh_limit() -> str:
    """Limit applied to the cache refresh endpoint."""
    return get_settings().refresh_rate_limit
