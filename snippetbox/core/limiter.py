"""
Rate limiter configuration module.

This module creates the SlowAPI rate limiter instance that handler modules
decorate their login and signup endpoints with.
"""

import logging
from typing import Optional

from slowapi import Limiter
from slowapi.util import get_remote_address

from snippetbox.core.config import Settings, settings

logger = logging.getLogger(__name__)


def get_limiter_storage(config: Settings) -> Optional[str]:
    """
    Get the storage backend for rate limiting.

    Returns the Redis URL if one is configured and well formed, otherwise
    None (in-memory storage).
    """
    if not config.redis_url:
        return None
    if not config.redis_url.startswith(("redis://", "rediss://")):
        logger.warning(
            "Invalid REDIS_URL format: %s. Using in-memory storage instead.",
            config.redis_url,
        )
        return None
    logger.info("Using Redis backend for rate limiting")
    return config.redis_url


def create_limiter(config: Settings) -> Limiter:
    """
    Create and configure the SlowAPI rate limiter.

    In-memory storage is suitable for single-instance deployments; Redis is
    required when several instances must share counters.
    """
    storage_uri = get_limiter_storage(config)

    if storage_uri:
        return Limiter(
            key_func=get_remote_address,
            storage_uri=storage_uri,
            default_limits=[],
            enabled=config.RATE_LIMIT_ENABLED,
        )

    return Limiter(
        key_func=get_remote_address,
        default_limits=[],
        enabled=config.RATE_LIMIT_ENABLED,
    )


# Route decorators are applied at import time, so there is a single instance
limiter = create_limiter(settings)
