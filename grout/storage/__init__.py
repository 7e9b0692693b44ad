"""Storage module with factory for creating the image cache."""

from loguru import logger

from ..config import settings
from .cache import ImageCache, digest, fingerprint
from .protocols import Cache, Limiter


def create_cache(max_size: int | None = None) -> ImageCache:
    """Create the image cache.

    Args:
        max_size: Maximum number of cached images. Uses settings if not provided.

    Returns:
        ImageCache instance.
    """
    size = max_size or settings.cache_size
    logger.info(f"Creating in-memory image cache (capacity {size})")
    return ImageCache(size)


__all__ = [
    "Cache",
    "ImageCache",
    "Limiter",
    "create_cache",
    "digest",
    "fingerprint",
]
