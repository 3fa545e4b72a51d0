"""Project-wide constants (page size, root sentinel, thumbnail sizes, TTLs)."""

from typing import Dict, Tuple

ROOT_PARENT_ID: str = "0"

PAGE_SIZE: int = 20

SESSION_TTL_SECONDS: int = 24 * 3600
SESSION_KEY_PREFIX: str = "auth_"

# Exposed size tokens mapped to thumbnail widths in pixels
VARIANT_SIZES: Dict[str, int] = {
    "small": 100,
    "medium": 250,
    "large": 500,
}

# Generation order used by the worker, largest first
THUMBNAIL_WIDTHS: Tuple[int, ...] = (500, 250, 100)

THUMBNAIL_TASK_NAME: str = "generate_thumbnails"

DEFAULT_CONTENT_TYPE: str = "application/octet-stream"
