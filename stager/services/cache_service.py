"""Redis cache for per-image variant listings.

Every call is a no-op when Redis is not configured.
"""
import json
import logging
from flask import current_app

from stager import extensions

logger = logging.getLogger(__name__)


def variants_key(source_image_id):
    return f"images:variants:{source_image_id}"


def user_images_key(user_id):
    return f"images:user:{user_id}:metadata"


def get_variants(source_image_id):
    client = extensions.redis_client
    if not client:
        return None
    try:
        raw = client.get(variants_key(source_image_id))
    except Exception:
        logger.warning("Variant cache read failed for %s", source_image_id, exc_info=True)
        return None
    return json.loads(raw) if raw else None


def set_variants(source_image_id, variants):
    client = extensions.redis_client
    if not client:
        return
    try:
        client.setex(
            variants_key(source_image_id),
            current_app.config["VARIANT_CACHE_TTL_SECONDS"],
            json.dumps(variants),
        )
    except Exception:
        logger.warning("Variant cache write failed for %s", source_image_id, exc_info=True)


def invalidate_variants(source_image_id, user_id=None):
    """Drop the cached variant listing and, if given, the user's image metadata."""
    client = extensions.redis_client
    if not client:
        return
    keys = [variants_key(source_image_id)]
    if user_id:
        keys.append(user_images_key(user_id))
    try:
        client.delete(*keys)
    except Exception:
        logger.warning("Variant cache invalidation failed for %s", source_image_id, exc_info=True)
