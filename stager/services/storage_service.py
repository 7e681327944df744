"""Local file storage rooted at FILE_UPLOAD_PATH.

Every path handed to this module is relative to the upload root. Layout:

    {user_id}/sources/{file}
    {user_id}/generations/{source_image_id}/{file}
"""
import logging
import os
from flask import current_app

from stager.errors import ValidationError

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
    ".gif": "image/gif",
}


def _root():
    return os.path.abspath(current_app.config["FILE_UPLOAD_PATH"])


def validate_relative_path(path):
    """Reject absolute, home-relative and traversal paths."""
    if not path or not isinstance(path, str):
        raise ValidationError("File path is required")
    if path.startswith("/") or path.startswith("\\") or "~" in path:
        raise ValidationError("Invalid file path")
    if ".." in path.replace("\\", "/").split("/"):
        raise ValidationError("Invalid file path")
    return path


def resolve(path):
    """Absolute filesystem path for a stored relative path."""
    validate_relative_path(path)
    root = _root()
    full = os.path.abspath(os.path.join(root, path))
    if os.path.commonpath([root, full]) != root:
        raise ValidationError("Invalid file path")
    return full


def exists(path):
    return os.path.isfile(resolve(path))


def save(path, data):
    """Write bytes to a stored path, creating parent directories."""
    full = resolve(path)
    os.makedirs(os.path.dirname(full), exist_ok=True)
    with open(full, "wb") as fh:
        fh.write(data)


def delete(path):
    """Delete a stored file. Raises OSError if it cannot be removed."""
    os.remove(resolve(path))


def list_directory(path):
    return sorted(os.listdir(resolve(path)))


def remove_empty_directory(path):
    os.rmdir(resolve(path))


def content_type_for(path):
    ext = os.path.splitext(path)[1].lower()
    return CONTENT_TYPES.get(ext, "application/octet-stream")


def sources_dir(user_id):
    return f"{user_id}/sources"


def generations_dir(user_id, source_image_id=None):
    if source_image_id:
        return f"{user_id}/generations/{source_image_id}"
    return f"{user_id}/generations"


def _prune(path):
    """Remove ``path`` bottom-up if nothing but empty directories remain.

    Returns True when the directory itself was removed.
    """
    try:
        entries = list_directory(path)
    except OSError:
        return False

    for name in entries:
        child = f"{path}/{name}"
        try:
            is_dir = os.path.isdir(resolve(child))
        except ValidationError:
            logger.warning("Skipping unexpected entry %s", child)
            continue
        if is_dir:
            _prune(child)

    try:
        if list_directory(path):
            return False
        remove_empty_directory(path)
    except OSError as e:
        logger.warning("Could not remove directory %s: %s", path, e)
        return False
    return True


def prune_empty_directories(user_id):
    """Remove a user's empty sources/generations trees, then the user root.

    Best-effort: failures are logged and never raised.
    """
    validate_relative_path(user_id)
    removed = []
    try:
        for path in (sources_dir(user_id), generations_dir(user_id), user_id):
            if _prune(path):
                removed.append(path)
    except Exception:
        logger.warning("Failed to clean up empty directories for user %s", user_id, exc_info=True)
    return removed
