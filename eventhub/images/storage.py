"""Saving uploaded event images to the configured storage backend."""

from __future__ import annotations

import logging
import uuid
from pathlib import PurePosixPath

from django.conf import settings
from django.core.files.storage import default_storage
from django.utils import timezone

from eventhub.images.errors import ImageUploadError

logger = logging.getLogger(__name__)


def image_upload_path(filename: str) -> str:
    folder = getattr(settings, "EVENT_IMAGE_FOLDER", "events")
    suffix = PurePosixPath(filename).suffix.lower()
    timestamp = timezone.now().strftime("%Y%m%dT%H%M%S")
    return f"{folder}/{timestamp}_{uuid.uuid4().hex}{suffix}"


def store_image(upload) -> str:
    """Save ``upload`` and return the storage URL of the saved file.

    Raises:
        ImageUploadError: If the storage backend fails to save the file.
    """
    try:
        name = default_storage.save(image_upload_path(upload.name), upload)
    except OSError as exc:
        logger.exception("Saving uploaded image %s failed", upload.name)
        raise ImageUploadError from exc
    logger.info("Stored uploaded image as %s", name)
    return default_storage.url(name)
