"""
Image upload helpers shared by event images and user avatars.

Files are written through Django's default storage, which is S3 (via
django-storages) when a bucket is configured and the local filesystem
otherwise.
"""
import logging
import os
import uuid

from django.conf import settings
from django.core.files.storage import default_storage
from rest_framework import serializers

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}


def validate_image_upload(file):
    if file.size > settings.MAX_UPLOAD_SIZE:
        raise serializers.ValidationError(
            f"File too large; the limit is {settings.MAX_UPLOAD_SIZE // (1024 * 1024)}MB"
        )
    ext = os.path.splitext(file.name)[1].lower()
    if ext not in ALLOWED_IMAGE_EXTENSIONS:
        raise serializers.ValidationError("Only image files (jpeg, jpg, png, gif, webp) are allowed")
    return file


class ImageUploadSerializer(serializers.Serializer):
    image = serializers.ImageField(validators=[validate_image_upload])


class AvatarUploadSerializer(serializers.Serializer):
    avatar = serializers.ImageField(validators=[validate_image_upload])


def store_image(file, folder, request=None):
    """Persist an uploaded image under ``folder``; returns (storage name, public URL)."""
    ext = os.path.splitext(file.name)[1].lower()
    name = default_storage.save(f"{folder}/{uuid.uuid4().hex}{ext}", file)
    url = default_storage.url(name)
    logger.info("Stored upload %s", name)
    if request is not None and url.startswith("/"):
        url = request.build_absolute_uri(url)
    return name, url
