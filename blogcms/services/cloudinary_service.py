"""Cloudinary integration used by the media library uploads."""

from __future__ import annotations

import asyncio
import logging
from functools import lru_cache
from typing import Any, Dict, Optional
from urllib.parse import urlsplit

import cloudinary
import cloudinary.uploader
import cloudinary.utils

from blogcms.core.config import settings
from blogcms.services.exceptions import StorageUnavailableError


logger = logging.getLogger(__name__)

# Anchos (px) de los formatos derivados, de menor a mayor.
FORMAT_BREAKPOINTS: Dict[str, int] = {
    "thumbnail": 245,
    "small": 500,
    "medium": 750,
    "large": 1000,
}


def is_configured() -> bool:
    """Return True when Cloudinary credentials are available."""
    return (
        bool(settings.CLOUD_NAME_CLOUDINARY)
        and bool(settings.API_KEY_CLOUDINARY)
        and bool(settings.API_SECRET_CLOUDINARY)
    )


@lru_cache(maxsize=1)
def _configure() -> bool:
    """Configure Cloudinary SDK once per process."""
    if not is_configured():
        return False
    cloudinary.config(
        cloud_name=settings.CLOUD_NAME_CLOUDINARY,
        api_key=settings.API_KEY_CLOUDINARY,
        api_secret=settings.API_SECRET_CLOUDINARY,
        secure=settings.CLOUDINARY_SECURE_DELIVERY,
    )
    return True


def public_url(url: str) -> str:
    """Swap the provider host for MEDIA_PUBLIC_BASE_URL when one is configured."""
    base = settings.MEDIA_PUBLIC_BASE_URL
    if not base:
        return url
    return f"{base.rstrip('/')}{urlsplit(url).path}"


def build_formats(public_id: str, width: Optional[int], height: Optional[int]) -> Dict[str, Dict[str, Any]]:
    """Resized delivery URLs for every breakpoint narrower than the original."""
    if not width or not height:
        return {}
    formats: Dict[str, Dict[str, Any]] = {}
    for name, target in FORMAT_BREAKPOINTS.items():
        if target >= width:
            continue
        url, _ = cloudinary.utils.cloudinary_url(
            public_id,
            width=target,
            crop="limit",
            secure=settings.CLOUDINARY_SECURE_DELIVERY,
        )
        formats[name] = {
            "url": public_url(url),
            "width": target,
            "height": round(height * target / width),
        }
    return formats


async def upload_bytes(
    content: bytes,
    *,
    filename: str,
    folder: Optional[str] = None,
    extra_options: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Upload raw file bytes to Cloudinary.

    Returns the upload result (``public_id``, ``secure_url``, ``width``,
    ``height``...). The blocking SDK call runs in a worker thread to avoid
    blocking the event loop.
    """
    if not _configure():
        raise StorageUnavailableError("Media storage is not configured")

    options: Dict[str, Any] = {
        "folder": folder or settings.CLOUDINARY_UPLOAD_FOLDER,
        "resource_type": "auto",
        "use_filename": True,
        "filename_override": filename,
        "unique_filename": True,
    }
    if extra_options:
        options.update(extra_options)

    def _upload() -> Dict[str, Any]:
        return cloudinary.uploader.upload(content, **options)

    try:
        result = await asyncio.to_thread(_upload)
    except Exception as exc:
        logger.warning("Cloudinary upload failed: %s", exc)
        raise StorageUnavailableError("Media upload failed") from exc

    return result


async def destroy(public_id: str) -> bool:
    """Delete a remote asset. Failures are logged and reported as False."""
    if not public_id or not _configure():
        return False

    def _destroy() -> Dict[str, Any]:
        return cloudinary.uploader.destroy(public_id, invalidate=True)

    try:
        result = await asyncio.to_thread(_destroy)
    except Exception as exc:
        logger.warning("Cloudinary delete failed: %s", exc, extra={"public_id": public_id})
        return False
    return result.get("result") == "ok"


__all__ = ["build_formats", "destroy", "is_configured", "public_url", "upload_bytes"]
