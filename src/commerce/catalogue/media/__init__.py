"""Image store selection."""

from commerce.catalogue.media.cloudinary_store import CloudinaryImageStore
from commerce.catalogue.media.fake_store import FakeImageStore
from commerce.catalogue.media.port import ImageStore, StoredImage

__all__ = ["ImageStore", "StoredImage", "build_image_store"]


def build_image_store(settings) -> ImageStore:
    """Return the image store named by ``settings.image_store``."""
    if settings.image_store == "fake":
        return FakeImageStore()
    if settings.image_store == "cloudinary":
        return CloudinaryImageStore(
            cloud_name=settings.cloudinary_cloud_name,
            api_key=settings.cloudinary_api_key,
            api_secret=settings.cloudinary_api_secret,
            timeout=settings.request_timeout_seconds,
        )
    raise ValueError(f"Unknown image store: {settings.image_store}")
