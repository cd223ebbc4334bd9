"""Image store port.

The catalogue only keeps ``{public_id, url}`` for each image. Hosting,
transformation and delivery belong to the image service behind this port.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class StoredImage:
    public_id: str
    url: str


class ImageStore(ABC):
    """Abstract image hosting interface."""

    @abstractmethod
    def upload(self, filename: str, content: bytes) -> StoredImage:
        """Upload raw image bytes and return where they now live."""
        ...

    @abstractmethod
    def delete(self, public_id: str) -> None:
        """Delete a previously uploaded image."""
        ...
