"""In-memory image store for development and tests."""

from uuid import uuid4

from commerce.catalogue.media.port import ImageStore, StoredImage


class ImageStoreError(Exception):
    """Raised by the fake store when configured to fail."""


class FakeImageStore(ImageStore):
    def __init__(self) -> None:
        self.images: dict[str, bytes] = {}
        self.deleted: list[str] = []
        self.should_fail_upload = False
        self.should_fail_delete = False

    def configure(self, should_fail_upload: bool = False, should_fail_delete: bool = False) -> None:
        self.should_fail_upload = should_fail_upload
        self.should_fail_delete = should_fail_delete

    def upload(self, filename: str, content: bytes) -> StoredImage:
        if self.should_fail_upload:
            raise ImageStoreError(f"Upload of {filename} failed")

        public_id = f"products/{uuid4().hex[:12]}"
        self.images[public_id] = content
        return StoredImage(public_id=public_id, url=f"https://images.local/{public_id}/{filename}")

    def delete(self, public_id: str) -> None:
        if self.should_fail_delete:
            raise ImageStoreError(f"Delete of {public_id} failed")

        self.images.pop(public_id, None)
        self.deleted.append(public_id)

    def reset(self) -> None:
        self.images.clear()
        self.deleted.clear()
        self.should_fail_upload = False
        self.should_fail_delete = False
