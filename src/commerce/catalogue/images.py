"""Product images: upload to the image store, then record on the product.

The upload happens before the unit of work opens. If recording it fails for
any reason the uploaded file is deleted again, so the store never keeps
images that no product references.
"""

import structlog

from commerce.catalogue.listing import RecordProductImage, RemoveProductImage


class ProductImageService:
    def __init__(self, manager, image_store, logger=None) -> None:
        self.manager = manager
        self.image_store = image_store
        self.logger = logger or structlog.get_logger(__name__)

    def attach(self, principal, product_id, filename, content) -> str:
        stored = self.image_store.upload(filename, content)
        self.logger.info("image_uploaded", product_id=str(product_id), public_id=stored.public_id)

        def delete_upload():
            self.image_store.delete(stored.public_id)
            self.logger.info("image_upload_discarded", product_id=str(product_id), public_id=stored.public_id)

        return self.manager.execute(
            RecordProductImage(
                actor_id=principal.user_id,
                actor_role=principal.role,
                product_id=product_id,
                public_id=stored.public_id,
                url=stored.url,
            ),
            compensations=[delete_upload],
        )

    def remove(self, principal, product_id, image_id) -> None:
        public_id = self.manager.execute(
            RemoveProductImage(
                actor_id=principal.user_id,
                actor_role=principal.role,
                product_id=product_id,
                image_id=image_id,
            )
        )
        try:
            self.image_store.delete(public_id)
        except Exception:
            self.logger.exception("image_delete_failed", product_id=str(product_id), public_id=public_id)
