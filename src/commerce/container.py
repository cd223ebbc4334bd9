"""Wiring of application services.

Settings and the logger are handed to each component here, once, so that
nothing reads global configuration while serving a request.
"""

from dataclasses import dataclass

import structlog

from commerce.catalogue.images import ProductImageService
from commerce.catalogue.media import ImageStore, build_image_store
from commerce.config import Settings
from commerce.notifications.channel import build_email_channel, build_push_channel
from commerce.notifications.notifier import Notifier
from commerce.ordering.checkout import CheckoutService
from commerce.ordering.consistency import ConsistencyManager
from commerce.payments.gateway import PaymentGateway, build_gateway


@dataclass
class Services:
    settings: Settings
    manager: ConsistencyManager
    gateway: PaymentGateway
    image_store: ImageStore
    notifier: Notifier
    checkout: CheckoutService
    images: ProductImageService


def build_services(domain, settings: Settings, logger=None, **overrides) -> Services:
    """Assemble services for ``domain``. Keyword overrides replace adapters (tests)."""
    logger = logger or structlog.get_logger("commerce")

    manager = ConsistencyManager(domain, settings, logger=logger.bind(component="consistency"))
    gateway = overrides.get("gateway") or build_gateway(settings)
    image_store = overrides.get("image_store") or build_image_store(settings)
    notifier = overrides.get("notifier") or Notifier(
        email=build_email_channel(settings),
        push=build_push_channel(settings),
        logger=logger.bind(component="notifier"),
    )

    return Services(
        settings=settings,
        manager=manager,
        gateway=gateway,
        image_store=image_store,
        notifier=notifier,
        checkout=CheckoutService(
            manager,
            gateway,
            notifier,
            currency=settings.payment_currency,
            logger=logger.bind(component="checkout"),
        ),
        images=ProductImageService(manager, image_store, logger=logger.bind(component="images")),
    )
