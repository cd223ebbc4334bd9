"""Per-user state for the load test journeys.

Each Locust user keeps its own ids. Nothing is shared across users except
the product pool a seller publishes, which shoppers read from ``CATALOGUE``.
"""

from dataclasses import dataclass, field

# Product ids published by SellerUser instances, read by shoppers
CATALOGUE: list[str] = []


@dataclass
class SellerState:
    seller_id: str
    product_ids: list[str] = field(default_factory=list)


@dataclass
class ShopperState:
    user_id: str
    cart_products: list[str] = field(default_factory=list)
    order_id: str | None = None
    payment_intent_id: str | None = None
