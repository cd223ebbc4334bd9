"""Faker-based payloads for the load test scenarios.

Field names match the API's request schemas exactly, and every value passes
the domain's validation (positive prices and quantities, complete addresses).
"""

import random
import uuid

from faker import Faker

fake = Faker()


def user_id(prefix: str = "lt-user") -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


def customer_headers(uid: str) -> dict:
    return {"X-User-Id": uid, "X-User-Role": "customer", "X-User-Email": fake.email()}


def seller_headers(uid: str) -> dict:
    return {"X-User-Id": uid, "X-User-Role": "seller"}


def product_data(stock: int | None = None) -> dict:
    """CreateProductRequest payload with a price between 10 and 500."""
    price = round(random.uniform(10, 500), 2)
    return {
        "name": fake.catch_phrase()[:255],
        "description": fake.paragraph(nb_sentences=3),
        "brand": fake.company()[:100],
        "price": price,
        "stock": stock if stock is not None else random.randint(50, 500),
    }


def address_data() -> dict:
    return {
        "street": fake.street_address()[:255],
        "city": fake.city()[:100],
        "state": fake.state()[:100],
        "postal_code": fake.postcode()[:20],
        "country": fake.country()[:100],
    }


def checkout_data(payment_method: str = "gateway") -> dict:
    return {"shipping_address": address_data(), "payment_method": payment_method}


def review_data() -> dict:
    return {"rating": random.randint(1, 5), "comment": fake.sentence(nb_words=12)}


def payment_proof(intent_id: str, succeed: bool = True) -> dict:
    """Verification body in the gateway's field names. The fake gateway accepts 'test-signature'."""
    return {
        "razorpay_order_id": intent_id,
        "razorpay_payment_id": f"pay_{uuid.uuid4().hex[:14]}",
        "razorpay_signature": "test-signature" if succeed else "bad-signature",
    }
