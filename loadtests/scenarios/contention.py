"""Contention scenario: many shoppers racing for one low-stock product.

Each user lists nothing and buys directly. Exactly ``HOT_STOCK`` units can be
sold; every later order must be rejected with 400 and no request may
surface as 500. Concurrent writes to the product exercise the optimistic
concurrency retry, which reports 409 once it gives up.
"""

import requests
from locust import HttpUser, between, events, task

from loadtests.data_generators import address_data, customer_headers, product_data, seller_headers, user_id
from loadtests.helpers.response import extract_error_detail

HOT_STOCK = 25
HOT_PRODUCT: dict = {}


@events.test_start.add_listener
def list_hot_product(environment, **_kwargs):
    """Publish the contended product once, before any user starts."""
    seller = user_id("lt-hot-seller")
    resp = requests.post(
        f"{environment.host}/products",
        json=product_data(stock=HOT_STOCK),
        headers=seller_headers(seller),
        timeout=10,
    )
    if resp.status_code == 201:
        HOT_PRODUCT["id"] = resp.json()["product_id"]


class HotProductUser(HttpUser):
    wait_time = between(0.1, 0.5)
    weight = 2

    @task
    def buy_hot_product(self):
        product_id = HOT_PRODUCT.get("id")
        if product_id is None:
            return

        with self.client.post(
            "/orders",
            json={
                "items": [{"product_id": product_id, "quantity": 1}],
                "shipping_address": address_data(),
                "payment_method": "cod",
            },
            headers=customer_headers(user_id("lt-racer")),
            catch_response=True,
            name="POST /orders (hot product)",
        ) as resp:
            if resp.status_code in (201, 400, 409):
                resp.success()
            else:
                resp.failure(f"Hot product order failed: {resp.status_code} {extract_error_detail(resp)}")
