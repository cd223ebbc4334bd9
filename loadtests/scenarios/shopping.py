"""Shopper journeys: cart, checkout and payment.

Shoppers pick products from the pool sellers publish. Out-of-stock and
deleted products are expected under load and are not counted as failures.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import checkout_data, customer_headers, payment_proof, user_id
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import CATALOGUE, ShopperState

# Stock and availability conflicts are legitimate outcomes, not errors
EXPECTED_REJECTIONS = (400, 404, 409)


class CheckoutJourney(SequentialTaskSet):
    """Add Items -> View Cart -> Change Quantity -> Checkout -> Verify Payment -> History."""

    def on_start(self):
        self.state = ShopperState(user_id=user_id())
        self.headers = customer_headers(self.state.user_id)
        if not CATALOGUE:
            self.interrupt()

    def _add(self, product_id, quantity):
        with self.client.post(
            f"/carts/{self.state.user_id}/items",
            json={"product_id": product_id, "quantity": quantity},
            headers=self.headers,
            catch_response=True,
            name="POST /carts/{user_id}/items",
        ) as resp:
            if resp.status_code == 200:
                self.state.cart_products.append(product_id)
            elif resp.status_code in EXPECTED_REJECTIONS:
                resp.success()
            else:
                resp.failure(f"Add to cart failed: {resp.status_code} {extract_error_detail(resp)}")

    @task
    def add_items(self):
        for product_id in random.sample(CATALOGUE, k=min(3, len(CATALOGUE))):
            self._add(product_id, random.randint(1, 3))

    @task
    def view_cart(self):
        self.client.get(f"/carts/{self.state.user_id}", headers=self.headers, name="GET /carts/{user_id}")

    @task
    def change_quantity(self):
        if not self.state.cart_products:
            self.interrupt()
        product_id = self.state.cart_products[0]
        with self.client.put(
            f"/carts/{self.state.user_id}/items/{product_id}",
            json={"quantity": random.randint(1, 4)},
            headers=self.headers,
            catch_response=True,
            name="PUT /carts/{user_id}/items/{product_id}",
        ) as resp:
            if resp.status_code in EXPECTED_REJECTIONS:
                resp.success()
            elif resp.status_code != 200:
                resp.failure(f"Update quantity failed: {resp.status_code} {extract_error_detail(resp)}")

    @task
    def checkout(self):
        with self.client.post(
            f"/carts/{self.state.user_id}/checkout",
            json=checkout_data(),
            headers=self.headers,
            catch_response=True,
            name="POST /carts/{user_id}/checkout",
        ) as resp:
            if resp.status_code == 201:
                body = resp.json()
                self.state.order_id = body["order_id"]
                self.state.payment_intent_id = body.get("payment_intent_id")
            elif resp.status_code in EXPECTED_REJECTIONS:
                resp.success()
                self.interrupt()
            else:
                resp.failure(f"Checkout failed: {resp.status_code} {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def verify_payment(self):
        if not self.state.payment_intent_id:
            return
        with self.client.post(
            "/payments/verify",
            json=payment_proof(self.state.payment_intent_id, succeed=random.random() < 0.9),
            catch_response=True,
            name="POST /payments/verify",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Verify payment failed: {resp.status_code} {extract_error_detail(resp)}")

    @task
    def order_history(self):
        self.client.get("/orders", headers=self.headers, name="GET /orders")

    @task
    def done(self):
        self.interrupt()


class ShopperUser(HttpUser):
    tasks = [CheckoutJourney]
    wait_time = between(1, 3)
    weight = 5
