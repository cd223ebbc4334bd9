"""Catalogue load test scenarios.

Sellers publish products into the shared pool and keep repricing them, so
shoppers' carts see prices move under them.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import product_data, review_data, seller_headers, user_id
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import CATALOGUE, SellerState


class SellerJourney(SequentialTaskSet):
    """List Product x2 -> Reprice -> Browse -> Review."""

    def on_start(self):
        self.state = SellerState(seller_id=user_id("lt-seller"))
        self.headers = seller_headers(self.state.seller_id)

    def _list_product(self):
        with self.client.post(
            "/products",
            json=product_data(),
            headers=self.headers,
            catch_response=True,
            name="POST /products",
        ) as resp:
            if resp.status_code == 201:
                product_id = resp.json()["product_id"]
                self.state.product_ids.append(product_id)
                CATALOGUE.append(product_id)
            else:
                resp.failure(f"Create product failed: {resp.status_code} {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def list_first_product(self):
        self._list_product()

    @task
    def list_second_product(self):
        self._list_product()

    @task
    def reprice(self):
        product_id = random.choice(self.state.product_ids)
        with self.client.patch(
            f"/products/{product_id}",
            json={"price": round(random.uniform(10, 500), 2)},
            headers=self.headers,
            catch_response=True,
            name="PATCH /products/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Reprice failed: {resp.status_code} {extract_error_detail(resp)}")

    @task
    def browse(self):
        self.client.get("/products", name="GET /products")

    @task
    def review_someone_elses_product(self):
        if not CATALOGUE:
            return
        product_id = random.choice(CATALOGUE)
        with self.client.post(
            f"/products/{product_id}/reviews",
            json=review_data(),
            headers={"X-User-Id": user_id("lt-reviewer")},
            catch_response=True,
            name="POST /products/{id}/reviews",
        ) as resp:
            # Products can be deleted or already reviewed under load
            if resp.status_code in (201, 404, 409):
                resp.success()
            else:
                resp.failure(f"Review failed: {resp.status_code} {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class SellerUser(HttpUser):
    tasks = [SellerJourney]
    wait_time = between(1, 3)
    weight = 1
