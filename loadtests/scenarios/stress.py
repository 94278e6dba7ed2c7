"""Stress scenarios for order numbering.

CheckoutStormUser fires checkouts as fast as possible from many customers at
once. Every response must carry a distinct order number; a repeated number
means the sequence source handed one out twice.
"""

from locust import HttpUser, constant_pacing, task

from loadtests.data_generators import cart_item_data, checkout_data, customer_headers

_seen_numbers: set[str] = set()


class CheckoutStormUser(HttpUser):
    wait_time = constant_pacing(0.1)  # ~10 checkouts/sec per user

    @task
    def add_and_checkout(self):
        headers = customer_headers()
        self.client.post(
            "/cart/items",
            json=cart_item_data(market_share=0),
            headers=headers,
            name="[STRESS] POST /cart/items",
        )
        with self.client.post(
            "/orders",
            json=checkout_data(),
            headers=headers,
            catch_response=True,
            name="[STRESS] POST /orders",
        ) as resp:
            if resp.status_code != 201:
                resp.failure(f"Checkout failed: {resp.status_code}")
                return
            number = resp.json()["orderNumber"]
            if number in _seen_numbers:
                resp.failure(f"Duplicate order number {number}")
            _seen_numbers.add(number)
