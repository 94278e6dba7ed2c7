"""Customer-side load test scenarios.

Stateful SequentialTaskSet journeys for filling a cart, checking it out and
managing the address book.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import address_data, cart_item_data, checkout_data, customer_headers
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import CustomerState


class CartToCheckoutJourney(SequentialTaskSet):
    """Add Items -> Change Quantity -> View Cart -> Checkout -> View Order.

    Each simulated customer has a fresh id, so carts never collide and every
    checkout allocates a new order number.
    """

    def on_start(self):
        self.state = CustomerState(headers=customer_headers())

    @task
    def add_items(self):
        for _ in range(random.randint(2, 5)):
            with self.client.post(
                "/cart/items",
                json=cart_item_data(),
                headers=self.state.headers,
                catch_response=True,
                name="POST /cart/items",
            ) as resp:
                if resp.status_code == 201:
                    self.state.cart_item_ids.append(resp.json()["itemId"])
                else:
                    resp.failure(f"Add to cart failed: {resp.status_code} — {extract_error_detail(resp)}")
                    self.interrupt()

    @task
    def change_quantity(self):
        item_id = random.choice(self.state.cart_item_ids)
        with self.client.put(
            f"/cart/items/{item_id}",
            json={"quantity": random.randint(1, 100)},
            headers=self.state.headers,
            catch_response=True,
            name="PUT /cart/items/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Update quantity failed: {extract_error_detail(resp)}")

    @task
    def view_cart(self):
        with self.client.get(
            "/cart",
            headers=self.state.headers,
            catch_response=True,
            name="GET /cart",
        ) as resp:
            if resp.status_code != 200 or not resp.json()["items"]:
                resp.failure(f"View cart failed: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def checkout(self):
        with self.client.post(
            "/orders",
            json=checkout_data(),
            headers=self.state.headers,
            catch_response=True,
            name="POST /orders",
        ) as resp:
            if resp.status_code == 201:
                self.state.order_id = resp.json()["id"]
            else:
                resp.failure(f"Checkout failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def view_order(self):
        with self.client.get(
            f"/orders/{self.state.order_id}",
            headers=self.state.headers,
            catch_response=True,
            name="GET /orders/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"View order failed: {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class AddressBookJourney(SequentialTaskSet):
    """Add Addresses -> Set Default -> Edit -> Checkout To Saved -> Delete.

    The last step deletes an address an order points at, so the server
    unlinks it instead of deleting it.
    """

    def on_start(self):
        self.state = CustomerState(headers=customer_headers())

    @task
    def add_addresses(self):
        for _ in range(2):
            with self.client.post(
                "/addresses",
                json=address_data(),
                headers=self.state.headers,
                catch_response=True,
                name="POST /addresses",
            ) as resp:
                if resp.status_code == 201:
                    self.state.address_ids.append(resp.json()["id"])
                else:
                    resp.failure(f"Add address failed: {extract_error_detail(resp)}")
                    self.interrupt()

    @task
    def set_default(self):
        with self.client.put(
            f"/addresses/{self.state.address_ids[-1]}/default",
            headers=self.state.headers,
            catch_response=True,
            name="PUT /addresses/{id}/default",
        ) as resp:
            if resp.status_code != 200 or not resp.json()["isDefault"]:
                resp.failure(f"Set default failed: {extract_error_detail(resp)}")

    @task
    def edit_address(self):
        with self.client.patch(
            f"/addresses/{self.state.address_ids[0]}",
            json={"street2": "Loading dock B"},
            headers=self.state.headers,
            catch_response=True,
            name="PATCH /addresses/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Edit address failed: {extract_error_detail(resp)}")

    @task
    def checkout_to_saved_address(self):
        self.client.post(
            "/cart/items",
            json=cart_item_data(market_share=0),
            headers=self.state.headers,
            name="POST /cart/items",
        )
        with self.client.post(
            "/orders",
            json=checkout_data(address_id=self.state.address_ids[-1]),
            headers=self.state.headers,
            catch_response=True,
            name="POST /orders [saved address]",
        ) as resp:
            if resp.status_code != 201:
                resp.failure(f"Checkout failed: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def delete_used_address(self):
        with self.client.delete(
            f"/addresses/{self.state.address_ids[-1]}",
            headers=self.state.headers,
            catch_response=True,
            name="DELETE /addresses/{id}",
        ) as resp:
            if resp.status_code != 200 or resp.json()["status"] != "unlinked":
                resp.failure(f"Expected unlink: {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class CustomerUser(HttpUser):
    """Locust user simulating wholesale customers.

    Weighted distribution:
    - 75% Cart to checkout
    - 25% Address book management
    """

    wait_time = between(0.5, 2.0)
    tasks = {
        CartToCheckoutJourney: 3,
        AddressBookJourney: 1,
    }
