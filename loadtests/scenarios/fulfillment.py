"""Staff-side load test scenarios.

Journeys that place an order as a customer and then drive it through the
admin endpoints: status changes, market price finalization, cancellation
with reopen and staff-drafted carts.
"""

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import (
    admin_headers,
    cart_item_data,
    checkout_data,
    customer_headers,
    draft_items,
)
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import FulfillmentState


class _PlacesOrder(SequentialTaskSet):
    """Base journey: the first task places an order with a market-priced line."""

    def on_start(self):
        self.state = FulfillmentState()
        self.customer = customer_headers()
        self.admin = admin_headers()

    def place_order(self):
        items = [cart_item_data(market_share=0), cart_item_data(market_share=1)]
        for item in items:
            self.client.post("/cart/items", json=item, headers=self.customer, name="POST /cart/items")
        with self.client.post(
            "/orders",
            json=checkout_data(),
            headers=self.customer,
            catch_response=True,
            name="POST /orders",
        ) as resp:
            if resp.status_code != 201:
                resp.failure(f"Checkout failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()
                return
            order = resp.json()
            self.state.order_id = order["id"]
            self.state.market_item_ids = [item["id"] for item in order["items"] if item["marketPrice"]]

    def move_to(self, status, **extra):
        with self.client.put(
            f"/admin/orders/{self.state.order_id}/status",
            json={"status": status, **extra},
            headers=self.admin,
            catch_response=True,
            name=f"PUT /admin/orders/{{id}}/status [{status}]",
        ) as resp:
            if resp.status_code == 200:
                self.state.current_status = status
            else:
                resp.failure(f"{status} failed: {extract_error_detail(resp)}")
                self.interrupt()


class OrderFulfillmentJourney(_PlacesOrder):
    """Place -> Confirm -> Finalize Market Prices -> Dispatch -> Deliver."""

    @task
    def place(self):
        self.place_order()

    @task
    def confirm(self):
        self.move_to("Confirmed")

    @task
    def finalize_market_prices(self):
        for item_id in self.state.market_item_ids:
            with self.client.put(
                f"/admin/orders/{self.state.order_id}/items/{item_id}/price",
                json={"price": 3.25},
                headers=self.admin,
                catch_response=True,
                name="PUT /admin/orders/{id}/items/{id}/price",
            ) as resp:
                if resp.status_code != 200:
                    resp.failure(f"Set price failed: {extract_error_detail(resp)}")

    @task
    def dispatch(self):
        self.move_to("Out_For_Delivery")

    @task
    def deliver(self):
        self.move_to("Delivered")

    @task
    def done(self):
        self.interrupt()


class CancelAndReopenJourney(_PlacesOrder):
    """Place -> Cancel with reopen -> Customer sees the cart again -> Re-checkout."""

    @task
    def place(self):
        self.place_order()

    @task
    def cancel_and_reopen(self):
        self.move_to("Cancelled", reopenAsCart=True)

    @task
    def view_reopened_cart(self):
        with self.client.get("/cart", headers=self.customer, catch_response=True, name="GET /cart") as resp:
            if resp.status_code != 200 or resp.json()["origin"] != "Admin_Drafted":
                resp.failure(f"Cart was not reopened: {extract_error_detail(resp)}")

    @task
    def checkout_again(self):
        with self.client.post(
            "/orders",
            json=checkout_data(),
            headers=self.customer,
            catch_response=True,
            name="POST /orders [reopened]",
        ) as resp:
            if resp.status_code != 201:
                resp.failure(f"Re-checkout failed: {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class DraftedCartJourney(SequentialTaskSet):
    """Staff draft a cart -> Customer checks it out."""

    def on_start(self):
        self.customer = customer_headers()
        self.admin = admin_headers()

    @task
    def draft(self):
        with self.client.post(
            "/admin/carts",
            json={"userId": self.customer["X-User-Id"], "items": draft_items()},
            headers=self.admin,
            catch_response=True,
            name="POST /admin/carts",
        ) as resp:
            if resp.status_code != 201:
                resp.failure(f"Draft failed: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def checkout(self):
        with self.client.post(
            "/orders",
            json=checkout_data(),
            headers=self.customer,
            catch_response=True,
            name="POST /orders [drafted]",
        ) as resp:
            if resp.status_code != 201:
                resp.failure(f"Checkout failed: {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class StaffUser(HttpUser):
    """Locust user simulating shop staff working the order queue."""

    wait_time = between(1.0, 3.0)
    tasks = {
        OrderFulfillmentJourney: 5,
        CancelAndReopenJourney: 2,
        DraftedCartJourney: 3,
    }
