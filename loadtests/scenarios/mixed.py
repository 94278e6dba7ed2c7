"""Mixed workload scenario.

Combines customer and staff journeys with weights that model a normal
trading day. This is the recommended scenario for load baseline testing.
"""

from locust import HttpUser, between

from loadtests.scenarios.checkout import AddressBookJourney, CartToCheckoutJourney
from loadtests.scenarios.fulfillment import (
    CancelAndReopenJourney,
    DraftedCartJourney,
    OrderFulfillmentJourney,
)


class MixedWorkloadUser(HttpUser):
    """Realistic mixed workload.

    Customers (65%):
    - Cart to checkout: most common
    - Address book: occasional

    Staff (35%):
    - Fulfillment with market price finalization
    - Drafted carts for phone orders
    - Cancel and reopen: least frequent
    """

    wait_time = between(0.5, 3.0)
    tasks = {
        CartToCheckoutJourney: 10,
        AddressBookJourney: 3,
        OrderFulfillmentJourney: 4,
        DraftedCartJourney: 2,
        CancelAndReopenJourney: 1,
    }
