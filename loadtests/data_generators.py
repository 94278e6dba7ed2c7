"""Faker-based data generators for Locust load test scenarios.

Each generator produces camelCase payloads that pass the API's Pydantic
request schemas. Product ids match ``data/catalogue.json``, the seed the
development server loads into its in-memory catalogue.
"""

import random
import uuid

from faker import Faker

fake = Faker()

# Products with a fixed catalogue price, as (product_id, variant_id)
PRICED_PRODUCTS = [
    ("rose-red", None),
    ("rose-red", "stem-50"),
    ("rose-red", "stem-70"),
    ("tulip-white", None),
    ("hydrangea-blue", None),
    ("eucalyptus-silver", None),
]

MARKET_PRODUCTS = [("peony-coral", None), ("ranunculus", None)]


def unique_user_id() -> str:
    return f"cust-lt-{uuid.uuid4().hex[:8]}"


def valid_email() -> str:
    local = fake.user_name()[:20]
    domain = fake.free_email_domain()
    return f"{local}.{uuid.uuid4().hex[:4]}@{domain}"


def valid_phone() -> str:
    area = random.randint(200, 999)
    prefix = random.randint(200, 999)
    line = random.randint(1000, 9999)
    return f"+1-{area}-{prefix}-{line}"


def price_multiplier() -> str:
    """Wholesale customers mostly buy at list price or a small markup."""
    return random.choice(["1.0", "1.0", "1.0", "1.1", "1.25", "0.9"])


def customer_headers(user_id: str | None = None, multiplier: str | None = None) -> dict:
    """Headers the auth gateway attaches for an approved customer."""
    return {
        "X-User-Id": user_id or unique_user_id(),
        "X-User-Approved": "true",
        "X-Price-Multiplier": multiplier or price_multiplier(),
    }


def admin_headers() -> dict:
    return {"X-User-Id": "admin-lt", "X-User-Role": "ADMIN", "X-User-Approved": "true"}


def address_data(state: str | None = None) -> dict:
    """Generate an AddressInput payload."""
    return {
        "firstName": fake.first_name()[:100],
        "lastName": fake.last_name()[:100],
        "company": fake.company()[:255] if random.random() < 0.6 else None,
        "street1": fake.street_address()[:255],
        "city": fake.city()[:100],
        "state": state or random.choice(["CA", "CA", "CA", "NV", "OR", "AZ"]),
        "zip": fake.zipcode()[:20],
        "country": "US",
        "phone": valid_phone(),
    }


def cart_item_data(market_share: float = 0.2) -> dict:
    """Generate an AddToCartRequest payload, sometimes for a market-priced stem."""
    pool = MARKET_PRODUCTS if random.random() < market_share else PRICED_PRODUCTS
    product_id, variant_id = random.choice(pool)
    payload = {"productId": product_id, "quantity": random.choice([5, 10, 10, 25, 50])}
    if variant_id:
        payload["productVariantId"] = variant_id
    return payload


def draft_items(count: int = 3) -> list[dict]:
    return [cart_item_data() for _ in range(count)]


def checkout_data(address_id: str | None = None) -> dict:
    """Generate a CreateOrderRequest payload.

    Uses a saved address when ``address_id`` is given, otherwise a new one.
    """
    payload = {
        "email": valid_email(),
        "phone": valid_phone(),
        "notes": fake.sentence() if random.random() < 0.3 else None,
        "idempotencyKey": uuid.uuid4().hex,
    }
    if address_id:
        payload["deliveryAddressId"] = address_id
    else:
        payload["deliveryAddress"] = address_data()
        payload["saveDeliveryAddress"] = random.random() < 0.5
    return payload
