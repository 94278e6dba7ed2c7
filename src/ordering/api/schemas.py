"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands. The wire format is camelCase; Python code uses
the snake_case field names.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ordering.address.address import POSTAL_FIELDS
from ordering.cart.cart import MAX_ITEM_QUANTITY
from ordering.tax.calculator import compute_order_tax


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Addresses
# ---------------------------------------------------------------------------
class AddressInput(CamelModel):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    company: str | None = Field(default=None, max_length=255)
    street1: str = Field(min_length=1, max_length=255)
    street2: str | None = Field(default=None, max_length=255)
    city: str = Field(min_length=1, max_length=100)
    state: str = Field(min_length=1, max_length=100)
    zip: str = Field(min_length=1, max_length=20)
    country: str = Field(default="US", max_length=100)
    email: str | None = Field(default=None, max_length=254)
    phone: str | None = Field(default=None, max_length=30)

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "firstName": "Rosa",
                    "lastName": "Marquez",
                    "street1": "1200 Flower Market Ln",
                    "city": "Los Angeles",
                    "state": "CA",
                    "zip": "90014",
                }
            ]
        },
    )


class CreateAddressRequest(AddressInput):
    is_default: bool = False


class UpdateAddressRequest(CamelModel):
    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    company: str | None = Field(default=None, max_length=255)
    street1: str | None = Field(default=None, min_length=1, max_length=255)
    street2: str | None = Field(default=None, max_length=255)
    city: str | None = Field(default=None, min_length=1, max_length=100)
    state: str | None = Field(default=None, min_length=1, max_length=100)
    zip: str | None = Field(default=None, min_length=1, max_length=20)
    country: str | None = Field(default=None, max_length=100)
    email: str | None = Field(default=None, max_length=254)
    phone: str | None = Field(default=None, max_length=30)
    is_default: bool | None = None


class AddressSchema(CamelModel):
    first_name: str
    last_name: str
    company: str | None = None
    street1: str
    street2: str | None = None
    city: str
    state: str
    zip: str
    country: str
    email: str | None = None
    phone: str | None = None

    @classmethod
    def from_snapshot(cls, snapshot):
        if snapshot is None:
            return None
        return cls(**{name: getattr(snapshot, name) for name in POSTAL_FIELDS})


class AddressResponse(AddressSchema):
    id: str
    is_default: bool
    created_at: datetime | None = None

    @classmethod
    def from_address(cls, address):
        return cls(
            id=str(address.id),
            is_default=bool(address.is_default),
            created_at=address.created_at,
            **address.to_dict(),
        )


class DeleteAddressResponse(CamelModel):
    status: str  # "deleted" or "unlinked"


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class CreateOrderRequest(CamelModel):
    delivery_address_id: str | None = None
    delivery_address: AddressInput | None = None
    save_delivery_address: bool = False
    billing_address: AddressInput | None = None
    email: str = Field(min_length=3, max_length=254)
    phone: str | None = Field(default=None, max_length=30)
    notes: str | None = None
    idempotency_key: str | None = Field(default=None, max_length=255)


class OrderItemResponse(CamelModel):
    id: str
    product_id: str
    product_variant_id: str | None = None
    product_name: str | None = None
    quantity: int
    price: float | None = None
    market_price: bool


class TaxResponse(CamelModel):
    tax: float
    is_california: bool
    tax_label: str
    rate: float
    subtotal: float


class OrderResponse(CamelModel):
    id: str
    order_number: str
    user_id: str
    status: str
    total: float
    email: str
    phone: str | None = None
    notes: str | None = None
    items: list[OrderItemResponse]
    shipping_address: AddressSchema | None = None
    billing_address: AddressSchema | None = None
    tax: TaxResponse
    created_at: datetime | None = None

    @classmethod
    def from_order(cls, order):
        tax = compute_order_tax(order)
        return cls(
            id=str(order.id),
            order_number=order.order_number,
            user_id=str(order.user_id),
            status=order.status,
            total=order.total,
            email=order.email,
            phone=order.phone,
            notes=order.notes,
            items=[
                OrderItemResponse(
                    id=str(item.id),
                    product_id=str(item.product_id),
                    product_variant_id=str(item.variant_id) if item.variant_id else None,
                    product_name=item.product_name,
                    quantity=item.quantity,
                    price=item.price,
                    market_price=item.price is None,
                )
                for item in order.items
            ],
            shipping_address=AddressSchema.from_snapshot(order.delivery_address),
            billing_address=AddressSchema.from_snapshot(order.billing_address),
            tax=TaxResponse(
                tax=tax.tax,
                is_california=tax.is_california,
                tax_label=tax.tax_label,
                rate=tax.rate,
                subtotal=tax.subtotal,
            ),
            created_at=order.created_at,
        )


class UpdateOrderStatusRequest(CamelModel):
    status: str
    reopen_as_cart: bool = False

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={"examples": [{"status": "Cancelled", "reopenAsCart": True}]},
    )


class SetItemPriceRequest(CamelModel):
    price: float = Field(ge=0)


class ItemPriceResponse(CamelModel):
    order_id: str
    item_id: str
    price: float | None = None
    order_total: float


# ---------------------------------------------------------------------------
# Carts
# ---------------------------------------------------------------------------
class CartItemInput(CamelModel):
    product_id: str
    product_variant_id: str | None = None
    quantity: int = Field(default=1, ge=1, le=MAX_ITEM_QUANTITY)


class AddToCartRequest(CartItemInput):
    pass


class UpdateCartItemRequest(CamelModel):
    quantity: int = Field(ge=0, le=MAX_ITEM_QUANTITY)


class DraftCartRequest(CamelModel):
    user_id: str
    items: list[CartItemInput] = Field(min_length=1)


class DraftedCartItemResponse(CamelModel):
    id: str
    product_id: str
    product_variant_id: str | None = None
    quantity: int


class DraftedCartResponse(CamelModel):
    """A staff-prepared cart waiting for the customer to check it out."""

    id: str
    user_id: str
    drafted_by: str | None = None
    items: list[DraftedCartItemResponse]
    updated_at: datetime | None = None

    @classmethod
    def from_cart(cls, cart):
        return cls(
            id=str(cart.id),
            user_id=str(cart.user_id),
            drafted_by=str(cart.drafted_by) if cart.drafted_by else None,
            items=[
                DraftedCartItemResponse(
                    id=str(item.id),
                    product_id=str(item.product_id),
                    product_variant_id=str(item.variant_id) if item.variant_id else None,
                    quantity=item.quantity,
                )
                for item in cart.items
            ],
            updated_at=cart.updated_at,
        )


class CartIdResponse(CamelModel):
    cart_id: str


class CartItemIdResponse(CamelModel):
    item_id: str


class CartLineResponse(CamelModel):
    id: str
    product_id: str
    product_variant_id: str | None = None
    name: str
    quantity: int
    price: float | None = None
    market_price: bool


class CartResponse(CamelModel):
    id: str | None = None
    origin: str | None = None
    items: list[CartLineResponse] = []
    subtotal: float = 0.0
    has_market_items: bool = False

    @classmethod
    def from_quote(cls, cart, quote):
        return cls(
            id=str(cart.id),
            origin=cart.origin,
            items=[
                CartLineResponse(
                    id=line.item_id,
                    product_id=line.product_id,
                    product_variant_id=line.variant_id,
                    name=line.name,
                    quantity=line.quantity,
                    price=line.price,
                    market_price=line.is_market_price,
                )
                for line in quote.lines
            ],
            subtotal=quote.subtotal,
            has_market_items=quote.has_market_items,
        )


class StatusResponse(CamelModel):
    status: str = "ok"
