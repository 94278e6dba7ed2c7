"""FastAPI routes for the Ordering domain — orders, carts and addresses."""

import json

from fastapi import APIRouter, Depends
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ordering.address.address import CLEARABLE_FIELDS
from ordering.address.management import (
    AddAddress,
    DeleteAddress,
    SetDefaultAddress,
    UpdateAddress,
)
from ordering.address.resolver import AddressResolver
from ordering.api.dependencies import get_admin_user, get_approved_user, get_current_user
from ordering.api.schemas import (
    AddressResponse,
    AddToCartRequest,
    CartIdResponse,
    CartItemIdResponse,
    CartResponse,
    CreateAddressRequest,
    CreateOrderRequest,
    DeleteAddressResponse,
    DraftCartRequest,
    DraftedCartResponse,
    ItemPriceResponse,
    OrderResponse,
    SetItemPriceRequest,
    StatusResponse,
    UpdateAddressRequest,
    UpdateCartItemRequest,
    UpdateOrderStatusRequest,
)
from ordering.cart.cart import Cart
from ordering.cart.drafting import DraftCartForCustomer
from ordering.cart.items import AddToCart, RemoveFromCart, UpdateCartQuantity
from ordering.cart.quote import quote_cart
from ordering.checkout.placement import PlaceOrder
from ordering.order.item_pricing import SetOrderItemPrice
from ordering.order.lifecycle import ChangeOrderStatus
from ordering.order.order import Order
from ordering.shared.current_user import CurrentUser

# ---------------------------------------------------------------------------
# Order Router (customers)
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderResponse)
async def create_order(
    body: CreateOrderRequest,
    user: CurrentUser = Depends(get_approved_user),
) -> OrderResponse:
    command = PlaceOrder(
        user_id=user.id,
        user_approved=user.approved,
        price_multiplier=user.price_multiplier,
        email=body.email,
        phone=body.phone,
        notes=body.notes,
        delivery_address_id=body.delivery_address_id,
        delivery_address=json.dumps(body.delivery_address.model_dump()) if body.delivery_address else None,
        save_delivery_address=body.save_delivery_address,
        billing_address=json.dumps(body.billing_address.model_dump()) if body.billing_address else None,
        idempotency_key=body.idempotency_key,
    )
    order_id = current_domain.process(command, asynchronous=False)
    order = current_domain.repository_for(Order).get(order_id)
    return OrderResponse.from_order(order)


@order_router.get("", response_model=list[OrderResponse])
async def list_orders(user: CurrentUser = Depends(get_approved_user)) -> list[OrderResponse]:
    orders = current_domain.repository_for(Order).for_user(user.id)
    return [OrderResponse.from_order(order) for order in orders]


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, user: CurrentUser = Depends(get_approved_user)) -> OrderResponse:
    order = current_domain.repository_for(Order).find_for_user(order_id, user.id)
    if order is None:
        raise ObjectNotFoundError(f"Order `{order_id}` not found")
    return OrderResponse.from_order(order)


# ---------------------------------------------------------------------------
# Admin Router
# ---------------------------------------------------------------------------
admin_router = APIRouter(prefix="/admin", tags=["admin"])


@admin_router.get("/orders", response_model=list[OrderResponse])
async def list_all_orders(
    status: str | None = None,
    admin: CurrentUser = Depends(get_admin_user),
) -> list[OrderResponse]:
    orders = current_domain.repository_for(Order).list_all(status=status)
    return [OrderResponse.from_order(order) for order in orders]


@admin_router.put("/orders/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str,
    body: UpdateOrderStatusRequest,
    admin: CurrentUser = Depends(get_admin_user),
) -> OrderResponse:
    command = ChangeOrderStatus(
        order_id=order_id,
        status=body.status,
        reopen_as_cart=body.reopen_as_cart,
        changed_by=admin.id,
    )
    current_domain.process(command, asynchronous=False)
    order = current_domain.repository_for(Order).get(order_id)
    return OrderResponse.from_order(order)


@admin_router.put("/orders/{order_id}/items/{item_id}/price", response_model=ItemPriceResponse)
async def set_order_item_price(
    order_id: str,
    item_id: str,
    body: SetItemPriceRequest,
    admin: CurrentUser = Depends(get_admin_user),
) -> ItemPriceResponse:
    command = SetOrderItemPrice(order_id=order_id, item_id=item_id, price=body.price)
    order_total = current_domain.process(command, asynchronous=False)
    item = current_domain.repository_for(Order).get(order_id).item(item_id)
    return ItemPriceResponse(order_id=order_id, item_id=item_id, price=item.price, order_total=order_total)


@admin_router.post("/carts", status_code=201, response_model=CartIdResponse)
async def draft_cart(
    body: DraftCartRequest,
    admin: CurrentUser = Depends(get_admin_user),
) -> CartIdResponse:
    command = DraftCartForCustomer(
        user_id=body.user_id,
        drafted_by=admin.id,
        items=json.dumps(
            [
                {
                    "product_id": item.product_id,
                    "variant_id": item.product_variant_id,
                    "quantity": item.quantity,
                }
                for item in body.items
            ]
        ),
    )
    cart_id = current_domain.process(command, asynchronous=False)
    return CartIdResponse(cart_id=cart_id)


@admin_router.get("/carts", response_model=list[DraftedCartResponse])
async def list_drafted_carts(admin: CurrentUser = Depends(get_admin_user)) -> list[DraftedCartResponse]:
    return [DraftedCartResponse.from_cart(cart) for cart in current_domain.repository_for(Cart).drafted()]


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
async def get_cart(user: CurrentUser = Depends(get_current_user)) -> CartResponse:
    cart = current_domain.repository_for(Cart).for_user(user.id)
    if cart is None:
        return CartResponse()
    return CartResponse.from_quote(cart, quote_cart(cart, user.price_multiplier))


@cart_router.post("/items", status_code=201, response_model=CartItemIdResponse)
async def add_cart_item(
    body: AddToCartRequest,
    user: CurrentUser = Depends(get_current_user),
) -> CartItemIdResponse:
    command = AddToCart(
        user_id=user.id,
        product_id=body.product_id,
        variant_id=body.product_variant_id,
        quantity=body.quantity,
    )
    item_id = current_domain.process(command, asynchronous=False)
    return CartItemIdResponse(item_id=item_id)


@cart_router.put("/items/{item_id}", response_model=StatusResponse)
async def update_cart_item(
    item_id: str,
    body: UpdateCartItemRequest,
    user: CurrentUser = Depends(get_current_user),
) -> StatusResponse:
    command = UpdateCartQuantity(user_id=user.id, item_id=item_id, new_quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.delete("/items/{item_id}", response_model=StatusResponse)
async def remove_cart_item(item_id: str, user: CurrentUser = Depends(get_current_user)) -> StatusResponse:
    current_domain.process(RemoveFromCart(user_id=user.id, item_id=item_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Address Router
# ---------------------------------------------------------------------------
address_router = APIRouter(prefix="/addresses", tags=["addresses"])


@address_router.get("", response_model=list[AddressResponse])
async def list_addresses(user: CurrentUser = Depends(get_current_user)) -> list[AddressResponse]:
    return [AddressResponse.from_address(address) for address in AddressResolver().addresses_for(user)]


@address_router.post("", status_code=201, response_model=AddressResponse)
async def create_address(
    body: CreateAddressRequest,
    user: CurrentUser = Depends(get_current_user),
) -> AddressResponse:
    command = AddAddress(user_id=user.id, **body.model_dump())
    address_id = current_domain.process(command, asynchronous=False)
    return AddressResponse.from_address(AddressResolver().get_owned(address_id, user))


@address_router.patch("/{address_id}", response_model=AddressResponse)
async def update_address(
    address_id: str,
    body: UpdateAddressRequest,
    user: CurrentUser = Depends(get_current_user),
) -> AddressResponse:
    sent = body.model_dump(exclude_unset=True)
    cleared = [field for field, value in sent.items() if value is None and field in CLEARABLE_FIELDS]
    command = UpdateAddress(
        user_id=user.id,
        address_id=address_id,
        clear_fields=json.dumps(cleared) if cleared else None,
        **{field: value for field, value in sent.items() if value is not None},
    )
    current_domain.process(command, asynchronous=False)
    return AddressResponse.from_address(AddressResolver().get_owned(address_id, user))


@address_router.delete("/{address_id}", response_model=DeleteAddressResponse)
async def delete_address(address_id: str, user: CurrentUser = Depends(get_current_user)) -> DeleteAddressResponse:
    result = current_domain.process(DeleteAddress(user_id=user.id, address_id=address_id), asynchronous=False)
    return DeleteAddressResponse(status=result)


@address_router.put("/{address_id}/default", response_model=AddressResponse)
async def set_default_address(address_id: str, user: CurrentUser = Depends(get_current_user)) -> AddressResponse:
    current_domain.process(SetDefaultAddress(user_id=user.id, address_id=address_id), asynchronous=False)
    return AddressResponse.from_address(AddressResolver().get_owned(address_id, user))
