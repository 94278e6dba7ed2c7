"""Cart-to-order conversion.

Turns a buyer's cart into an order: every line is priced from the live
catalogue with the buyer's multiplier applied, the delivery and billing
addresses are resolved, an order number is allocated, and the cart is
emptied. When run from the PlaceOrder handler all of it commits in the
handler's unit of work, so a failure at any step leaves the cart as it was.
"""

import structlog
from protean.utils.globals import current_domain

from ordering.address.resolver import AddressResolver
from ordering.cart.cart import Cart
from ordering.cart.quote import quote_cart
from ordering.catalogue import get_catalogue
from ordering.numbering import get_sequence_source
from ordering.numbering.generator import OrderNumberGenerator
from ordering.order.order import Order
from ordering.pricing.engine import PricingEngine
from ordering.shared.errors import EmptyCart, Forbidden

logger = structlog.get_logger(__name__)


class CartToOrderConverter:
    def __init__(self, catalogue=None, engine=None, resolver=None, numbers=None):
        self.catalogue = catalogue or get_catalogue()
        self.engine = engine or PricingEngine.from_config()
        self.resolver = resolver or AddressResolver()
        self.numbers = numbers or OrderNumberGenerator(get_sequence_source())

    def convert(
        self,
        user,
        email,
        delivery_address_id=None,
        delivery_address=None,
        save_delivery_address=False,
        billing_address=None,
        phone=None,
        notes=None,
        checkout_key=None,
    ) -> Order:
        if not user.approved:
            raise Forbidden("Your account is not approved for purchases")
        self.engine.validate_multiplier(user.price_multiplier)

        order_repo = current_domain.repository_for(Order)
        if checkout_key:
            existing = order_repo.find_by_checkout_key(user.id, checkout_key)
            if existing is not None:
                logger.info(
                    "Checkout replayed, returning existing order",
                    order_id=str(existing.id),
                    order_number=existing.order_number,
                    checkout_key=checkout_key,
                )
                return existing

        cart_repo = current_domain.repository_for(Cart)
        cart = cart_repo.for_user(user.id)
        if cart is None or cart.is_empty:
            raise EmptyCart()

        quote = quote_cart(cart, user.price_multiplier, catalogue=self.catalogue, engine=self.engine)

        delivery = self.resolver.resolve_delivery_address(
            user,
            existing_id=delivery_address_id,
            new_address=delivery_address,
            save=save_delivery_address,
        )
        billing = self.resolver.resolve_billing_address(billing_address)

        order = Order.create(
            order_number=self.numbers.next(),
            user_id=user.id,
            lines=[
                {
                    "product_id": line.product_id,
                    "variant_id": line.variant_id,
                    "product_name": line.name,
                    "quantity": line.quantity,
                    "price": line.price,
                }
                for line in quote.lines
            ],
            delivery_address=delivery,
            billing_address=billing,
            email=email,
            phone=phone,
            notes=notes,
            checkout_key=checkout_key,
        )
        order_repo.add(order)

        cart.mark_converted(order.id)
        cart_repo.add(cart)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            order_number=order.order_number,
            user_id=str(user.id),
            total=order.total,
            item_count=len(order.items),
            has_market_items=quote.has_market_items,
        )
        return order
