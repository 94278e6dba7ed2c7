"""Cart item management — commands and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from ordering.cart.cart import MAX_ITEM_QUANTITY, Cart
from ordering.catalogue import get_catalogue
from ordering.domain import ordering


@ordering.command(part_of="Cart")
class AddToCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    variant_id = Identifier()
    quantity = Integer(required=True, min_value=1, max_value=MAX_ITEM_QUANTITY)


@ordering.command(part_of="Cart")
class UpdateCartQuantity:
    """Set a line's quantity; zero removes the line."""

    user_id = Identifier(required=True)
    item_id = Identifier(required=True)
    new_quantity = Integer(required=True, min_value=0, max_value=MAX_ITEM_QUANTITY)


@ordering.command(part_of="Cart")
class RemoveFromCart:
    user_id = Identifier(required=True)
    item_id = Identifier(required=True)


def _cart_of(user_id):
    cart = current_domain.repository_for(Cart).for_user(user_id)
    if cart is None:
        raise ObjectNotFoundError(f"No cart for user `{user_id}`")
    return cart


@ordering.command_handler(part_of=Cart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        # Unknown products are rejected before they reach the cart
        get_catalogue().lookup(command.product_id, command.variant_id)

        repo = current_domain.repository_for(Cart)
        cart = repo.get_or_create(command.user_id)
        item = cart.add_item(
            product_id=command.product_id,
            variant_id=command.variant_id,
            quantity=command.quantity,
        )
        repo.add(cart)
        return str(item.id)

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        repo = current_domain.repository_for(Cart)
        cart = _cart_of(command.user_id)
        cart.update_item_quantity(
            item_id=command.item_id,
            new_quantity=command.new_quantity,
        )
        repo.add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = _cart_of(command.user_id)
        cart.remove_item(item_id=command.item_id)
        repo.add(cart)
