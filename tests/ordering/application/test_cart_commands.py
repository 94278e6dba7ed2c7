"""Application tests for cart item commands and staff-drafted carts."""

import json

import pytest
from ordering.cart.cart import Cart, CartOrigin
from ordering.cart.drafting import DraftCartForCustomer
from ordering.cart.items import AddToCart, RemoveFromCart, UpdateCartQuantity
from ordering.cart.quote import quote_cart
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError

USER_ID = "cust-001"


@pytest.fixture(autouse=True)
def stocked(catalogue):
    catalogue.stock("rose-red", 2.1, name="Red Rose")
    catalogue.stock("rose-red", 2.6, variant_id="stem-60", name="Red Rose 60cm")
    catalogue.stock("peony", None, name="Peony (market)")
    return catalogue


def _add(product_id="rose-red", quantity=1, variant_id=None):
    return current_domain.process(
        AddToCart(user_id=USER_ID, product_id=product_id, variant_id=variant_id, quantity=quantity),
        asynchronous=False,
    )


def _cart():
    return current_domain.repository_for(Cart).for_user(USER_ID)


class TestAddToCart:
    def test_first_add_creates_the_cart(self):
        item_id = _add(quantity=10)
        cart = _cart()
        assert cart.origin == CartOrigin.SELF_SERVE.value
        assert str(cart.items[0].id) == item_id
        assert cart.items[0].quantity == 10

    def test_one_cart_per_user(self):
        _add("rose-red")
        _add("peony")
        carts = current_domain.repository_for(Cart)._dao.query.filter(user_id=USER_ID).all().items
        assert len(carts) == 1
        assert len(carts[0].items) == 2

    def test_repeat_add_merges_quantity(self):
        first = _add(quantity=10)
        second = _add(quantity=5)
        assert first == second
        assert _cart().items[0].quantity == 15

    def test_unknown_product_is_rejected(self):
        with pytest.raises(ObjectNotFoundError):
            _add("orchid")
        assert _cart() is None

    def test_unknown_variant_is_rejected(self):
        with pytest.raises(ObjectNotFoundError):
            _add("rose-red", variant_id="stem-90")

    @pytest.mark.parametrize("quantity", [0, 1000])
    def test_quantity_bounds(self, quantity):
        with pytest.raises(ValidationError):
            _add(quantity=quantity)


class TestUpdateAndRemove:
    def test_update_quantity(self):
        item_id = _add(quantity=2)
        current_domain.process(
            UpdateCartQuantity(user_id=USER_ID, item_id=item_id, new_quantity=24),
            asynchronous=False,
        )
        assert _cart().items[0].quantity == 24

    def test_zero_removes(self):
        item_id = _add(quantity=2)
        current_domain.process(
            UpdateCartQuantity(user_id=USER_ID, item_id=item_id, new_quantity=0),
            asynchronous=False,
        )
        assert _cart().is_empty

    def test_remove(self):
        item_id = _add(quantity=2)
        _add("peony")
        current_domain.process(RemoveFromCart(user_id=USER_ID, item_id=item_id), asynchronous=False)
        assert [str(i.product_id) for i in _cart().items] == ["peony"]

    def test_no_cart(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(RemoveFromCart(user_id=USER_ID, item_id="x"), asynchronous=False)


class TestDraftCartForCustomer:
    def _draft(self, items, user_id="cust-007"):
        return current_domain.process(
            DraftCartForCustomer(user_id=user_id, drafted_by="admin-1", items=json.dumps(items)),
            asynchronous=False,
        )

    def test_creates_drafted_cart(self):
        cart_id = self._draft(
            [
                {"product_id": "rose-red", "variant_id": "stem-60", "quantity": 50},
                {"product_id": "peony", "quantity": 10},
            ]
        )
        cart = current_domain.repository_for(Cart).get(cart_id)
        assert cart.user_id == "cust-007"
        assert cart.origin == CartOrigin.ADMIN_DRAFTED.value
        assert cart.drafted_by == "admin-1"
        assert len(cart.items) == 2

    def test_drafted_carts_are_listed(self):
        self._draft([{"product_id": "peony", "quantity": 1}], user_id="cust-007")
        self._draft([{"product_id": "peony", "quantity": 1}], user_id="cust-008")
        _add()
        drafted = current_domain.repository_for(Cart).drafted()
        assert {c.user_id for c in drafted} == {"cust-007", "cust-008"}

    def test_unknown_product(self):
        with pytest.raises(ObjectNotFoundError):
            self._draft([{"product_id": "orchid", "quantity": 1}])


class TestQuote:
    def test_quote_applies_multiplier_and_flags_market(self):
        _add(quantity=10)
        _add("peony", quantity=3)
        quote = quote_cart(_cart(), 1.5)

        rose = next(line for line in quote.lines if line.product_id == "rose-red")
        assert rose.price == 3.15
        assert rose.name == "Red Rose"
        assert quote.subtotal == 31.5
        assert quote.has_market_items

    def test_quote_reads_live_catalogue(self, stocked):
        _add(quantity=10)
        stocked.stock("rose-red", 3.0, name="Red Rose")
        assert quote_cart(_cart(), 1.0).subtotal == 30.0
