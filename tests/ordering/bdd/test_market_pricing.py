"""BDD tests for finalizing market prices on placed orders."""

from ordering.shared.errors import Conflict
from protean.exceptions import ValidationError
from pytest_bdd import parsers, scenarios, then, when

scenarios("features/market_pricing.feature")


@when(parsers.cfparse("staff set the market line price to {price:g}"))
def set_market_price(order, price, error):
    market_line = next(item for item in order.items if item.product_id == "ranunculus")
    try:
        order.set_item_price(market_line.id, price)
    except (Conflict, ValidationError) as exc:
        error["exc"] = exc


@then("the order has market-priced items")
def has_market_items(order):
    assert order.has_market_items


@then("the order has no market-priced items")
def has_no_market_items(order):
    assert not order.has_market_items
