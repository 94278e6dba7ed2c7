"""Tests for order tax.

Orders are taxed at the California rate whatever state they are delivered
to: the business only operates in California. These tests pin that rule so
that generalizing it is a deliberate change.
"""

import pytest
from ordering.tax.calculator import CA_TAX_LABEL, compute_order_tax, compute_tax

from tests.ordering.builders import make_address, make_order


def _order_with_subtotal_100(state):
    return make_order(
        lines=[{"product_id": "peony-pink", "quantity": 4, "price": 25.0}],
        address=make_address(persist=False, state=state),
    )


class TestComputeOrderTax:
    def test_california_delivery(self):
        line = compute_order_tax(_order_with_subtotal_100("CA"))
        assert line.tax == 7.25
        assert line.is_california is True
        assert line.tax_label == "CA 7.25%"
        assert line.subtotal == 100.0

    def test_out_of_state_delivery_is_still_taxed_as_california(self):
        ny = compute_order_tax(_order_with_subtotal_100("NY"))
        ca = compute_order_tax(_order_with_subtotal_100("CA"))
        assert ny == ca
        assert ny.is_california is True
        assert ny.tax_label == CA_TAX_LABEL

    def test_market_priced_lines_are_not_taxed_until_priced(self):
        order = make_order(
            lines=[
                {"product_id": "rose-red", "quantity": 2, "price": 50.0},
                {"product_id": "ranunculus", "quantity": 3, "price": None},
            ]
        )
        line = compute_order_tax(order)
        assert line.subtotal == 100.0
        assert line.tax == 7.25


class TestComputeTax:
    @pytest.mark.parametrize(
        "subtotal, expected",
        [(0, 0.0), (10.0, 0.73), (19.99, 1.45), (1234.56, 89.51)],
    )
    def test_rounds_half_up_to_cents(self, subtotal, expected):
        assert compute_tax(subtotal).tax == expected

    def test_rate(self):
        assert compute_tax(1).rate == 0.0725
