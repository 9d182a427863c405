"""
Cart service tests
"""

import pytest

from ..core.exceptions import NotFoundError, UnauthenticatedError, ValidationError
from ..services.cart_service import CARTS
from .conftest import CUSTOMER_ID, OTHER_CUSTOMER_ID


class TestCartService:
    """Cart line identity, quantities and empty-cart deletion"""

    def test_add_same_line_increments_quantity(self, context, menu_items):
        beef = menu_items["beef"]
        context.carts.add_item(CUSTOMER_ID, beef.id, 1)
        cart = context.carts.add_item(CUSTOMER_ID, beef.id, 2)

        assert len(cart.cart_items) == 1
        assert cart.cart_items[0].quantity == 3
        assert cart.cart_items[0].name == "Beef Burger"

    def test_special_request_makes_a_separate_line(self, context, menu_items):
        beef = menu_items["beef"]
        context.carts.add_item(CUSTOMER_ID, beef.id, 1)
        cart = context.carts.add_item(CUSTOMER_ID, beef.id, 1, special_request="no onions")

        assert len(cart.cart_items) == 2
        assert {item.special_request for item in cart.cart_items} == {None, "no onions"}

    def test_blank_special_request_matches_no_request(self, context, menu_items):
        beef = menu_items["beef"]
        context.carts.add_item(CUSTOMER_ID, beef.id, 1)
        cart = context.carts.add_item(CUSTOMER_ID, beef.id, 1, special_request="   ")

        assert len(cart.cart_items) == 1
        assert cart.cart_items[0].quantity == 2

    def test_add_without_user_writes_nothing(self, context, store, menu_items):
        with pytest.raises(UnauthenticatedError):
            context.carts.add_item(None, menu_items["beef"].id, 1)
        assert store.query(CARTS) == []

    def test_quantity_below_one_rejected(self, context, menu_items):
        with pytest.raises(ValidationError):
            context.carts.add_item(CUSTOMER_ID, menu_items["beef"].id, 0)

    def test_unavailable_item_rejected(self, context, menu_items):
        with pytest.raises(ValidationError):
            context.carts.add_item(CUSTOMER_ID, menu_items["fish"].id, 1)

    def test_unknown_menu_item(self, context):
        with pytest.raises(NotFoundError):
            context.carts.add_item(CUSTOMER_ID, "missing", 1)

    def test_update_by_original_identity(self, context, menu_items):
        beef = menu_items["beef"]
        context.carts.add_item(CUSTOMER_ID, beef.id, 1, special_request="extra cheese")

        cart = context.carts.update_item(CUSTOMER_ID, beef.id, "extra cheese",
                                         special_request="no cheese", quantity=4)

        assert len(cart.cart_items) == 1
        assert cart.cart_items[0].special_request == "no cheese"
        assert cart.cart_items[0].quantity == 4

    def test_update_into_existing_line_merges(self, context, menu_items):
        beef = menu_items["beef"]
        context.carts.add_item(CUSTOMER_ID, beef.id, 2)
        context.carts.add_item(CUSTOMER_ID, beef.id, 1, special_request="spicy")

        cart = context.carts.update_item(CUSTOMER_ID, beef.id, "spicy", special_request="")

        assert len(cart.cart_items) == 1
        assert cart.cart_items[0].special_request is None
        assert cart.cart_items[0].quantity == 3

    def test_update_missing_line(self, context, menu_items):
        context.carts.add_item(CUSTOMER_ID, menu_items["beef"].id, 1)
        with pytest.raises(NotFoundError):
            context.carts.update_item(CUSTOMER_ID, menu_items["beef"].id, "gone", quantity=2)

    def test_removing_last_line_deletes_cart(self, context, store, menu_items):
        beef = menu_items["beef"]
        context.carts.add_item(CUSTOMER_ID, beef.id, 1)

        assert context.carts.remove_item(CUSTOMER_ID, beef.id) is None
        assert store.get(CARTS, CUSTOMER_ID) is None
        assert context.carts.get_cart(CUSTOMER_ID) is None

    def test_remove_keeps_other_lines(self, filled_cart, context, menu_items):
        cart = context.carts.remove_item(CUSTOMER_ID, menu_items["beef"].id)
        assert [item.name for item in cart.cart_items] == ["Chicken Burger"]
        assert cart.payable_amount_cents == 400

    def test_carts_are_per_user(self, filled_cart, context):
        assert context.carts.get_cart(OTHER_CUSTOMER_ID) is None
        assert context.carts.get_cart(CUSTOMER_ID).payable_amount_cents == 2000

    def test_mutations_are_logged(self, filled_cart, store):
        actions = [log["action"] for log in store.get_logs(action="cart_add")]
        assert len(actions) == 2
