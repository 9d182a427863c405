"""
Cart service
Owns each user's pending line items in the carts/{user_id} document

Rules:
- Line identity is (menu_item_id, special_request)
- Every mutation rewrites the whole cart_items array (last write wins)
- An empty cart is deleted, so "cart exists" means "cart non-empty"
"""

from typing import AsyncIterator, Optional

from ..core.database import DocumentStore, utcnow
from ..core.exceptions import NotFoundError, UnauthenticatedError, ValidationError
from ..models.cart import Cart, CartItem, LineKey, normalize_special_request
from .menu_service import MenuService

CARTS = "carts"


def _require_user(user_id: Optional[str]) -> str:
    if not user_id:
        raise UnauthenticatedError()
    return user_id


def _line_key(menu_item_id: str, special_request: Optional[str]) -> LineKey:
    return (menu_item_id, normalize_special_request(special_request))


class CartService:

    def __init__(self, store: DocumentStore, menu_service: MenuService):
        self.db = store
        self.menu = menu_service

    def get_cart(self, user_id: Optional[str]) -> Optional[Cart]:
        """The user's cart, or None when there is no cart"""
        user_id = _require_user(user_id)
        return Cart.from_document(self.db.get(CARTS, user_id))

    def add_item(self, user_id: Optional[str], menu_item_id: str, quantity: int = 1,
                 special_request: Optional[str] = None) -> Cart:
        """
        Add a menu item to the cart

        A line with the same menu item and special request gets its quantity
        increased; otherwise a new line is appended.

        Raises:
            UnauthenticatedError: no user
            ValidationError: quantity below 1
            NotFoundError: unknown menu item
        """
        user_id = _require_user(user_id)
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1", details={"quantity": quantity})

        menu_item = self.menu.get_item(menu_item_id)
        if not menu_item.available:
            raise ValidationError("Menu item is not available", details={"menu_item_id": menu_item_id})

        cart = self.get_cart(user_id) or Cart(id=user_id)
        key = _line_key(menu_item_id, special_request)

        existing = cart.find(key)
        if existing is not None:
            existing.quantity += quantity
        else:
            cart.cart_items.append(CartItem(
                menu_item_id=menu_item_id,
                name=menu_item.name,
                unit_price=menu_item.price,
                quantity=quantity,
                special_request=key[1],
                image_url=menu_item.image_url,
            ))

        self._save(cart)
        self.db.log("cart_add", user_id=user_id, actor_id=user_id,
                    detail={"menu_item_id": menu_item_id, "quantity": quantity,
                            "special_request": key[1]})
        return cart

    def update_item(self, user_id: Optional[str], menu_item_id: str,
                    original_special_request: Optional[str],
                    special_request: Optional[str] = None,
                    quantity: Optional[int] = None) -> Cart:
        """
        Edit one line, located by the identity it had when the edit was opened

        special_request=None keeps the current request; pass "" to clear it.
        If the edited line now matches another line, the two are merged.
        """
        user_id = _require_user(user_id)
        if quantity is not None and quantity < 1:
            raise ValidationError("Quantity must be at least 1", details={"quantity": quantity})

        cart = self.get_cart(user_id)
        key = _line_key(menu_item_id, original_special_request)
        line = cart.find(key) if cart else None
        if line is None:
            raise NotFoundError("Cart line not found",
                                details={"menu_item_id": menu_item_id,
                                         "special_request": key[1]})

        if special_request is not None:
            line.special_request = normalize_special_request(special_request)
        if quantity is not None:
            line.quantity = quantity

        duplicate = next((other for other in cart.cart_items
                          if other is not line and other.key == line.key), None)
        if duplicate is not None:
            duplicate.quantity += line.quantity
            cart.cart_items = [item for item in cart.cart_items if item is not line]

        self._save(cart)
        self.db.log("cart_update", user_id=user_id, actor_id=user_id,
                    detail={"menu_item_id": menu_item_id, "quantity": line.quantity,
                            "special_request": line.special_request})
        return cart

    def remove_item(self, user_id: Optional[str], menu_item_id: str,
                    special_request: Optional[str] = None) -> Optional[Cart]:
        """Drop one line; returns None when that emptied (and deleted) the cart"""
        user_id = _require_user(user_id)
        cart = self.get_cart(user_id)
        key = _line_key(menu_item_id, special_request)
        if cart is None or cart.find(key) is None:
            raise NotFoundError("Cart line not found",
                                details={"menu_item_id": menu_item_id, "special_request": key[1]})

        cart.cart_items = [item for item in cart.cart_items if item.key != key]
        self.db.log("cart_remove", user_id=user_id, actor_id=user_id,
                    detail={"menu_item_id": menu_item_id, "special_request": key[1]})

        if cart.is_empty:
            self.db.delete(CARTS, user_id)
            return None
        self._save(cart)
        return cart

    def clear_cart(self, user_id: str) -> bool:
        return self.db.delete(CARTS, user_id)

    async def watch_cart(self, user_id: Optional[str]) -> AsyncIterator[Optional[Cart]]:
        """Live cart snapshots for every session of the user"""
        user_id = _require_user(user_id)
        async for doc in self.db.watch_document(CARTS, user_id):
            yield Cart.from_document({**doc, "id": user_id}) if doc is not None else None

    def _save(self, cart: Cart):
        cart.updated_at = utcnow()
        self.db.set(CARTS, cart.id, cart.to_document())
