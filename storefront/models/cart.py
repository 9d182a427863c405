"""
Cart models
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from ..utils.money import payable_minor_units
from .base import BaseEntity

LineKey = Tuple[str, Optional[str]]


def normalize_special_request(value: Optional[str]) -> Optional[str]:
    """Blank requests count as no request"""
    if value is None:
        return None
    value = value.strip()
    return value or None


class CartItem(BaseModel):
    """One (menu item, special request) line"""
    menu_item_id: str
    name: str
    unit_price: Decimal = Field(..., ge=0)
    quantity: int = Field(..., ge=1)
    special_request: Optional[str] = None
    image_url: Optional[str] = None

    @field_validator("special_request")
    @classmethod
    def _normalize_request(cls, v):
        return normalize_special_request(v)

    @property
    def key(self) -> LineKey:
        return (self.menu_item_id, self.special_request)

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


class Cart(BaseEntity):
    """Document carts/{user_id}; the id is the owning user"""
    cart_items: List[CartItem] = Field(default_factory=list)
    updated_at: Optional[datetime] = None

    @property
    def is_empty(self) -> bool:
        return not self.cart_items

    @property
    def payable_amount_cents(self) -> int:
        return get_payable_amount(self)

    def find(self, key: LineKey) -> Optional[CartItem]:
        for item in self.cart_items:
            if item.key == key:
                return item
        return None


def get_payable_amount(cart: Cart) -> int:
    """Payable total in minor units, always recomputed from the lines"""
    return payable_minor_units((item.unit_price, item.quantity) for item in cart.cart_items)
