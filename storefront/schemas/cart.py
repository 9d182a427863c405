"""
Cart request schemas
"""

from typing import Optional

from pydantic import BaseModel, Field


class CartItemAddRequest(BaseModel):
    """Add a menu item to the cart"""
    menu_item_id: str = Field(..., description="Menu item id")
    quantity: int = Field(1, description="Quantity to add")
    special_request: Optional[str] = Field(None, description="Free-text request, part of the line identity")


class CartItemUpdateRequest(BaseModel):
    """Edit a cart line, located by the identity it had when the edit was opened"""
    menu_item_id: str = Field(..., description="Menu item id")
    original_special_request: Optional[str] = Field(None, description="Special request when the edit was opened")
    special_request: Optional[str] = Field(None, description="New special request; omit to keep, empty to clear")
    quantity: Optional[int] = Field(None, description="New quantity")


class CartItemRemoveRequest(BaseModel):
    menu_item_id: str
    special_request: Optional[str] = None
