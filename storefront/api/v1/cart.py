"""
Cart routes
The signed-in customer's cart
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends

from ...core.context import AppContext, get_context
from ...core.error_handler import create_success_response
from ...core.security import CurrentUser, get_current_user
from ...models.cart import Cart
from ...schemas.cart import CartItemAddRequest, CartItemRemoveRequest, CartItemUpdateRequest
from ...utils.money import from_minor_units

router = APIRouter()


def cart_view(cart: Optional[Cart]) -> Dict[str, Any]:
    """Cart lines plus the payable amount; an absent cart renders as empty"""
    if cart is None:
        return {"cart_items": [], "payable_amount_cents": 0, "payable_amount": "0.00"}
    data = cart.model_dump(mode="json", exclude={"id"})
    data["payable_amount_cents"] = cart.payable_amount_cents
    data["payable_amount"] = str(from_minor_units(cart.payable_amount_cents))
    return data


@router.get("")
def get_cart(user: CurrentUser = Depends(get_current_user), ctx: AppContext = Depends(get_context)):
    return create_success_response(cart_view(ctx.carts.get_cart(user.uid)))


@router.post("/items")
def add_item(req: CartItemAddRequest, user: CurrentUser = Depends(get_current_user),
             ctx: AppContext = Depends(get_context)):
    cart = ctx.carts.add_item(user.uid, req.menu_item_id, req.quantity, req.special_request)
    return create_success_response(cart_view(cart), "Item added to cart")


@router.put("/items")
def update_item(req: CartItemUpdateRequest, user: CurrentUser = Depends(get_current_user),
                ctx: AppContext = Depends(get_context)):
    cart = ctx.carts.update_item(
        user.uid,
        req.menu_item_id,
        req.original_special_request,
        special_request=req.special_request,
        quantity=req.quantity,
    )
    return create_success_response(cart_view(cart), "Cart updated")


@router.post("/items/remove")
def remove_item(req: CartItemRemoveRequest, user: CurrentUser = Depends(get_current_user),
                ctx: AppContext = Depends(get_context)):
    cart = ctx.carts.remove_item(user.uid, req.menu_item_id, req.special_request)
    return create_success_response(cart_view(cart), "Item removed from cart")
