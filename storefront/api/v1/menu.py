"""
Menu routes
Public reads; writes need an admin token
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...core.context import AppContext, get_context
from ...core.error_handler import create_success_response
from ...core.security import CurrentUser, require_admin
from ...schemas.menu import MenuItemCreateRequest, MenuItemUpdateRequest

router = APIRouter()


@router.get("")
def list_menu(available_only: bool = Query(False), category: Optional[str] = Query(None),
              ctx: AppContext = Depends(get_context)):
    items = ctx.menu.list_items(available_only=available_only, category=category)
    return create_success_response([item.model_dump(mode="json") for item in items])


@router.get("/{item_id}")
def get_menu_item(item_id: str, ctx: AppContext = Depends(get_context)):
    return create_success_response(ctx.menu.get_item(item_id).model_dump(mode="json"))


@router.get("/{item_id}/feedback")
def list_item_feedback(item_id: str, ctx: AppContext = Depends(get_context)):
    """Visible feedback for the item, customer names masked"""
    return create_success_response(ctx.feedback.list_for_item(item_id))


@router.post("")
def create_menu_item(req: MenuItemCreateRequest, user: CurrentUser = Depends(require_admin),
                     ctx: AppContext = Depends(get_context)):
    item = ctx.menu.create_item(req.model_dump(), user.uid)
    return create_success_response(item.model_dump(mode="json"), "Menu item created")


@router.put("/{item_id}")
def update_menu_item(item_id: str, req: MenuItemUpdateRequest, user: CurrentUser = Depends(require_admin),
                     ctx: AppContext = Depends(get_context)):
    item = ctx.menu.update_item(item_id, req.model_dump(exclude_unset=True), user.uid)
    return create_success_response(item.model_dump(mode="json"), "Menu item updated")


@router.delete("/{item_id}")
def delete_menu_item(item_id: str, user: CurrentUser = Depends(require_admin),
                     ctx: AppContext = Depends(get_context)):
    ctx.menu.delete_item(item_id, user.uid)
    return create_success_response(message="Menu item deleted")
