"""
Order routes
Customers read their own orders; staff work the fulfilment queue
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...core.context import AppContext, get_context
from ...core.error_handler import create_success_response
from ...core.security import CurrentUser, get_current_user, require_staff
from ...models.order import OrderStatus
from ...schemas.order import OrderStatusUpdateRequest
from .checkout import invoice_view

router = APIRouter()
staff_router = APIRouter()


@router.get("")
def list_my_orders(user: CurrentUser = Depends(get_current_user), ctx: AppContext = Depends(get_context)):
    orders = ctx.orders.list_customer_orders(user.uid)
    return create_success_response([ctx.orders.order_view(o) for o in orders])


@router.get("/invoices")
def list_my_invoices(limit: int = Query(10, ge=1, le=50),
                     user: CurrentUser = Depends(get_current_user), ctx: AppContext = Depends(get_context)):
    """Invoice inbox: latest payments first"""
    invoices = ctx.checkout.list_invoices(user.uid, limit)
    return create_success_response([invoice_view(invoice) for invoice in invoices])


@router.get("/{order_id}")
def get_my_order(order_id: str, user: CurrentUser = Depends(get_current_user),
                 ctx: AppContext = Depends(get_context)):
    order = ctx.orders.get_customer_order(user.uid, order_id)
    return create_success_response(ctx.orders.order_view(order))


@router.get("/{order_id}/invoice")
def get_invoice(order_id: str, user: CurrentUser = Depends(get_current_user),
                ctx: AppContext = Depends(get_context)):
    return create_success_response(invoice_view(ctx.checkout.get_invoice(user.uid, order_id)))


@staff_router.get("")
def list_orders(status: Optional[OrderStatus] = Query(None, description="Filter by status"),
                user: CurrentUser = Depends(require_staff), ctx: AppContext = Depends(get_context)):
    orders = ctx.orders.list_orders(status)
    return create_success_response([o.model_dump(mode="json") for o in orders])


@staff_router.get("/search")
def search_orders(q: str = Query(..., min_length=1, description="Order id fragment"),
                  user: CurrentUser = Depends(require_staff), ctx: AppContext = Depends(get_context)):
    orders = ctx.orders.search_orders(q)
    return create_success_response([o.model_dump(mode="json") for o in orders])


@staff_router.get("/{order_id}")
def get_order(order_id: str, user: CurrentUser = Depends(require_staff),
              ctx: AppContext = Depends(get_context)):
    order = ctx.orders.get_order(order_id)
    payment = ctx.orders.get_payment_for_order(order_id)
    data = order.model_dump(mode="json")
    data["payment"] = payment.model_dump(mode="json") if payment else None
    return create_success_response(data)


@staff_router.post("/{order_id}/status")
def advance_status(order_id: str, req: OrderStatusUpdateRequest,
                   user: CurrentUser = Depends(require_staff), ctx: AppContext = Depends(get_context)):
    """Move the order one step forward"""
    order = ctx.orders.advance(order_id, req.status, user.uid)
    return create_success_response(order.model_dump(mode="json"), "Order status updated")
