"""
Real-time routes
WebSocket feeds that push a fresh snapshot after every write.
Authenticated feeds take the bearer token as the `token` query parameter.
"""

import asyncio
from typing import Any, AsyncIterator, Callable, Optional

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status

from ...core.context import AppContext, get_context
from ...core.exceptions import BaseApplicationError, NotFoundError
from ...core.security import CurrentUser, user_from_query_token
from ...models.order import OrderStatus
from .cart import cart_view

router = APIRouter()


async def _pump(websocket: WebSocket, snapshots: AsyncIterator[Any], render: Callable[[Any], Any]):
    async for snapshot in snapshots:
        await websocket.send_json(render(snapshot))


async def _stream(websocket: WebSocket, snapshots: AsyncIterator[Any], render: Callable[[Any], Any]):
    """Forward snapshots until the client goes away; leaving drops the subscription"""
    await websocket.accept()
    pump = asyncio.create_task(_pump(websocket, snapshots, render))
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        pump.cancel()
        await asyncio.gather(pump, return_exceptions=True)


async def _authenticate(websocket: WebSocket, token: Optional[str],
                        staff_only: bool = False) -> Optional[CurrentUser]:
    try:
        user = user_from_query_token(websocket, token)
    except BaseApplicationError:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return None
    if staff_only and not user.is_staff:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return None
    return user


@router.websocket("/ws/settings/job-vacancy")
async def job_vacancy_feed(websocket: WebSocket, ctx: AppContext = Depends(get_context)):
    await _stream(websocket, ctx.features.watch_job_vacancy(), lambda view: view.model_dump())


@router.websocket("/ws/cart")
async def cart_feed(websocket: WebSocket, token: Optional[str] = Query(None),
                    ctx: AppContext = Depends(get_context)):
    user = await _authenticate(websocket, token)
    if user is None:
        return
    await _stream(websocket, ctx.carts.watch_cart(user.uid), cart_view)


@router.websocket("/ws/orders")
async def orders_feed(websocket: WebSocket, token: Optional[str] = Query(None),
                      order_status: Optional[OrderStatus] = Query(None, alias="status"),
                      ctx: AppContext = Depends(get_context)):
    """Staff order list, optionally filtered by status"""
    user = await _authenticate(websocket, token, staff_only=True)
    if user is None:
        return
    await _stream(websocket, ctx.orders.watch_orders(order_status),
                  lambda orders: [o.model_dump(mode="json") for o in orders])


@router.websocket("/ws/orders/{order_id}")
async def order_feed(websocket: WebSocket, order_id: str, token: Optional[str] = Query(None),
                     ctx: AppContext = Depends(get_context)):
    """One order, for its customer or for staff"""
    user = await _authenticate(websocket, token)
    if user is None:
        return
    try:
        order = await asyncio.to_thread(ctx.orders.get_order, order_id)
    except NotFoundError:
        order = None
    if order is None or (order.customer_id != user.uid and not user.is_staff):
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    def render(snapshot):
        return ctx.orders.order_view(snapshot) if snapshot is not None else None

    await _stream(websocket, ctx.orders.watch_order(order_id), render)
