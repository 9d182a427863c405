"""
API routes and endpoints.
"""

from fastapi import APIRouter
from .v1 import admin, cart, checkout, feedback, menu, orders, realtime, vacancy

api_router = APIRouter()

api_router.include_router(menu.router, prefix="/menu", tags=["menu"])
api_router.include_router(cart.router, prefix="/cart", tags=["cart"])
api_router.include_router(checkout.router, prefix="/checkout", tags=["checkout"])
api_router.include_router(orders.router, prefix="/orders", tags=["orders"])
api_router.include_router(orders.staff_router, prefix="/staff/orders", tags=["staff"])
api_router.include_router(feedback.router, prefix="/feedback", tags=["feedback"])
api_router.include_router(vacancy.router, prefix="", tags=["job vacancy"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])

# WebSocket feeds are served from the root, outside the versioned prefix
realtime_router = realtime.router

__all__ = ["api_router", "realtime_router"]
