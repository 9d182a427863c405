"""
Order request schemas
"""

from pydantic import BaseModel, Field

from ..models.order import OrderStatus


class OrderStatusUpdateRequest(BaseModel):
    status: OrderStatus = Field(..., description="Target status, the immediate successor of the current one")
