"""
Order and payment models
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .base import BaseEntity
from .cart import CartItem


class OrderStatus(str, Enum):
    """Order status, forward flow pending -> preparing -> ready for pickup -> completed"""
    PENDING = "pending"
    PREPARING = "preparing"
    READY_FOR_PICKUP = "ready for pickup"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


ORDER_FLOW: List[OrderStatus] = [
    OrderStatus.PENDING,
    OrderStatus.PREPARING,
    OrderStatus.READY_FOR_PICKUP,
    OrderStatus.COMPLETED,
]

CANCELLABLE_STATUSES = (OrderStatus.PENDING, OrderStatus.PREPARING)

STATUS_COLORS: Dict[str, str] = {
    OrderStatus.PENDING.value: "#FFA500",           # orange
    OrderStatus.PREPARING.value: "#1E90FF",         # blue
    OrderStatus.READY_FOR_PICKUP.value: "#32CD32",  # green
    OrderStatus.COMPLETED.value: "#8B4513",         # brown
    OrderStatus.CANCELLED.value: "#FF0000",
}
DEFAULT_STATUS_COLOR = "#808080"


def next_status(status: OrderStatus) -> Optional[OrderStatus]:
    """Immediate successor in the forward flow, None at the end or off the flow"""
    status = OrderStatus(status)
    if status not in ORDER_FLOW:
        return None
    index = ORDER_FLOW.index(status)
    return ORDER_FLOW[index + 1] if index + 1 < len(ORDER_FLOW) else None


class OrderLineItem(BaseModel):
    """Frozen copy of a cart line at checkout time"""
    model_config = {"frozen": True}

    menu_item_id: str
    name: str
    quantity: int
    unit_price: Decimal
    image_url: Optional[str] = None
    special_request: Optional[str] = None

    @classmethod
    def from_cart_item(cls, item: CartItem) -> "OrderLineItem":
        return cls(
            menu_item_id=item.menu_item_id,
            name=item.name,
            quantity=item.quantity,
            unit_price=item.unit_price,
            image_url=item.image_url,
            special_request=item.special_request,
        )


class Order(BaseEntity):
    customer_id: str
    items: List[OrderLineItem]
    total_price: Decimal = Field(..., description="Total in RM")
    total_cents: int = Field(..., description="Total in sen")
    order_date: datetime
    order_status: OrderStatus = OrderStatus.PENDING
    updated_at: Optional[datetime] = None
    updated_by: Optional[str] = None
    picked_up_date: Optional[datetime] = None
    needs_reconciliation: bool = False
    reconciliation_note: Optional[str] = None

    @property
    def status(self) -> OrderStatus:
        return OrderStatus(self.order_status)

    def has_item(self, menu_item_id: str) -> bool:
        return any(item.menu_item_id == menu_item_id for item in self.items)


class PaymentStatus(str, Enum):
    PAID = "Paid"


class Payment(BaseEntity):
    """Append-only record of a captured payment, one per order"""
    payment_id: str = Field(..., description="Gateway transaction id")
    customer_id: str
    order_id: str
    total_amount: Decimal
    total_cents: int
    payment_status: PaymentStatus = PaymentStatus.PAID
    payment_date: datetime
    invoice_id: str
