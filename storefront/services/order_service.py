"""
Order service
Order reads for customers and staff, and the fulfilment status state machine

Status rules:
- Forward only, one step at a time: pending -> preparing -> ready for pickup -> completed
- cancelled is reachable from pending or preparing (admin)
- Entering completed stamps picked_up_date once
- The status check and the write happen in one store transaction
"""

from typing import Any, AsyncIterator, Dict, List, Optional

from ..core.database import DocumentStore, utcnow
from ..core.exceptions import InvalidTransitionError, NotFoundError
from ..models.order import (
    CANCELLABLE_STATUSES,
    DEFAULT_STATUS_COLOR,
    STATUS_COLORS,
    Order,
    OrderStatus,
    Payment,
    next_status,
)

ORDERS = "orders"
PAYMENTS = "payment"
FEEDBACK = "feedback"


def status_color(status: str) -> str:
    """Label colour for a status as shown in the order views"""
    return STATUS_COLORS.get((status or "").lower(), DEFAULT_STATUS_COLOR)


class OrderService:

    def __init__(self, store: DocumentStore):
        self.db = store

    def get_order(self, order_id: str) -> Order:
        order = Order.from_document(self.db.get(ORDERS, order_id))
        if order is None:
            raise NotFoundError("Order not found", details={"order_id": order_id})
        return order

    def get_customer_order(self, customer_id: str, order_id: str) -> Order:
        """Customers only see their own orders"""
        order = self.get_order(order_id)
        if order.customer_id != customer_id:
            raise NotFoundError("Order not found", details={"order_id": order_id})
        return order

    def list_orders(self, status: Optional[OrderStatus] = None) -> List[Order]:
        """Orders newest first, optionally filtered by status (staff lists)"""
        where = {"order_status": OrderStatus(status).value} if status else None
        docs = self.db.query(ORDERS, where, order_by="order_date", descending=True)
        return [Order.from_document(d) for d in docs]

    def list_customer_orders(self, customer_id: str) -> List[Order]:
        docs = self.db.query(ORDERS, {"customer_id": customer_id},
                             order_by="order_date", descending=True)
        return [Order.from_document(d) for d in docs]

    def search_orders(self, fragment: str) -> List[Order]:
        """Case-insensitive match on the order id"""
        fragment = (fragment or "").strip().lower()
        return [order for order in self.list_orders() if fragment in order.id.lower()]

    def list_reconciliation_orders(self) -> List[Order]:
        docs = self.db.query(ORDERS, {"needs_reconciliation": True},
                             order_by="order_date", descending=True)
        return [Order.from_document(d) for d in docs]

    def get_payment_for_order(self, order_id: str) -> Optional[Payment]:
        docs = self.db.query(PAYMENTS, {"order_id": order_id})
        return Payment.from_document(docs[0]) if docs else None

    def advance(self, order_id: str, target_status: OrderStatus, actor_id: str) -> Order:
        """
        Move an order to the next fulfilment status

        Raises:
            NotFoundError: no such order
            InvalidTransitionError: target is not the immediate successor
        """
        target = OrderStatus(target_status)
        with self.db.transaction():
            order = self.get_order(order_id)
            current = order.status
            if next_status(current) != target:
                raise InvalidTransitionError(
                    f'Cannot change order status from "{current.value}" to "{target.value}"',
                    details={"order_id": order_id, "from": current.value, "to": target.value},
                )

            now = utcnow()
            fields: Dict[str, Any] = {
                "order_status": target.value,
                "updated_at": now.isoformat(),
                "updated_by": "staff",
            }
            if target == OrderStatus.COMPLETED and order.picked_up_date is None:
                fields["picked_up_date"] = now.isoformat()

            doc = self.db.update(ORDERS, order_id, fields)
            self.db.log("order_status_change", user_id=order.customer_id, actor_id=actor_id,
                        detail={"order_id": order_id, "from": current.value, "to": target.value})
        return Order.from_document(doc)

    def cancel(self, order_id: str, actor_id: str) -> Order:
        """Administrative cancel, allowed before the order is ready"""
        with self.db.transaction():
            order = self.get_order(order_id)
            current = order.status
            if current not in CANCELLABLE_STATUSES:
                raise InvalidTransitionError(
                    f'Cannot cancel an order that is "{current.value}"',
                    details={"order_id": order_id, "from": current.value},
                )
            doc = self.db.update(ORDERS, order_id, {
                "order_status": OrderStatus.CANCELLED.value,
                "updated_at": utcnow().isoformat(),
                "updated_by": "admin",
            })
            self.db.log("order_cancel", user_id=order.customer_id, actor_id=actor_id,
                        detail={"order_id": order_id, "from": current.value})
        return Order.from_document(doc)

    def can_leave_feedback(self, order: Order, item_id: str) -> bool:
        """Feedback opens once the order is completed, one per order item"""
        if order.status != OrderStatus.COMPLETED or not order.has_item(item_id):
            return False
        return not self.db.query(FEEDBACK, {"order_id": order.id, "item_id": item_id})

    def order_view(self, order: Order) -> Dict[str, Any]:
        """Customer order-detail view: status label colour and per-item feedback gate"""
        data = order.model_dump(mode="json")
        data["status_color"] = status_color(order.order_status)
        data["items"] = [
            {**item.model_dump(mode="json"),
             "can_leave_feedback": self.can_leave_feedback(order, item.menu_item_id)}
            for item in order.items
        ]
        return data

    async def watch_order(self, order_id: str) -> AsyncIterator[Optional[Order]]:
        async for doc in self.db.watch_document(ORDERS, order_id):
            yield Order.from_document(doc)

    async def watch_orders(self, status: Optional[OrderStatus] = None) -> AsyncIterator[List[Order]]:
        where = {"order_status": OrderStatus(status).value} if status else None
        async for docs in self.db.watch_query(ORDERS, where, order_by="order_date", descending=True):
            yield [Order.from_document(d) for d in docs]
