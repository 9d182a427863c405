"""
Feedback service
Ratings for items of completed orders, one per (order, item)
"""

from typing import Any, Dict, List, Optional

from ..core.database import DocumentStore, utcnow
from ..core.exceptions import (
    DuplicateFeedbackError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from ..models.feedback import Feedback
from ..models.order import Order, OrderStatus
from .order_service import FEEDBACK, ORDERS

CUSTOMERS = "customer"


def mask_name(name: Optional[str]) -> str:
    """Public display name: first letter only"""
    if not name:
        return "U****"
    return name[0] + "****"


class FeedbackService:

    def __init__(self, store: DocumentStore):
        self.db = store

    def submit(self, customer_id: str, order_id: str, item_id: str,
               rating: int, comment: str) -> Feedback:
        """
        Record feedback for one item of the customer's completed order

        The uniqueness check and the insert share a store transaction, so two
        concurrent submissions for the same (order, item) cannot both land.

        Raises:
            ValidationError: rating outside 1..5 or empty comment
            NotFoundError: order missing, not the customer's, or item not in the order
            InvalidTransitionError: order is not completed
            DuplicateFeedbackError: feedback already exists for the item
        """
        if not isinstance(rating, int) or not 1 <= rating <= 5:
            raise ValidationError("Rating must be between 1 and 5", details={"rating": rating})
        comment = (comment or "").strip()
        if not comment:
            raise ValidationError("Please provide a comment")

        with self.db.transaction():
            order = Order.from_document(self.db.get(ORDERS, order_id))
            if order is None or order.customer_id != customer_id:
                raise NotFoundError("Order not found", details={"order_id": order_id})
            if order.status != OrderStatus.COMPLETED:
                raise InvalidTransitionError(
                    "Feedback opens once the order is completed",
                    details={"order_id": order_id, "status": order.order_status},
                )
            if not order.has_item(item_id):
                raise NotFoundError("Item not in order", details={"order_id": order_id, "item_id": item_id})
            if self.db.query(FEEDBACK, {"order_id": order_id, "item_id": item_id}):
                raise DuplicateFeedbackError(
                    "Feedback already submitted for this item",
                    details={"order_id": order_id, "item_id": item_id},
                )

            feedback = Feedback(
                item_id=item_id,
                order_id=order_id,
                customer_id=customer_id,
                rating=rating,
                comment=comment,
                created_at=utcnow(),
            )
            feedback.id = self.db.add(FEEDBACK, feedback.to_document())
            self.db.log("feedback_submit", user_id=customer_id, actor_id=customer_id,
                        detail={"feedback_id": feedback.id, "order_id": order_id,
                                "item_id": item_id, "rating": rating})
        return feedback

    def list_for_item(self, item_id: str) -> List[Dict[str, Any]]:
        """Visible feedback for a menu item, newest first, with masked customer names"""
        docs = self.db.query(FEEDBACK, {"item_id": item_id, "visible": True},
                             order_by="created_at", descending=True)
        result = []
        for doc in docs:
            feedback = Feedback.from_document(doc)
            customer = self.db.get(CUSTOMERS, feedback.customer_id) or {}
            result.append({
                "id": feedback.id,
                "masked_name": mask_name(customer.get("name")),
                "rating": feedback.rating,
                "comment": feedback.comment,
                "created_at": feedback.created_at,
            })
        return result

    def list_all(self) -> List[Feedback]:
        docs = self.db.query(FEEDBACK, order_by="created_at", descending=True)
        return [Feedback.from_document(d) for d in docs]

    def set_visibility(self, feedback_id: str, visible: bool, actor_id: str) -> Feedback:
        if not self.db.exists(FEEDBACK, feedback_id):
            raise NotFoundError("Feedback not found", details={"feedback_id": feedback_id})
        doc = self.db.update(FEEDBACK, feedback_id, {"visible": bool(visible)})
        self.db.log("feedback_visibility", actor_id=actor_id,
                    detail={"feedback_id": feedback_id, "visible": bool(visible)})
        return Feedback.from_document(doc)
