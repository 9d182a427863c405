"""
Feedback models
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from .base import BaseEntity


class Feedback(BaseEntity):
    """Rating for one item of a completed order; at most one per (order_id, item_id)"""
    item_id: str
    order_id: str
    customer_id: str
    rating: int = Field(..., ge=1, le=5)
    comment: str
    created_at: datetime
    visible: bool = True
