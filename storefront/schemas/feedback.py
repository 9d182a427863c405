"""
Feedback request schemas
"""

from pydantic import BaseModel, Field


class FeedbackCreateRequest(BaseModel):
    order_id: str = Field(..., description="Completed order id")
    item_id: str = Field(..., description="Menu item id within the order")
    rating: int = Field(..., description="Star rating 1-5")
    comment: str = Field("", description="Comment text")


class FeedbackVisibilityRequest(BaseModel):
    visible: bool
