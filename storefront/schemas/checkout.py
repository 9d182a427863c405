"""
Checkout request schemas
"""

from pydantic import BaseModel, Field


class PaymentFailureRequest(BaseModel):
    """The payment sheet finished with an error"""
    message: str = Field("", description="Error message reported by the payment sheet")
