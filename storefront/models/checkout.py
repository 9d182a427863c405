"""
Checkout attempt models
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from .base import BaseEntity
from .cart import CartItem


class CheckoutState(str, Enum):
    IDLE = "idle"
    FETCHING_SESSION = "fetching_session"
    AWAITING_PAYMENT = "awaiting_payment"
    CONFIRMING = "confirming"
    COMMITTED = "committed"
    FAILED = "failed"


class FailureReason(str, Enum):
    PAYMENT_SESSION_ERROR = "payment_session_error"
    USER_CANCELLED = "user_cancelled"
    PAYMENT_FAILED = "payment_failed"
    COMMIT_ERROR = "commit_error"


class PaymentSession(BaseModel):
    """Session descriptor for the hosted payment sheet"""
    payment_intent: str = Field(..., description="Client secret of the payment intent")
    ephemeral_key: str
    customer: str
    publishable_key: Optional[str] = None

    @property
    def transaction_id(self) -> str:
        """Payment intent id, the part of the client secret before '_secret_'"""
        return self.payment_intent.split("_secret_", 1)[0]


class CheckoutAttempt(BaseEntity):
    customer_id: str
    state: CheckoutState = CheckoutState.IDLE
    amount_cents: int = 0
    items: List[CartItem] = Field(default_factory=list)
    session: Optional[PaymentSession] = None
    failure_reason: Optional[FailureReason] = None
    failure_message: Optional[str] = None
    order_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
