"""
Payment gateway adapter
Client for the backend that fronts the hosted payment provider

Endpoints consumed:
- POST /payment-sheet {amount} -> {paymentIntent, ephemeralKey, customer}
- GET /get-publishable-key -> {key}
"""

from typing import Optional

import requests

from ..core.exceptions import PaymentSessionError, ValidationError
from ..models.checkout import PaymentSession


def validate_amount(amount_cents) -> int:
    """Amounts are positive integers in minor units; anything else never leaves the client"""
    if isinstance(amount_cents, bool) or not isinstance(amount_cents, int):
        raise ValidationError("Payment amount must be an integer number of minor units",
                              details={"amount": str(amount_cents)})
    if amount_cents <= 0:
        raise ValidationError("Invalid payment amount.", details={"amount": amount_cents})
    return amount_cents


class PaymentGateway:
    """HTTP adapter; no timeout is imposed beyond the transport default"""

    def __init__(self, base_url: str, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()

    def create_payment_sheet(self, amount_cents: int) -> PaymentSession:
        """
        Request a payment session for the given amount.

        Raises:
            ValidationError: amount is not a positive integer (no request is sent)
            PaymentSessionError: transport failure, non-2xx reply or malformed body
        """
        validate_amount(amount_cents)

        try:
            response = self.session.post(
                f"{self.base_url}/payment-sheet",
                json={"amount": amount_cents},
            )
        except requests.RequestException as e:
            raise PaymentSessionError(f"Payment gateway unreachable: {e}")

        if not response.ok:
            raise PaymentSessionError(
                "Failed to fetch payment sheet parameters",
                details={"status_code": response.status_code, "body": response.text[:500]},
            )

        try:
            data = response.json()
            return PaymentSession(
                payment_intent=data["paymentIntent"],
                ephemeral_key=data["ephemeralKey"],
                customer=data["customer"],
            )
        except (ValueError, KeyError, TypeError) as e:
            raise PaymentSessionError(f"Malformed payment sheet response: {e}")

    def get_publishable_key(self) -> str:
        try:
            response = self.session.get(f"{self.base_url}/get-publishable-key")
            response.raise_for_status()
            return response.json()["key"]
        except (requests.RequestException, ValueError, KeyError) as e:
            raise PaymentSessionError(f"Failed to fetch publishable key: {e}")
