"""
Checkout routes
Start a checkout, then report how the payment sheet finished
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from ...core.context import AppContext, get_context
from ...core.error_handler import create_success_response
from ...core.security import CurrentUser, get_current_user
from ...models.checkout import CheckoutAttempt
from ...schemas.checkout import PaymentFailureRequest

router = APIRouter()


def attempt_view(attempt: CheckoutAttempt, ctx: AppContext) -> Dict[str, Any]:
    data = attempt.model_dump(mode="json")
    data["merchant_display_name"] = ctx.settings.merchant_display_name
    data["currency"] = ctx.settings.currency
    return data


def invoice_view(invoice: Dict[str, Any]) -> Dict[str, Any]:
    return {
        key: value.model_dump(mode="json") if value is not None else None
        for key, value in invoice.items()
    }


@router.post("")
def start_checkout(user: CurrentUser = Depends(get_current_user), ctx: AppContext = Depends(get_context)):
    """Snapshot the cart and open a payment session"""
    attempt = ctx.checkout.start_checkout(user.uid)
    return create_success_response(attempt_view(attempt, ctx), "Payment session ready")


@router.get("/{checkout_id}")
def get_checkout(checkout_id: str, user: CurrentUser = Depends(get_current_user),
                 ctx: AppContext = Depends(get_context)):
    return create_success_response(attempt_view(ctx.checkout.get_attempt(user.uid, checkout_id), ctx))


@router.post("/{checkout_id}/cancel")
def cancel_checkout(checkout_id: str, user: CurrentUser = Depends(get_current_user),
                    ctx: AppContext = Depends(get_context)):
    attempt = ctx.checkout.cancel_checkout(user.uid, checkout_id)
    return create_success_response(attempt_view(attempt, ctx), "Payment cancelled")


@router.post("/{checkout_id}/failure")
def report_failure(checkout_id: str, req: PaymentFailureRequest,
                   user: CurrentUser = Depends(get_current_user),
                   ctx: AppContext = Depends(get_context)):
    attempt = ctx.checkout.report_payment_failure(user.uid, checkout_id, req.message)
    return create_success_response(attempt_view(attempt, ctx), "Payment failed")


@router.post("/{checkout_id}/confirm")
def confirm_checkout(checkout_id: str, user: CurrentUser = Depends(get_current_user),
                     ctx: AppContext = Depends(get_context)):
    """Payment succeeded: record order and payment, clear the cart"""
    result = ctx.checkout.confirm_checkout(user.uid, checkout_id)
    data = invoice_view({"order": result["order"], "payment": result["payment"]})
    data["checkout"] = attempt_view(result["checkout"], ctx)
    return create_success_response(data, "Payment successful! Your order has been placed.")
