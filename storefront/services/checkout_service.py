"""
Checkout service
Drives one checkout attempt from cart to committed order

Attempt states:
    idle -> fetching_session -> awaiting_payment -> confirming -> committed
    any step -> failed (with failure_reason)

Commit sequence, run once the payment sheet reports success:
    1. write the Order from the attempt's cart snapshot
    2. write the Payment referencing the order and the gateway transaction id
    3. delete the Cart

The three writes are independent. The customer has already been charged when
step 1 runs, so a failure in step 1 or 2 leaves money captured without a full
record. That case is logged as checkout_commit_error and surfaced as
CommitError; an order written before a failed payment write is flagged
needs_reconciliation. There is no automatic reconciliation.

Success is taken from the client's payment sheet result; the gateway is not
asked to confirm the intent, so a Payment marked Paid is not gateway-verified.
"""

from typing import Any, Dict, List, Optional

from ..core.database import DocumentStore, utcnow
from ..core.exceptions import (
    BaseApplicationError,
    CommitError,
    InvalidTransitionError,
    NotFoundError,
    PaymentSessionError,
    UnauthenticatedError,
    ValidationError,
)
from ..models.checkout import CheckoutAttempt, CheckoutState, FailureReason
from ..models.order import Order, OrderLineItem, OrderStatus, Payment, PaymentStatus
from ..utils.money import from_minor_units
from .cart_service import CartService
from .order_service import ORDERS, PAYMENTS
from .payment_gateway import PaymentGateway, validate_amount

CHECKOUTS = "checkouts"


class CheckoutService:

    def __init__(self, store: DocumentStore, cart_service: CartService, gateway: PaymentGateway):
        self.db = store
        self.carts = cart_service
        self.gateway = gateway

    def get_attempt(self, user_id: str, attempt_id: str) -> CheckoutAttempt:
        attempt = CheckoutAttempt.from_document(self.db.get(CHECKOUTS, attempt_id))
        if attempt is None or attempt.customer_id != user_id:
            raise NotFoundError("Checkout not found", details={"checkout_id": attempt_id})
        return attempt

    def start_checkout(self, user_id: Optional[str]) -> CheckoutAttempt:
        """
        Snapshot the cart and open a payment session for its payable amount

        The returned attempt carries the session descriptor the client hands
        to the payment sheet, publishable key included.

        Raises:
            UnauthenticatedError: no user
            ValidationError: empty cart or non-positive amount (gateway not called)
            PaymentSessionError: gateway failed; the attempt is stored as failed
        """
        if not user_id:
            raise UnauthenticatedError()

        cart = self.carts.get_cart(user_id)
        if cart is None or cart.is_empty:
            raise ValidationError("Please add items to your cart before checking out.")

        amount_cents = cart.payable_amount_cents
        validate_amount(amount_cents)

        now = utcnow()
        attempt = CheckoutAttempt(
            customer_id=user_id,
            state=CheckoutState.FETCHING_SESSION,
            amount_cents=amount_cents,
            items=cart.cart_items,
            created_at=now,
            updated_at=now,
        )
        attempt.id = self.db.add(CHECKOUTS, attempt.to_document())

        try:
            session = self.gateway.create_payment_sheet(amount_cents)
            session.publishable_key = self.gateway.get_publishable_key()
        except PaymentSessionError as e:
            self._fail(attempt, FailureReason.PAYMENT_SESSION_ERROR, e.message)
            self.db.log("checkout_session_error", user_id=user_id, actor_id=user_id,
                        detail={"checkout_id": attempt.id, "amount_cents": amount_cents,
                                "error": e.message, **e.details})
            raise PaymentSessionError(e.message, details={**e.details, "checkout_id": attempt.id})

        attempt.session = session
        self._transition(attempt, CheckoutState.AWAITING_PAYMENT)
        self.db.log("checkout_start", user_id=user_id, actor_id=user_id,
                    detail={"checkout_id": attempt.id, "amount_cents": amount_cents})
        return attempt

    def cancel_checkout(self, user_id: str, attempt_id: str) -> CheckoutAttempt:
        """The user dismissed the payment sheet; a normal outcome the user may retry"""
        with self.db.transaction():
            attempt = self._awaiting(user_id, attempt_id)
            self._fail(attempt, FailureReason.USER_CANCELLED, "Payment cancelled by user")
        self.db.log("checkout_cancel", user_id=user_id, actor_id=user_id,
                    detail={"checkout_id": attempt_id})
        return attempt

    def report_payment_failure(self, user_id: str, attempt_id: str, message: str) -> CheckoutAttempt:
        """The payment sheet finished with an error other than dismissal"""
        with self.db.transaction():
            attempt = self._awaiting(user_id, attempt_id)
            self._fail(attempt, FailureReason.PAYMENT_FAILED, message or "Payment failed")
        self.db.log("checkout_payment_failed", user_id=user_id, actor_id=user_id,
                    detail={"checkout_id": attempt_id, "message": message})
        return attempt

    def confirm_checkout(self, user_id: str, attempt_id: str) -> Dict[str, Any]:
        """
        The payment sheet reported success: record the order and payment, clear the cart

        The success claim comes from the client and is not checked against the
        gateway; payment_status "Paid" records that claim.

        Returns:
            dict: attempt, order and payment of the committed checkout (the invoice)

        Raises:
            InvalidTransitionError: attempt is not awaiting payment
            CommitError: order or payment write failed after the charge
        """
        # claim the attempt; a concurrent confirm sees "confirming" and is refused
        with self.db.transaction():
            attempt = self._awaiting(user_id, attempt_id)
            self._transition(attempt, CheckoutState.CONFIRMING)

        now = utcnow()
        total_price = from_minor_units(attempt.amount_cents)

        try:
            order = Order(
                customer_id=user_id,
                items=[OrderLineItem.from_cart_item(item) for item in attempt.items],
                total_price=total_price,
                total_cents=attempt.amount_cents,
                order_date=now,
                order_status=OrderStatus.PENDING,
            )
            order.id = self.db.add(ORDERS, order.to_document())
        except BaseApplicationError as e:
            self._commit_failed(attempt, "order_write", e, order_id=None)

        try:
            payment = Payment(
                payment_id=attempt.session.transaction_id,
                customer_id=user_id,
                order_id=order.id,
                total_amount=total_price,
                total_cents=attempt.amount_cents,
                payment_status=PaymentStatus.PAID,
                payment_date=now,
                invoice_id=order.id,
            )
            payment.id = self.db.add(PAYMENTS, payment.to_document())
        except BaseApplicationError as e:
            self._flag_for_reconciliation(order, e)
            self._commit_failed(attempt, "payment_write", e, order_id=order.id)

        try:
            self.carts.clear_cart(user_id)
        except BaseApplicationError as e:
            self.db.log("cart_clear_failed", user_id=user_id, actor_id=user_id,
                        detail={"checkout_id": attempt.id, "order_id": order.id, "error": e.message})

        attempt.order_id = order.id
        self._transition(attempt, CheckoutState.COMMITTED)
        self.db.log("order_create", user_id=user_id, actor_id=user_id,
                    detail={"checkout_id": attempt.id, "order_id": order.id,
                            "payment_id": payment.payment_id, "amount_cents": attempt.amount_cents})

        return {"checkout": attempt, "order": order, "payment": payment}

    def get_invoice(self, user_id: str, order_id: str) -> Dict[str, Any]:
        order = Order.from_document(self.db.get(ORDERS, order_id))
        if order is None or order.customer_id != user_id:
            raise NotFoundError("Invoice not found", details={"order_id": order_id})
        payments = self.db.query(PAYMENTS, {"order_id": order_id})
        return {"order": order, "payment": Payment.from_document(payments[0]) if payments else None}

    def list_invoices(self, user_id: str, limit: int = 10) -> List[Dict[str, Any]]:
        """The customer's latest payments, newest first, each with its order"""
        docs = self.db.query(PAYMENTS, {"customer_id": user_id},
                             order_by="payment_date", descending=True, limit=limit)
        invoices = []
        for doc in docs:
            payment = Payment.from_document(doc)
            invoices.append({
                "order": Order.from_document(self.db.get(ORDERS, payment.order_id)),
                "payment": payment,
            })
        return invoices

    def _awaiting(self, user_id: str, attempt_id: str) -> CheckoutAttempt:
        attempt = self.get_attempt(user_id, attempt_id)
        if CheckoutState(attempt.state) != CheckoutState.AWAITING_PAYMENT:
            raise InvalidTransitionError(
                f'Checkout is "{attempt.state}", not awaiting payment',
                details={"checkout_id": attempt_id, "state": attempt.state},
            )
        return attempt

    def _transition(self, attempt: CheckoutAttempt, state: CheckoutState):
        attempt.state = state.value
        attempt.updated_at = utcnow()
        self.db.set(CHECKOUTS, attempt.id, attempt.to_document())

    def _fail(self, attempt: CheckoutAttempt, reason: FailureReason, message: str):
        attempt.failure_reason = reason.value
        attempt.failure_message = message
        self._transition(attempt, CheckoutState.FAILED)

    def _flag_for_reconciliation(self, order: Order, error: BaseApplicationError):
        try:
            self.db.update(ORDERS, order.id, {
                "needs_reconciliation": True,
                "reconciliation_note": f"Payment record missing: {error.message}",
            })
        except BaseApplicationError as e:
            self.db.log("reconciliation_flag_failed", user_id=order.customer_id,
                        detail={"order_id": order.id, "error": e.message})

    def _commit_failed(self, attempt: CheckoutAttempt, step: str,
                       error: BaseApplicationError, order_id: Optional[str]):
        detail = {
            "checkout_id": attempt.id,
            "step": step,
            "order_id": order_id,
            "amount_cents": attempt.amount_cents,
            "transaction_id": attempt.session.transaction_id if attempt.session else None,
            "error": error.message,
        }
        self.db.log("checkout_commit_error", user_id=attempt.customer_id, detail=detail)
        try:
            self._fail(attempt, FailureReason.COMMIT_ERROR, error.message)
        except BaseApplicationError:
            pass  # the store is failing; the audit entry above is the record
        raise CommitError(
            "Payment was taken but the order could not be recorded. Please contact the store.",
            details=detail,
        ) from error
