"""
Custom exception classes
Each error carries a stable error_code that the error handler maps to an HTTP status.
"""

from typing import Any, Dict, Optional


class BaseApplicationError(Exception):
    """Base class for all application errors"""

    default_code = "APPLICATION_ERROR"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code or self.default_code
        self.details = details or {}
        super().__init__(self.message)


class DatabaseError(BaseApplicationError):
    """Document store failure"""
    default_code = "DATABASE_ERROR"


class UnauthenticatedError(BaseApplicationError):
    """No signed-in user for an operation that needs one"""
    default_code = "AUTHENTICATION_REQUIRED"

    def __init__(self, message: str = "User not authenticated", **kwargs):
        super().__init__(message, **kwargs)


class PermissionDeniedError(BaseApplicationError):
    """Signed-in user lacks the required role"""
    default_code = "PERMISSION_DENIED"


class ValidationError(BaseApplicationError):
    """Malformed input or violated precondition"""
    default_code = "VALIDATION_ERROR"


class NotFoundError(BaseApplicationError):
    """Referenced document is absent"""
    default_code = "RESOURCE_NOT_FOUND"


class InvalidTransitionError(BaseApplicationError):
    """State machine misuse (order status or checkout attempt)"""
    default_code = "INVALID_TRANSITION"


class DuplicateFeedbackError(BaseApplicationError):
    """Feedback already exists for the order item"""
    default_code = "DUPLICATE_FEEDBACK"


class PaymentSessionError(BaseApplicationError):
    """Payment gateway could not create a payment session"""
    default_code = "PAYMENT_SESSION_ERROR"


class CommitError(BaseApplicationError):
    """
    Order or payment write failed after the customer was charged.
    Money has moved without a matching record; recovery is manual.
    """
    default_code = "COMMIT_ERROR"
