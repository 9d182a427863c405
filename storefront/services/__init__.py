from .cart_service import CartService
from .checkout_service import CheckoutService
from .feature_service import FeatureService
from .feedback_service import FeedbackService
from .menu_service import MenuService
from .notification_service import EmailNotifier
from .order_service import OrderService
from .payment_gateway import PaymentGateway
from .report_service import ReportService
from .vacancy_service import VacancyService

__all__ = [
    "CartService",
    "CheckoutService",
    "EmailNotifier",
    "FeatureService",
    "FeedbackService",
    "MenuService",
    "OrderService",
    "PaymentGateway",
    "ReportService",
    "VacancyService",
]
