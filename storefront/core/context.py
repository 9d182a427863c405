"""
Application context
The store, subscription hub, external adapters and services for one running app.
Built once at startup and stored on app.state; tests build their own.
"""

from typing import Optional

from starlette.requests import HTTPConnection

from ..config.settings import Settings
from ..services.cart_service import CartService
from ..services.checkout_service import CheckoutService
from ..services.feature_service import FeatureService
from ..services.feedback_service import FeedbackService
from ..services.menu_service import MenuService
from ..services.notification_service import EmailNotifier
from ..services.order_service import OrderService
from ..services.payment_gateway import PaymentGateway
from ..services.report_service import ReportService
from ..services.vacancy_service import VacancyService
from .database import DocumentStore
from .realtime import SubscriptionHub
from .security import SecurityManager


class AppContext:

    def __init__(self, settings: Settings, store: DocumentStore,
                 gateway: PaymentGateway, notifier: Optional[EmailNotifier] = None):
        self.settings = settings
        self.store = store
        self.hub = store.hub
        self.gateway = gateway
        self.notifier = notifier
        self.security = SecurityManager(settings)

        self.menu = MenuService(store)
        self.carts = CartService(store, self.menu)
        self.orders = OrderService(store)
        self.checkout = CheckoutService(store, self.carts, gateway)
        self.feedback = FeedbackService(store)
        self.features = FeatureService(store)
        self.vacancies = VacancyService(store, self.features, notifier)
        self.reports = ReportService(store)

    @classmethod
    def from_settings(cls, settings: Settings) -> "AppContext":
        store = DocumentStore(settings.database_path, hub=SubscriptionHub())
        gateway = PaymentGateway(settings.payment_gateway_url)
        notifier = EmailNotifier(settings.notification_url or settings.payment_gateway_url, store)
        return cls(settings, store, gateway, notifier)

    def close(self):
        self.store.close()


def get_context(conn: HTTPConnection) -> AppContext:
    """FastAPI dependency for HTTP routes and WebSockets alike"""
    return conn.app.state.context
