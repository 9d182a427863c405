from datetime import datetime, timezone
from decimal import Decimal

import pytest

from ..core.exceptions import ValidationError
from ..models.order import Order, OrderLineItem
from ..services.order_service import ORDERS


def _order(store, order_id, when, total, status="completed"):
    order = Order(
        customer_id="customer-1",
        items=[OrderLineItem(menu_item_id="beef", name="Beef Burger", quantity=1, unit_price=Decimal(total))],
        total_price=Decimal(total),
        total_cents=int(Decimal(total) * 100),
        order_date=when,
        order_status=status,
    )
    store.set(ORDERS, order_id, order.to_document())


@pytest.fixture
def seeded_orders(store):
    _order(store, "a", datetime(2024, 8, 3, tzinfo=timezone.utc), "20.00")
    _order(store, "b", datetime(2024, 8, 20, tzinfo=timezone.utc), "8.50", status="pending")
    _order(store, "c", datetime(2024, 9, 1, tzinfo=timezone.utc), "4.00")
    _order(store, "d", datetime(2023, 8, 9, tzinfo=timezone.utc), "12.00")


class TestMonthlyReport:

    def test_grouped_by_month(self, context, seeded_orders):
        rows = context.reports.monthly_sales()

        assert [row["period"] for row in rows] == ["2023-08", "2024-08", "2024-09"]
        august = rows[1]
        assert august["label"] == "August 2024"
        assert august["total_sales"] == Decimal("28.50")
        assert august["total_orders"] == 2

    def test_filter_by_year_and_month(self, context, seeded_orders):
        assert [row["period"] for row in context.reports.monthly_sales(year=2024)] == ["2024-08", "2024-09"]
        assert [row["period"] for row in context.reports.monthly_sales(month=8)] == ["2023-08", "2024-08"]
        assert context.reports.monthly_sales(year=2022) == []

    def test_bad_month(self, context):
        with pytest.raises(ValidationError):
            context.reports.monthly_sales(month=13)
