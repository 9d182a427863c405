"""
Report service
Monthly sales and order counts for the admin dashboard
"""

import calendar
from decimal import Decimal
from typing import Any, Dict, List, Optional

from ..core.database import DocumentStore
from ..core.exceptions import ValidationError
from ..models.order import Order
from .order_service import ORDERS


class ReportService:

    def __init__(self, store: DocumentStore):
        self.db = store

    def monthly_sales(self, year: Optional[int] = None, month: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Orders grouped by calendar month of order_date, oldest month first

        Every stored order counts, whatever its status.
        """
        if month is not None and not 1 <= month <= 12:
            raise ValidationError("Month must be between 1 and 12", details={"month": month})

        buckets: Dict[str, Dict[str, Any]] = {}
        for doc in self.db.query(ORDERS):
            order = Order.from_document(doc)
            date = order.order_date
            if year is not None and date.year != year:
                continue
            if month is not None and date.month != month:
                continue

            period = f"{date.year:04d}-{date.month:02d}"
            bucket = buckets.setdefault(period, {
                "period": period,
                "label": f"{calendar.month_name[date.month]} {date.year}",
                "total_sales": Decimal("0.00"),
                "total_orders": 0,
            })
            bucket["total_sales"] += order.total_price
            bucket["total_orders"] += 1

        return [buckets[period] for period in sorted(buckets)]
