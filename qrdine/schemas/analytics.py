from pydantic import BaseModel
from typing import List
from datetime import datetime
from decimal import Decimal

from qrdine.services.buckets import TimeRange


class TrendPoint(BaseModel):
    label: str
    value: Decimal


class Dashboard(BaseModel):
    """Rollup for one reporting range, compared with the period just before it."""
    range: TimeRange
    window_start: datetime
    window_end: datetime
    total_revenue: Decimal
    total_orders: int
    average_rating: float
    revenue_trend: List[TrendPoint]
    revenue_change_pct: float
    orders_change_pct: float
