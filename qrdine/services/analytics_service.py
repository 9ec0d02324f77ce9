import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, Optional

from qrdine.core.config import REPORTING_TIMEZONE
from qrdine.core.errors import ValidationError, translate_db_errors
from qrdine.models.order import Order, REVENUE_STATUSES
from qrdine.models.rating import Rating
from qrdine.schemas.analytics import Dashboard, TrendPoint
from qrdine.services.buckets import TimeRange, reporting_timezone, reporting_window, strategy_for
from qrdine.services.tenant_service import resolve_tenant

log = logging.getLogger("analytics_service")


def _aware(moment: datetime) -> datetime:
    # Naive timestamps coming back from the store are UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def percent_change(current, previous) -> float:
    """(current - previous) / previous * 100, and 0 when there is nothing to compare with."""
    if not previous:
        return 0.0
    return round(float((Decimal(current) - Decimal(previous)) / Decimal(previous) * 100), 2)


def build_dashboard(
    time_range: TimeRange,
    now: datetime,
    orders: Iterable,
    rating_values: Iterable[int],
) -> Dashboard:
    """
    Pure rollup. `orders` are revenue-eligible orders created in
    [previous_start, now] (anything with created_at and total_amount);
    `rating_values` are the ratings attached to orders of the current window.
    `now` must be aware and already in the reporting timezone.
    """
    time_range = TimeRange.parse(time_range)
    start, previous_start = reporting_window(time_range, now)
    strategy = strategy_for(time_range)

    trend = [Decimal("0")] * len(strategy.labels)
    revenue, previous_revenue = Decimal("0"), Decimal("0")
    order_count, previous_order_count = 0, 0

    for order in orders:
        created = _aware(order.created_at).astimezone(now.tzinfo)
        amount = Decimal(order.total_amount)
        if start <= created <= now:
            revenue += amount
            order_count += 1
            index = strategy.index_for(created)
            if index is not None:
                trend[index] += amount
        elif previous_start <= created < start:
            previous_revenue += amount
            previous_order_count += 1

    values = list(rating_values)
    average_rating = round(sum(values) / len(values), 2) if values else 0.0

    return Dashboard(
        range=time_range,
        window_start=start,
        window_end=now,
        total_revenue=revenue,
        total_orders=order_count,
        average_rating=average_rating,
        revenue_trend=[TrendPoint(label=label, value=value) for label, value in zip(strategy.labels, trend)],
        revenue_change_pct=percent_change(revenue, previous_revenue),
        orders_change_pct=percent_change(order_count, previous_order_count),
    )


@translate_db_errors
async def compute_dashboard(tenant_id, time_range=TimeRange.WEEK, now: Optional[datetime] = None) -> Dashboard:
    tenant = await resolve_tenant(tenant_id)
    try:
        time_range = TimeRange.parse(time_range or TimeRange.WEEK)
    except ValueError:
        raise ValidationError(f"Unknown range: {time_range}. Use Today, Week, Month or Year")

    tz = reporting_timezone(REPORTING_TIMEZONE)
    now = _aware(now or datetime.now(timezone.utc)).astimezone(tz)
    start, previous_start = reporting_window(time_range, now)

    # Bounds are sent to the store in UTC, matching how timestamps are written
    now_utc = now.astimezone(timezone.utc)
    orders = await Order.filter(
        tenant_id=tenant.id,
        status__in=list(REVENUE_STATUSES),
        created_at__gte=previous_start.astimezone(timezone.utc),
        created_at__lte=now_utc,
    ).only("id", "created_at", "total_amount")

    rating_values = await Rating.filter(
        tenant_id=tenant.id,
        order__created_at__gte=start.astimezone(timezone.utc),
        order__created_at__lte=now_utc,
    ).values_list("rating", flat=True)

    dashboard = build_dashboard(time_range, now, orders, rating_values)
    log.info(
        f"Dashboard for tenant {tenant.id} ({time_range.value}): "
        f"{dashboard.total_orders} orders, revenue {dashboard.total_revenue}."
    )
    return dashboard
