# Overview: Dashboard statistics; daily order aggregation and summary totals.

from __future__ import annotations

from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Iterable, Mapping

from flask import current_app
from sqlalchemy import func

from ..extensions import db
from ..models import Brand, Order, Product, SalesData
from ..time_utils import day_start, iter_days, next_day_start, parse_iso_date, utcnow
from ..validation import ValidationError


def _field(row: Any, name: str) -> Any:
    if isinstance(row, Mapping):
        return row.get(name)
    return getattr(row, name, None)


def _as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def _order_day(created_at: Any) -> str | None:
    """
    Calendar day of an order timestamp as "YYYY-MM-DD".

    Only the date part is kept; no timezone conversion is applied beyond
    whatever the stored value already carries.
    """
    if created_at is None:
        return None
    if isinstance(created_at, datetime):
        return created_at.date().isoformat()
    if isinstance(created_at, date):
        return created_at.isoformat()
    text = str(created_at).strip()
    if not text:
        return None
    return text.split("T")[0].split(" ")[0]


def _won(amount: Decimal) -> int | Decimal:
    if amount == amount.to_integral_value():
        return int(amount)
    return amount


def _to_decimal(value: Any) -> Decimal:
    if value is None:
        return Decimal(0)
    if isinstance(value, Decimal):
        return value
    # str() first so floats like 0.1 keep their printed value
    return Decimal(str(value))


def aggregate_orders_by_date(
    orders: Iterable[Any],
    start: date | datetime,
    end: date | datetime,
) -> list[dict]:
    """
    Dense per-day order series for charting.

    One entry per calendar day from start to end inclusive, ascending, with
    zero-filled days. Orders without a timestamp or dated outside the window
    are skipped. Amounts are summed exactly.

    Returns [{"date": "YYYY-MM-DD", "orderCount": int, "totalAmount": int}, ...]
    """
    buckets: dict[str, list] = {
        day.isoformat(): [0, Decimal(0)]
        for day in iter_days(_as_date(start), _as_date(end))
    }

    for order in orders:
        bucket = buckets.get(_order_day(_field(order, "created_at")))
        if bucket is None:
            continue
        bucket[0] += 1
        bucket[1] += _to_decimal(_field(order, "total"))

    return [
        {"date": day, "orderCount": count, "totalAmount": _won(amount)}
        for day, (count, amount) in sorted(buckets.items())
    ]


def summarize_orders(orders: Iterable[Any]) -> dict:
    count = 0
    amount = Decimal(0)
    for order in orders:
        count += 1
        amount += _to_decimal(_field(order, "total"))
    return {"totalOrders": count, "totalOrderAmount": _won(amount)}


def sum_revenue(sales_rows: Iterable[Any]) -> int | Decimal:
    return _won(sum((_to_decimal(_field(row, "revenue")) for row in sales_rows), Decimal(0)))


def resolve_chart_window(
    date_from: date | None,
    date_to: date | None,
    *,
    today: date,
    default_days: int = 7,
) -> tuple[date, date]:
    """
    Chart window for the dashboard.

    Without a range this is the last default_days days including today.
    """
    end = date_to or today
    start = date_from or (today - timedelta(days=max(default_days, 1) - 1))
    return start, end


def _parse_day(value: str | None, name: str) -> date | None:
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"{name} must be a date (YYYY-MM-DD)")


def _range_filter(query, date_from: date | None, date_to: date | None):
    if date_from is not None:
        query = query.filter(Order.created_at >= day_start(date_from))
    if date_to is not None:
        # "to" covers the whole day
        query = query.filter(Order.created_at < next_day_start(date_to))
    return query


def fetch_dashboard_stats(
    date_from: str | None = None,
    date_to: str | None = None,
    *,
    today: date | None = None,
) -> dict:
    """
    Dashboard payload.

    Order figures (totalOrders, totalOrderAmount, recentOrders) respect the
    optional date range; product/brand counts and salesData do not.
    totalRevenue is summed over the most recent sales_data rows.
    """
    config = current_app.config
    start_day = _parse_day(date_from, "from")
    end_day = _parse_day(date_to, "to")
    today = today or utcnow().date()

    range_rows = _range_filter(
        db.session.query(Order.created_at, Order.total), start_day, end_day
    ).all()
    totals = summarize_orders(range_rows)

    recent_orders = (
        _range_filter(db.session.query(Order), start_day, end_day)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .limit(config["DASHBOARD_RECENT_ORDERS"])
        .all()
    )

    sales_rows = (
        db.session.query(SalesData)
        .order_by(SalesData.date.desc())
        .limit(config["DASHBOARD_SALES_ROWS"])
        .all()
    )

    chart_start, chart_end = resolve_chart_window(
        start_day,
        end_day,
        today=today,
        default_days=config["DASHBOARD_CHART_DAYS"],
    )
    chart_rows = (
        db.session.query(Order.created_at, Order.total)
        .filter(
            Order.created_at >= day_start(chart_start),
            Order.created_at < next_day_start(chart_end),
        )
        .order_by(Order.created_at.asc())
        .all()
    )

    total_products = db.session.query(func.count(Product.id)).scalar() or 0
    total_brands = db.session.query(func.count(Brand.id)).scalar() or 0

    return {
        "totalRevenue": sum_revenue(sales_rows),
        "totalOrders": totals["totalOrders"],
        "totalOrderAmount": totals["totalOrderAmount"],
        "totalProducts": int(total_products),
        "totalBrands": int(total_brands),
        "recentOrders": [o.to_dict() for o in recent_orders],
        "salesData": [row.to_dict() for row in sales_rows],
        "dailyOrderStats": aggregate_orders_by_date(chart_rows, chart_start, chart_end),
        "range": {
            "from": start_day.isoformat() if start_day else None,
            "to": end_day.isoformat() if end_day else None,
            "chart_start": chart_start.isoformat(),
            "chart_end": chart_end.isoformat(),
        },
    }
