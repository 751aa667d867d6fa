# Overview: Pytest coverage for dashboard statistics and daily order aggregation.

"""
Dashboard Statistics Tests

Covers the pure aggregation helpers (dense daily series, exact sums) and the
database-backed dashboard payload with its inclusive date range.
"""

from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest
from backoffice.models import SalesData
from backoffice.services import dashboard_service
from backoffice.services.dashboard_service import (
    aggregate_orders_by_date,
    resolve_chart_window,
    summarize_orders,
)
from backoffice.validation import ValidationError


class TestAggregateOrdersByDate:
    """Dense per-day order series."""

    def test_one_entry_per_day_zero_filled(self):
        """Every day in the window appears once, ascending, empty days zeroed."""
        orders = [
            {"created_at": "2024-03-02T10:00:00Z", "total": 1000},
            {"created_at": "2024-03-02T23:59:59", "total": 2500},
        ]
        series = aggregate_orders_by_date(orders, date(2024, 3, 1), date(2024, 3, 3))

        assert series == [
            {"date": "2024-03-01", "orderCount": 0, "totalAmount": 0},
            {"date": "2024-03-02", "orderCount": 2, "totalAmount": 3500},
            {"date": "2024-03-03", "orderCount": 0, "totalAmount": 0},
        ]

    def test_orders_outside_window_and_undated_are_skipped(self):
        """Out-of-window days and missing timestamps never create buckets."""
        orders = [
            {"created_at": "2024-02-29T12:00:00", "total": 10},
            {"created_at": "2024-03-04T00:00:00", "total": 20},
            {"created_at": None, "total": 40},
            {"created_at": "", "total": 80},
            {"created_at": "2024-03-01 08:00:00", "total": 5},
        ]
        series = aggregate_orders_by_date(orders, date(2024, 3, 1), date(2024, 3, 3))

        assert [d["date"] for d in series] == ["2024-03-01", "2024-03-02", "2024-03-03"]
        assert series[0] == {"date": "2024-03-01", "orderCount": 1, "totalAmount": 5}
        assert sum(d["orderCount"] for d in series) == 1

    def test_empty_input_gives_contiguous_zero_days(self):
        series = aggregate_orders_by_date([], date(2024, 2, 27), date(2024, 3, 2))

        assert [d["date"] for d in series] == [
            "2024-02-27", "2024-02-28", "2024-02-29", "2024-03-01", "2024-03-02",
        ]
        assert all(d["orderCount"] == 0 and d["totalAmount"] == 0 for d in series)

    def test_same_day_totals(self):
        orders = [
            {"created_at": "2024-03-02T10:00:00", "total": 1000},
            {"created_at": "2024-03-02T18:30:00", "total": 2500},
            {"created_at": "2024-03-02T09:15:00", "total": 1500},
        ]
        series = aggregate_orders_by_date(orders, date(2024, 3, 2), date(2024, 3, 2))

        assert series == [{"date": "2024-03-02", "orderCount": 3, "totalAmount": 5000}]

    def test_start_after_end_is_empty(self):
        assert aggregate_orders_by_date([], date(2024, 3, 5), date(2024, 3, 1)) == []

    def test_single_day_window(self):
        series = aggregate_orders_by_date(
            [{"created_at": datetime(2024, 3, 1, 0, 0), "total": 7}],
            date(2024, 3, 1),
            date(2024, 3, 1),
        )
        assert series == [{"date": "2024-03-01", "orderCount": 1, "totalAmount": 7}]

    def test_accepts_model_like_rows(self):
        """Rows may be objects with attributes instead of mappings."""
        class Row:
            def __init__(self, created_at, total):
                self.created_at = created_at
                self.total = total

        series = aggregate_orders_by_date(
            [Row(datetime(2024, 3, 2, 15, 0), 12000)],
            datetime(2024, 3, 2, 8, 0),
            datetime(2024, 3, 2, 9, 0),
        )
        assert series == [{"date": "2024-03-02", "orderCount": 1, "totalAmount": 12000}]

    def test_amounts_are_summed_exactly(self):
        """No floating-point drift when totals carry fractions."""
        orders = [{"created_at": "2024-03-01", "total": 0.1} for _ in range(3)]
        series = aggregate_orders_by_date(orders, date(2024, 3, 1), date(2024, 3, 1))

        assert series[0]["totalAmount"] == Decimal("0.3")

    def test_series_totals_match_summary(self):
        """Summed over the window, the series equals the overall summary."""
        orders = [
            {"created_at": f"2024-03-0{day}T1{day}:00:00", "total": day * 1000}
            for day in range(1, 8)
        ]
        series = aggregate_orders_by_date(orders, date(2024, 3, 1), date(2024, 3, 7))
        summary = summarize_orders(orders)

        assert sum(d["orderCount"] for d in series) == summary["totalOrders"] == 7
        assert sum(d["totalAmount"] for d in series) == summary["totalOrderAmount"] == 28000


class TestSummaryAndWindow:
    """Summary totals and the default chart window."""

    def test_summarize_orders(self):
        summary = summarize_orders([{"total": 1000}, {"total": 2500}, {"total": None}])
        assert summary == {"totalOrders": 3, "totalOrderAmount": 3500}

    def test_summarize_empty(self):
        assert summarize_orders([]) == {"totalOrders": 0, "totalOrderAmount": 0}

    def test_default_window_is_last_seven_days_including_today(self):
        start, end = resolve_chart_window(None, None, today=date(2024, 3, 7))
        assert (start, end) == (date(2024, 3, 1), date(2024, 3, 7))

    def test_explicit_window_is_kept(self):
        start, end = resolve_chart_window(date(2024, 1, 1), date(2024, 1, 3), today=date(2024, 3, 7))
        assert (start, end) == (date(2024, 1, 1), date(2024, 1, 3))


class TestFetchDashboardStats:
    """Database-backed dashboard payload."""

    def test_to_date_covers_whole_day(self, db_session, make_order):
        """Orders late on the "to" day count; the next midnight does not."""
        make_order(1000, created_at=datetime(2024, 3, 1, 9, 0))
        make_order(2000, created_at=datetime(2024, 3, 2, 23, 59, 59))
        make_order(4000, created_at=datetime(2024, 3, 3, 0, 0))

        stats = dashboard_service.fetch_dashboard_stats("2024-03-01", "2024-03-02")

        assert stats["totalOrders"] == 2
        assert stats["totalOrderAmount"] == 3000
        assert stats["dailyOrderStats"] == [
            {"date": "2024-03-01", "orderCount": 1, "totalAmount": 1000},
            {"date": "2024-03-02", "orderCount": 1, "totalAmount": 2000},
        ]
        assert stats["range"] == {
            "from": "2024-03-01",
            "to": "2024-03-02",
            "chart_start": "2024-03-01",
            "chart_end": "2024-03-02",
        }

    def test_default_chart_is_seven_days(self, db_session, make_order):
        make_order(500, created_at=datetime(2024, 3, 7, 12, 0))
        make_order(900, created_at=datetime(2024, 2, 20, 12, 0))

        stats = dashboard_service.fetch_dashboard_stats(today=date(2024, 3, 7))

        assert len(stats["dailyOrderStats"]) == 7
        assert stats["dailyOrderStats"][0]["date"] == "2024-03-01"
        assert stats["dailyOrderStats"][-1] == {"date": "2024-03-07", "orderCount": 1, "totalAmount": 500}
        # Without a range the totals cover every order
        assert stats["totalOrders"] == 2
        assert stats["totalOrderAmount"] == 1400

    def test_recent_orders_newest_first_and_limited(self, db_session, make_order):
        base = datetime(2024, 3, 1, 8, 0)
        for i in range(7):
            make_order(100 * (i + 1), created_at=base + timedelta(hours=i))

        stats = dashboard_service.fetch_dashboard_stats()

        totals = [o["total"] for o in stats["recentOrders"]]
        assert totals == [700, 600, 500, 400, 300]

    def test_revenue_from_latest_sales_rows(self, db_session, brand, product):
        for i in range(8):
            db_session.add(SalesData(date=date(2024, 3, 1) + timedelta(days=i), revenue=100, orders=1))
        db_session.commit()

        stats = dashboard_service.fetch_dashboard_stats()

        assert stats["totalRevenue"] == 700
        assert len(stats["salesData"]) == 7
        assert stats["salesData"][0]["date"] == "2024-03-08"
        assert stats["totalProducts"] == 1
        assert stats["totalBrands"] == 1

    def test_from_after_to_gives_empty_chart(self, db_session, make_order):
        make_order(1000, created_at=datetime(2024, 3, 2, 9, 0))

        stats = dashboard_service.fetch_dashboard_stats("2024-03-05", "2024-03-01")

        assert stats["dailyOrderStats"] == []
        assert stats["totalOrders"] == 0

    def test_invalid_date_is_validation_error(self, db_session):
        with pytest.raises(ValidationError):
            dashboard_service.fetch_dashboard_stats("03/01/2024", None)


class TestDashboardRoute:
    """GET /api/dashboard/stats"""

    def test_stats_route(self, client, make_order):
        make_order(1500, created_at=datetime(2024, 3, 1, 9, 0))

        response = client.get('/api/dashboard/stats?from=2024-03-01&to=2024-03-01')

        assert response.status_code == 200
        body = response.get_json()
        assert body["success"] is True
        assert body["data"]["totalOrderAmount"] == 1500
        assert body["data"]["dailyOrderStats"][0]["orderCount"] == 1

    def test_bad_date_is_400_result(self, client):
        response = client.get('/api/dashboard/stats?from=yesterday')

        assert response.status_code == 400
        body = response.get_json()
        assert body["success"] is False
        assert "from" in body["error"]
