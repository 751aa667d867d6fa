# backend/backoffice/config.py
from __future__ import annotations
import os


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/backoffice.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL",  # optional alternative location (e.g. postgresql://...)
        "sqlite:///backoffice.sqlite3",
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Listing flags: variant rows below 10, product totals below 20
    LOW_STOCK_VARIANT_THRESHOLD = _int_env("LOW_STOCK_VARIANT_THRESHOLD", 10)
    LOW_STOCK_PRODUCT_THRESHOLD = _int_env("LOW_STOCK_PRODUCT_THRESHOLD", 20)

    # Dashboard
    DASHBOARD_CHART_DAYS = _int_env("DASHBOARD_CHART_DAYS", 7)
    DASHBOARD_RECENT_ORDERS = _int_env("DASHBOARD_RECENT_ORDERS", 5)
    DASHBOARD_SALES_ROWS = _int_env("DASHBOARD_SALES_ROWS", 7)

    CORS_ORIGINS = {
        origin.strip()
        for origin in os.environ.get(
            "CORS_ORIGINS",
            "http://localhost:3000,http://127.0.0.1:3000",
        ).split(",")
        if origin.strip()
    }


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
