from __future__ import annotations

from ..extensions import db
from backoffice.time_utils import to_utc_z, utcnow


class SalesData(db.Model):
    """
    Precomputed daily revenue rollup.

    Written by the storefront side; the back office only reads it for the
    dashboard's totalRevenue figure.
    """
    __tablename__ = "sales_data"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    date = db.Column(db.Date, nullable=False, unique=True, index=True)
    revenue = db.Column(db.Integer, nullable=False, default=0)
    orders = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "revenue": self.revenue,
            "orders": self.orders,
            "created_at": to_utc_z(self.created_at),
        }
