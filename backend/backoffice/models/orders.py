from __future__ import annotations

from ..extensions import db
from backoffice.time_utils import to_utc_z, utcnow


class Order(db.Model):
    """
    Customer order.

    Mutated only through status updates (orders_service); deleting an order
    removes its line items.
    """
    __tablename__ = "orders"
    __table_args__ = (
        # Dashboard range reads scan created_at
        db.Index("ix_orders_created_at", "created_at"),
        db.Index("ix_orders_status_created", "status", "created_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), nullable=False, index=True)
    customer_name = db.Column(db.String(120), nullable=True)
    customer_email = db.Column(db.String(255), nullable=True)
    customer_phone = db.Column(db.String(40), nullable=True)

    # Whole Won
    total = db.Column(db.Integer, nullable=False)

    status = db.Column(db.String(16), nullable=False, default="pending")
    payment_method = db.Column(db.String(32), nullable=False)
    payment_status = db.Column(db.String(16), nullable=False, default="pending")

    shipping_street = db.Column(db.String(255), nullable=False)
    shipping_city = db.Column(db.String(120), nullable=False)
    shipping_state = db.Column(db.String(120), nullable=False)
    shipping_zip_code = db.Column(db.String(20), nullable=False)
    shipping_country = db.Column(db.String(80), nullable=False)
    shipping_phone = db.Column(db.String(40), nullable=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=True, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=True, default=utcnow, onupdate=utcnow)

    items = db.relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )

    def __repr__(self) -> str:
        return f"<Order id={self.id} status={self.status!r} total={self.total}>"

    def to_dict(self, include_items: bool = False) -> dict:
        data = {
            "id": self.id,
            "user_id": self.user_id,
            "customer_name": self.customer_name,
            "customer_email": self.customer_email,
            "customer_phone": self.customer_phone,
            "total": self.total,
            "status": self.status,
            "payment_method": self.payment_method,
            "payment_status": self.payment_status,
            "shipping_street": self.shipping_street,
            "shipping_city": self.shipping_city,
            "shipping_state": self.shipping_state,
            "shipping_zip_code": self.shipping_zip_code,
            "shipping_country": self.shipping_country,
            "shipping_phone": self.shipping_phone,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
        if include_items:
            data["order_items"] = [item.to_dict() for item in self.items]
        return data


class OrderItem(db.Model):
    """
    Order line.

    price_at_time is the unit price snapshot taken at purchase. It is never
    recomputed from the current product price.
    """
    __tablename__ = "order_items"
    __table_args__ = (
        db.CheckConstraint("quantity > 0", name="ck_order_items_quantity_positive"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(
        db.Integer,
        db.ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=False, index=True)
    variant_id = db.Column(
        db.Integer,
        db.ForeignKey("product_variants.id", ondelete="SET NULL"),
        nullable=True,
    )
    size = db.Column(db.String(50), nullable=True)
    quantity = db.Column(db.Integer, nullable=False)
    price_at_time = db.Column(db.Integer, nullable=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    order = db.relationship("Order", back_populates="items")
    product = db.relationship("Product")

    def to_dict(self) -> dict:
        product = self.product
        return {
            "id": self.id,
            "order_id": self.order_id,
            "product_id": self.product_id,
            "variant_id": self.variant_id,
            "size": self.size,
            "quantity": self.quantity,
            "price_at_time": self.price_at_time,
            "line_total": self.quantity * self.price_at_time,
            "created_at": to_utc_z(self.created_at),
            "products": {
                "name": product.name,
                "images": list(product.images or []),
                "brand_id": product.brand_id,
            } if product is not None else None,
        }
