# Overview: Service-layer operations for orders; status changes, payment status, deletion.

from __future__ import annotations

from flask import current_app
from sqlalchemy import String, cast, func, or_
from sqlalchemy.orm import selectinload

from ..extensions import db
from ..models import Order, OrderItem, Product
from ..validation import (
    ORDER_STATUSES,
    ConflictError,
    NotFoundError,
    require_order_status,
    require_payment_status,
)
from .concurrency import run_in_transaction

# Forward order of fulfillment; "cancelled" is reachable from any non-terminal status
FULFILLMENT_FLOW = ("pending", "processing", "shipped", "delivered")
TERMINAL_STATUSES = {"delivered", "cancelled"}


def check_status_transition(current: str, new: str) -> None:
    """
    Raises ConflictError unless current -> new is allowed.

    Fulfillment only moves forward (steps may be skipped); delivered and
    cancelled orders are final. Setting the current status again is a no-op.
    """
    if current == new:
        return
    if current in TERMINAL_STATUSES:
        raise ConflictError(f"Order is already {current}.", status=current)
    if new == "cancelled":
        return
    if current not in FULFILLMENT_FLOW or FULFILLMENT_FLOW.index(new) < FULFILLMENT_FLOW.index(current):
        raise ConflictError(f"Cannot move order from {current} to {new}.", status=current)


def _load_order(order_id: int) -> Order:
    order = (
        db.session.query(Order)
        .options(selectinload(Order.items).selectinload(OrderItem.product))
        .filter(Order.id == order_id)
        .first()
    )
    if order is None:
        raise NotFoundError("Order not found", order_id=order_id)
    return order


def status_counts() -> dict:
    counts = {status: 0 for status in ORDER_STATUSES}
    rows = db.session.query(Order.status, func.count(Order.id)).group_by(Order.status).all()
    for status, count in rows:
        if status in counts:
            counts[status] = int(count)
    return counts


def list_orders(
    status: str | None = None,
    brand_id: int | None = None,
    search: str | None = None,
) -> dict:
    """
    Orders newest first, each with its line items and product summary.

    Args:
        status: Only orders in this status
        brand_id: Only orders containing a product of this brand
        search: Substring match on order id, customer name/email/phone
    """
    query = db.session.query(Order).options(
        selectinload(Order.items).selectinload(OrderItem.product)
    )
    if status:
        query = query.filter(Order.status == require_order_status(status))
    if brand_id is not None:
        brand_orders = (
            db.session.query(OrderItem.order_id)
            .join(Product, Product.id == OrderItem.product_id)
            .filter(Product.brand_id == brand_id)
        )
        query = query.filter(Order.id.in_(brand_orders))
    if search and search.strip():
        q = f"%{search.strip()}%"
        query = query.filter(
            or_(
                cast(Order.id, String).ilike(q),
                Order.customer_name.ilike(q),
                Order.customer_email.ilike(q),
                Order.customer_phone.ilike(q),
                Order.shipping_phone.ilike(q),
            )
        )

    orders = query.order_by(Order.created_at.desc(), Order.id.desc()).all()
    return {
        "items": [o.to_dict(include_items=True) for o in orders],
        "count": len(orders),
        "status_counts": status_counts(),
    }


def get_order(*, order_id: int) -> dict:
    return _load_order(order_id).to_dict(include_items=True)


def update_order_status(*, order_id: int, status: str) -> dict:
    """
    Raises:
        ValidationError: status not in the enum
        NotFoundError: order does not exist
        ConflictError: transition not allowed
    """
    status = require_order_status(status)

    def _op() -> dict:
        order = _load_order(order_id)
        check_status_transition(order.status, status)
        if order.status != status:
            current_app.logger.info("Order %s status %s -> %s", order.id, order.status, status)
            order.status = status
        db.session.flush()
        return order.to_dict()

    return run_in_transaction(_op)


def update_payment_status(*, order_id: int, payment_status: str) -> dict:
    payment_status = require_payment_status(payment_status)

    def _op() -> dict:
        order = _load_order(order_id)
        order.payment_status = payment_status
        db.session.flush()
        return order.to_dict()

    return run_in_transaction(_op)


def delete_order(*, order_id: int) -> None:
    """Delete an order together with its line items."""
    def _op() -> None:
        order = _load_order(order_id)
        db.session.delete(order)

    run_in_transaction(_op)
