# Overview: Size-variant inventory and the product stock rollup.

"""
Inventory Service

ROLLUP RULE: once a product has had a size variant it is "variant tracked"
and products.stock always equals the sum of its variant stocks. The total is
recomputed eagerly, in the same transaction as every variant write, so that
catalog listings can read products.stock without joining variants.

The transition is one way: deleting the last variant leaves the product at
stock 0 rather than restoring the old manual quantity.
"""
from __future__ import annotations

from typing import Any

from flask import current_app
from sqlalchemy import func

from ..extensions import db
from ..models import Product, ProductVariant
from ..validation import NotFoundError, ValidationError, enforce_rules_variant
from .concurrency import lock_for_update, run_in_transaction

OUT_OF_STOCK = "out_of_stock"
LOW_STOCK = "low_stock"
IN_STOCK = "in_stock"

VARIANT_MUTABLE_FIELDS = {"size", "stock", "sort_order"}


def stock_level(stock: int, *, threshold: int) -> str:
    """Listing flag for a stock count. Presentation policy, not a data invariant."""
    if stock <= 0:
        return OUT_OF_STOCK
    if stock < threshold:
        return LOW_STOCK
    return IN_STOCK


def product_stock_level(stock: int, threshold: int | None = None) -> str:
    if threshold is None:
        threshold = current_app.config["LOW_STOCK_PRODUCT_THRESHOLD"]
    return stock_level(stock, threshold=threshold)


def variant_stock_level(stock: int, threshold: int | None = None) -> str:
    if threshold is None:
        threshold = current_app.config["LOW_STOCK_VARIANT_THRESHOLD"]
    return stock_level(stock, threshold=threshold)


def _require_stock(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("stock must be an integer")
    if value < 0:
        raise ValidationError("stock must be >= 0")
    return value


def _require_sort_order(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("sort_order must be an integer")
    return value


def _load_product(product_id: int, *, lock: bool = False) -> Product:
    query = db.session.query(Product).filter(Product.id == product_id)
    if lock:
        query = lock_for_update(query)
    product = query.first()
    if product is None:
        raise NotFoundError("Product not found", product_id=product_id)
    return product


def _load_variant(variant_id: int) -> ProductVariant:
    variant = db.session.query(ProductVariant).filter(ProductVariant.id == variant_id).first()
    if variant is None:
        raise NotFoundError("Variant not found", variant_id=variant_id)
    return variant


def sum_variant_stock(product_id: int) -> int:
    total = (
        db.session.query(func.coalesce(func.sum(ProductVariant.stock), 0))
        .filter(ProductVariant.product_id == product_id)
        .scalar()
    )
    return int(total or 0)


def _apply_rollup(product: Product) -> int:
    """
    Write sum(variant.stock) into product.stock for variant-tracked products.

    Must run inside the caller's transaction, after the variant change has
    been added to the session (autoflush makes it visible to the SUM).
    Products that never had variants keep their manual stock.
    """
    has_variants = db.session.query(
        db.session.query(ProductVariant.id).filter(ProductVariant.product_id == product.id).exists()
    ).scalar()
    if has_variants:
        product.variant_tracked = True
    if not product.variant_tracked:
        return product.stock

    total = sum_variant_stock(product.id)
    if product.stock != total:
        current_app.logger.info(
            "Product %s stock rollup %s -> %s", product.id, product.stock, total
        )
        product.stock = total
    return total


def list_variants(product_id: int) -> list[dict]:
    """Variants of a product in display order (sort_order, then id)."""
    _load_product(product_id)
    variants = (
        db.session.query(ProductVariant)
        .filter(ProductVariant.product_id == product_id)
        .order_by(ProductVariant.sort_order.asc(), ProductVariant.id.asc())
        .all()
    )
    return [v.to_dict() for v in variants]


def create_variant(*, product_id: int, size: Any, stock: Any = 0, sort_order: Any = 0) -> dict:
    """
    Add a size to a product and roll the product's stock up.

    Raises:
        ValidationError: blank size or negative stock (nothing is written)
        NotFoundError: product does not exist
    """
    if not isinstance(size, str) or not size.strip():
        raise ValidationError("size is required")
    size = size.strip()
    stock = _require_stock(stock)
    sort_order = _require_sort_order(sort_order)

    def _op() -> dict:
        product = _load_product(product_id, lock=True)
        variant = ProductVariant(product_id=product.id, size=size, stock=stock, sort_order=sort_order)
        db.session.add(variant)
        db.session.flush()
        total = _apply_rollup(product)
        return {**variant.to_dict(), "product_stock": total}

    return run_in_transaction(_op)


def update_variant(*, variant_id: int, patch: dict) -> dict:
    """
    Update size / stock / sort_order of a variant and roll the product's stock up.

    Raises:
        ValidationError: unknown field, blank size or negative stock (stored values untouched)
        NotFoundError: variant does not exist
    """
    unknown = sorted(set(patch) - VARIANT_MUTABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Field not allowed: {', '.join(unknown)}")
    patch = dict(patch)
    if "size" in patch:
        if not isinstance(patch["size"], str):
            raise ValidationError("size is required")
        patch["size"] = patch["size"].strip()
    if "stock" in patch:
        patch["stock"] = _require_stock(patch["stock"])
    if "sort_order" in patch:
        patch["sort_order"] = _require_sort_order(patch["sort_order"])
    enforce_rules_variant(patch)

    def _op() -> dict:
        variant = _load_variant(variant_id)
        product = _load_product(variant.product_id, lock=True)
        for key, value in patch.items():
            setattr(variant, key, value)
        db.session.flush()
        total = _apply_rollup(product)
        return {**variant.to_dict(), "product_stock": total}

    return run_in_transaction(_op)


def update_variant_stock(*, variant_id: int, new_stock: Any) -> dict:
    return update_variant(variant_id=variant_id, patch={"stock": new_stock})


def delete_variant(*, variant_id: int) -> dict:
    """
    Remove a variant and roll the product's stock up over what remains.

    Returns {"product_id", "product_stock"}.
    """
    def _op() -> dict:
        variant = _load_variant(variant_id)
        product = _load_product(variant.product_id, lock=True)
        product.variant_tracked = True
        db.session.delete(variant)
        db.session.flush()
        total = _apply_rollup(product)
        return {"product_id": product.id, "product_stock": total}

    return run_in_transaction(_op)


def recompute_product_stock(*, product_id: int) -> int:
    """Recompute and persist one product's rollup. Idempotent."""
    def _op() -> int:
        product = _load_product(product_id, lock=True)
        return _apply_rollup(product)

    return run_in_transaction(_op)


def recompute_all_product_stock() -> dict:
    """
    Reconciliation pass over every variant-tracked product.

    Returns {"checked": n, "corrected": [product ids whose stock drifted]}.
    """
    def _op() -> dict:
        tracked_ids = db.session.query(ProductVariant.product_id).distinct()
        products = (
            db.session.query(Product)
            .filter((Product.variant_tracked.is_(True)) | (Product.id.in_(tracked_ids)))
            .order_by(Product.id.asc())
            .all()
        )
        corrected = []
        for product in products:
            before = product.stock
            if _apply_rollup(product) != before:
                corrected.append(product.id)
        return {"checked": len(products), "corrected": corrected}

    result = run_in_transaction(_op)
    if result["corrected"]:
        current_app.logger.warning("Stock rollup drift corrected for products %s", result["corrected"])
    return result


def low_stock_report() -> dict:
    """Products and variants currently under their listing thresholds."""
    product_threshold = current_app.config["LOW_STOCK_PRODUCT_THRESHOLD"]
    variant_threshold = current_app.config["LOW_STOCK_VARIANT_THRESHOLD"]

    products = (
        db.session.query(Product)
        .filter(Product.stock < product_threshold)
        .order_by(Product.stock.asc(), Product.id.asc())
        .all()
    )
    variants = (
        db.session.query(ProductVariant)
        .filter(ProductVariant.stock < variant_threshold)
        .order_by(ProductVariant.stock.asc(), ProductVariant.id.asc())
        .all()
    )
    return {
        "product_threshold": product_threshold,
        "variant_threshold": variant_threshold,
        "products": [
            {**p.to_dict(), "stock_level": product_stock_level(p.stock, product_threshold)}
            for p in products
        ],
        "variants": [
            {**v.to_dict(), "stock_level": variant_stock_level(v.stock, variant_threshold)}
            for v in variants
        ],
    }
