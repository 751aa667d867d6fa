# Overview: Service-layer operations for brands, including the delete guard.

from __future__ import annotations

from flask import current_app
from sqlalchemy import func

from ..extensions import db
from ..models import Brand, Product
from ..validation import ConflictError, NotFoundError, require_contract_window
from .concurrency import lock_for_update, run_in_transaction

BRAND_MUTABLE_FIELDS = {
    "name",
    "eng_name",
    "slug",
    "description",
    "logo",
    "banner",
    "featured",
    "order_detail_image",
    "valid_period_start",
    "valid_period_end",
}


def apply_brand_patch(b: Brand, patch: dict) -> None:
    for k, v in patch.items():
        if k not in BRAND_MUTABLE_FIELDS:
            continue
        setattr(b, k, v)


def _load_brand(brand_id: int, *, lock: bool = False) -> Brand:
    query = db.session.query(Brand).filter(Brand.id == brand_id)
    if lock:
        query = lock_for_update(query)
    brand = query.first()
    if brand is None:
        raise NotFoundError("Brand not found", brand_id=brand_id)
    return brand


def _require_unique_slug(slug: str, *, exclude_id: int | None = None) -> None:
    query = db.session.query(Brand.id).filter(Brand.slug == slug)
    if exclude_id is not None:
        query = query.filter(Brand.id != exclude_id)
    if query.first() is not None:
        raise ConflictError("Slug already exists.", slug=slug)


def count_brand_products(brand_id: int) -> int:
    return int(
        db.session.query(func.count(Product.id)).filter(Product.brand_id == brand_id).scalar() or 0
    )


def can_delete_brand(*, brand_id: int) -> bool:
    """Whether the brand may be deleted: it must own no products."""
    _load_brand(brand_id)
    return count_brand_products(brand_id) == 0


def brand_delete_check(*, brand_id: int) -> dict:
    """Returns {"brand_id", "can_delete", "product_count"} for the delete confirmation."""
    _load_brand(brand_id)
    count = count_brand_products(brand_id)
    return {"brand_id": brand_id, "can_delete": count == 0, "product_count": count}


def list_brands(search: str | None = None) -> dict:
    """Brands newest first, each with its product count."""
    counts = dict(
        db.session.query(Product.brand_id, func.count(Product.id))
        .group_by(Product.brand_id)
        .all()
    )
    query = db.session.query(Brand)
    if search:
        query = query.filter(Brand.name.ilike(f"%{search.strip()}%"))
    brands = query.order_by(Brand.created_at.desc(), Brand.id.desc()).all()
    items = [{**b.to_dict(), "product_count": int(counts.get(b.id, 0))} for b in brands]
    return {"items": items, "count": len(items)}


def get_brand(*, brand_id: int) -> dict:
    brand = _load_brand(brand_id)
    return {**brand.to_dict(), "product_count": count_brand_products(brand_id)}


def create_brand(*, patch: dict) -> dict:
    """
    Raises:
        ConflictError: slug already taken
    """
    def _op() -> dict:
        _require_unique_slug(patch["slug"])
        brand = Brand()
        apply_brand_patch(brand, patch)
        db.session.add(brand)
        db.session.flush()
        return {**brand.to_dict(), "product_count": 0}

    return run_in_transaction(_op)


def update_brand(*, brand_id: int, patch: dict) -> dict:
    def _op() -> dict:
        brand = _load_brand(brand_id)
        if "slug" in patch and patch["slug"] != brand.slug:
            _require_unique_slug(patch["slug"], exclude_id=brand.id)
        apply_brand_patch(brand, patch)
        require_contract_window(brand.valid_period_start, brand.valid_period_end)
        db.session.flush()
        return {**brand.to_dict(), "product_count": count_brand_products(brand.id)}

    return run_in_transaction(_op)


def delete_brand(*, brand_id: int) -> None:
    """
    Delete a brand that owns no products.

    The product count and the delete run in one transaction with the brand
    row locked, so a product created concurrently either lands before the
    count (and blocks the delete) or fails its brand FK afterwards.

    Raises:
        NotFoundError: brand does not exist
        ConflictError: brand still owns products (details carry product_count)
    """
    def _op() -> None:
        brand = _load_brand(brand_id, lock=True)
        count = count_brand_products(brand.id)
        if count:
            current_app.logger.info("Refused to delete brand %s: %d products", brand.id, count)
            raise ConflictError(
                f"Brand still has {count} product(s). Delete or move them first.",
                product_count=count,
            )
        db.session.delete(brand)

    run_in_transaction(_op)
