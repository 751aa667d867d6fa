# backend/backoffice/services/products_service.py
"""
Products Service

Products belong to exactly one brand. Stock on a variant-tracked product is
owned by inventory_service; manual stock edits are only accepted while a
product has never had size variants.
"""
from __future__ import annotations

from ..extensions import db
from ..models import Brand, Product
from ..validation import ConflictError, NotFoundError
from .concurrency import run_in_transaction
from .inventory_service import product_stock_level, variant_stock_level

PRODUCT_MUTABLE_FIELDS = {
    "name",
    "description",
    "category",
    "price",
    "original_price",
    "stock",
    "images",
    "tags",
    "featured",
    "size_chart_image",
    "description_image",
}


def apply_product_patch(p: Product, patch: dict) -> None:
    for k, v in patch.items():
        if k not in PRODUCT_MUTABLE_FIELDS:
            continue
        setattr(p, k, v)


def _require_brand(brand_id: int) -> Brand:
    brand = db.session.query(Brand).filter(Brand.id == brand_id).first()
    if brand is None:
        raise NotFoundError("Brand not found", brand_id=brand_id)
    return brand


def _with_stock_level(p: Product, include_variants: bool = False) -> dict:
    data = p.to_dict(include_variants=include_variants)
    data["stock_level"] = product_stock_level(p.stock)
    if include_variants:
        for variant in data["product_variants"]:
            variant["stock_level"] = variant_stock_level(variant["stock"])
    return data


def list_products(
    brand_id: int | None = None,
    page: int | None = None,
    per_page: int | None = None,
) -> dict:
    """
    Product listing, newest first, with optional brand filter and pagination.

    Args:
        brand_id: Only products of this brand (must exist)
        page: Page number (1-indexed). If None, returns all items.
        per_page: Items per page (default 20, max 100)

    Returns:
        Dict with 'items', 'count', and pagination metadata if paginated.
    """
    base_query = db.session.query(Product)
    if brand_id is not None:
        _require_brand(brand_id)
        base_query = base_query.filter(Product.brand_id == brand_id)
    base_query = base_query.order_by(Product.created_at.desc(), Product.id.desc())

    if page is None:
        products = base_query.all()
        return {
            "items": [_with_stock_level(p) for p in products],
            "count": len(products),
        }

    per_page = min(per_page or 20, 100)
    page = max(page, 1)

    total = base_query.count()
    total_pages = (total + per_page - 1) // per_page if total > 0 else 1

    products = base_query.offset((page - 1) * per_page).limit(per_page).all()

    return {
        "items": [_with_stock_level(p) for p in products],
        "count": len(products),
        "pagination": {
            "page": page,
            "per_page": per_page,
            "total": total,
            "total_pages": total_pages,
            "has_next": page < total_pages,
            "has_prev": page > 1,
        },
    }


def get_product(*, product_id: int) -> dict:
    p = db.session.query(Product).filter(Product.id == product_id).first()
    if p is None:
        raise NotFoundError("Product not found", product_id=product_id)
    return _with_stock_level(p, include_variants=True)


def create_product(*, brand_id: int, patch: dict) -> dict:
    """
    Create a product under a brand from a validated patch dict.

    Raises:
        NotFoundError: brand does not exist
    """
    def _op() -> dict:
        _require_brand(brand_id)
        p = Product(brand_id=brand_id, images=[])
        apply_product_patch(p, patch)
        db.session.add(p)
        db.session.flush()
        return _with_stock_level(p)

    return run_in_transaction(_op)


def update_product(*, product_id: int, patch: dict, brand_id: int | None = None) -> dict:
    """
    Update a product.

    brand_id moves the product to another (existing) brand.

    Raises:
        NotFoundError: product or target brand does not exist
        ConflictError: manual stock edit on a variant-tracked product
    """
    def _op() -> dict:
        p = db.session.query(Product).filter(Product.id == product_id).first()
        if p is None:
            raise NotFoundError("Product not found", product_id=product_id)

        if "stock" in patch and p.variant_tracked and patch["stock"] != p.stock:
            raise ConflictError(
                "Stock is managed by size variants for this product.",
                product_id=p.id,
                stock=p.stock,
            )

        if brand_id is not None and brand_id != p.brand_id:
            _require_brand(brand_id)
            p.brand_id = brand_id

        apply_product_patch(p, patch)
        db.session.flush()
        return _with_stock_level(p)

    return run_in_transaction(_op)


def delete_product(*, product_id: int) -> None:
    """Hard-delete a product; its variants go with it."""
    def _op() -> None:
        p = db.session.query(Product).filter(Product.id == product_id).first()
        if p is None:
            raise NotFoundError("Product not found", product_id=product_id)
        db.session.delete(p)

    run_in_transaction(_op)
