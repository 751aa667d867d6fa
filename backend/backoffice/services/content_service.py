# Overview: Service-layer operations for promotional banner content.

from __future__ import annotations

from ..extensions import db
from ..models import Brand, BrandHeroBanner, HeroBanner
from ..validation import NotFoundError
from .concurrency import run_in_transaction

HERO_BANNER_FIELDS = {"title", "subtitle", "link", "tags", "display_order", "image_link", "is_active"}
BRAND_HERO_BANNER_FIELDS = {"title", "subtitle", "link", "color", "display_order", "image_link", "is_active"}


def _apply(obj, patch: dict, allowed: set[str]) -> None:
    for k, v in patch.items():
        if k in allowed:
            setattr(obj, k, v)


def _ordered(query, model):
    return query.order_by(model.display_order.asc(), model.id.asc())


# --- Storefront hero banners -------------------------------------------------


def list_hero_banners(*, active_only: bool = False) -> list[dict]:
    query = db.session.query(HeroBanner)
    if active_only:
        query = query.filter(HeroBanner.is_active.is_(True))
    return [b.to_dict() for b in _ordered(query, HeroBanner).all()]


def _load_hero_banner(banner_id: int) -> HeroBanner:
    banner = db.session.query(HeroBanner).filter(HeroBanner.id == banner_id).first()
    if banner is None:
        raise NotFoundError("Banner not found", banner_id=banner_id)
    return banner


def create_hero_banner(*, patch: dict) -> dict:
    def _op() -> dict:
        banner = HeroBanner(is_active=True, display_order=0)
        _apply(banner, patch, HERO_BANNER_FIELDS)
        db.session.add(banner)
        db.session.flush()
        return banner.to_dict()

    return run_in_transaction(_op)


def update_hero_banner(*, banner_id: int, patch: dict) -> dict:
    def _op() -> dict:
        banner = _load_hero_banner(banner_id)
        _apply(banner, patch, HERO_BANNER_FIELDS)
        db.session.flush()
        return banner.to_dict()

    return run_in_transaction(_op)


def delete_hero_banner(*, banner_id: int) -> None:
    def _op() -> None:
        db.session.delete(_load_hero_banner(banner_id))

    run_in_transaction(_op)


# --- Brand page hero banners -------------------------------------------------


def _require_brand(brand_id: int) -> Brand:
    brand = db.session.query(Brand).filter(Brand.id == brand_id).first()
    if brand is None:
        raise NotFoundError("Brand not found", brand_id=brand_id)
    return brand


def _load_brand_hero_banner(banner_id: int) -> BrandHeroBanner:
    banner = db.session.query(BrandHeroBanner).filter(BrandHeroBanner.id == banner_id).first()
    if banner is None:
        raise NotFoundError("Banner not found", banner_id=banner_id)
    return banner


def list_brand_hero_banners(*, brand_id: int) -> list[dict]:
    _require_brand(brand_id)
    query = db.session.query(BrandHeroBanner).filter(BrandHeroBanner.brand_id == brand_id)
    return [b.to_dict() for b in _ordered(query, BrandHeroBanner).all()]


def create_brand_hero_banner(*, brand_id: int, patch: dict) -> dict:
    def _op() -> dict:
        _require_brand(brand_id)
        banner = BrandHeroBanner(brand_id=brand_id, is_active=True, display_order=0)
        _apply(banner, patch, BRAND_HERO_BANNER_FIELDS)
        db.session.add(banner)
        db.session.flush()
        return banner.to_dict()

    return run_in_transaction(_op)


def update_brand_hero_banner(*, banner_id: int, patch: dict) -> dict:
    def _op() -> dict:
        banner = _load_brand_hero_banner(banner_id)
        _apply(banner, patch, BRAND_HERO_BANNER_FIELDS)
        db.session.flush()
        return banner.to_dict()

    return run_in_transaction(_op)


def delete_brand_hero_banner(*, banner_id: int) -> None:
    def _op() -> None:
        db.session.delete(_load_brand_hero_banner(banner_id))

    run_in_transaction(_op)
