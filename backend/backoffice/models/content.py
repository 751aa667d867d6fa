from __future__ import annotations

from ..extensions import db
from backoffice.time_utils import to_utc_z, utcnow


class HeroBanner(db.Model):
    """Storefront main-page hero banner."""
    __tablename__ = "hero_banners"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    subtitle = db.Column(db.String(255), nullable=True)
    link = db.Column(db.String(500), nullable=True)
    tags = db.Column(db.JSON, nullable=True)
    display_order = db.Column(db.Integer, nullable=False, default=0)
    image_link = db.Column(db.String(500), nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "subtitle": self.subtitle,
            "link": self.link,
            "tags": list(self.tags) if self.tags is not None else None,
            "display_order": self.display_order,
            "image_link": self.image_link,
            "is_active": self.is_active,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }


class BrandHeroBanner(db.Model):
    """Hero banner shown on a single brand's page."""
    __tablename__ = "brand_hero_banners"
    __table_args__ = (
        db.Index("ix_brand_hero_banners_brand_order", "brand_id", "display_order"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    brand_id = db.Column(
        db.Integer,
        db.ForeignKey("brands.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = db.Column(db.String(255), nullable=False)
    subtitle = db.Column(db.String(255), nullable=True)
    link = db.Column(db.String(500), nullable=True)
    color = db.Column(db.String(32), nullable=True)
    display_order = db.Column(db.Integer, nullable=False, default=0)
    image_link = db.Column(db.String(500), nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    brand = db.relationship("Brand", back_populates="hero_banners")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "brand_id": self.brand_id,
            "title": self.title,
            "subtitle": self.subtitle,
            "link": self.link,
            "color": self.color,
            "display_order": self.display_order,
            "image_link": self.image_link,
            "is_active": self.is_active,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
