from __future__ import annotations

from ..extensions import db
from backoffice.time_utils import as_naive_utc, to_utc_z, utcnow


class Brand(db.Model):
    """
    Top-level catalog owner.

    A brand that still owns products cannot be deleted; the guard lives in
    brands_service.delete_brand, not in the schema, so that the caller gets a
    409 with the blocking product count instead of an IntegrityError.
    """
    __tablename__ = "brands"
    __table_args__ = (
        db.Index("ix_brands_name", "name"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    eng_name = db.Column(db.String(120), nullable=True)
    slug = db.Column(db.String(120), nullable=False, unique=True)
    description = db.Column(db.Text, nullable=False, default="")
    logo = db.Column(db.String(500), nullable=False, default="")
    banner = db.Column(db.String(500), nullable=False, default="")
    featured = db.Column(db.Boolean, nullable=False, default=False)
    order_detail_image = db.Column(db.String(500), nullable=True)

    # Contract window with the brand; listings flag brands past valid_period_end
    valid_period_start = db.Column(db.DateTime(timezone=True), nullable=True)
    valid_period_end = db.Column(db.DateTime(timezone=True), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    products = db.relationship("Product", back_populates="brand", lazy="dynamic")
    hero_banners = db.relationship(
        "BrandHeroBanner",
        back_populates="brand",
        cascade="all, delete-orphan",
        order_by="BrandHeroBanner.display_order",
    )

    def __repr__(self) -> str:
        return f"<Brand id={self.id} slug={self.slug!r} name={self.name!r}>"

    def is_expired(self, now=None) -> bool:
        if self.valid_period_end is None:
            return False
        return as_naive_utc(self.valid_period_end) < as_naive_utc(now or utcnow())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "eng_name": self.eng_name,
            "slug": self.slug,
            "description": self.description,
            "logo": self.logo,
            "banner": self.banner,
            "featured": self.featured,
            "order_detail_image": self.order_detail_image,
            "valid_period_start": to_utc_z(self.valid_period_start),
            "valid_period_end": to_utc_z(self.valid_period_end),
            "is_expired": self.is_expired(),
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }


class Product(db.Model):
    """
    Product master data.

    STOCK: products.stock is a denormalized total. Once a product has had a
    size variant (variant_tracked=True) the column is owned by the rollup in
    inventory_service and always equals the sum of its variant stocks.
    Before that it is a manually entered base quantity.
    """
    __tablename__ = "products"
    __table_args__ = (
        db.CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),
        db.CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
        db.Index("ix_products_brand_name", "brand_id", "name"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    brand_id = db.Column(db.Integer, db.ForeignKey("brands.id"), nullable=False, index=True)

    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False, default="")
    category = db.Column(db.String(120), nullable=False)

    # Won has no minor unit: prices are whole integers
    price = db.Column(db.Integer, nullable=False)
    original_price = db.Column(db.Integer, nullable=True)

    stock = db.Column(db.Integer, nullable=False, default=0)
    variant_tracked = db.Column(db.Boolean, nullable=False, default=False)

    images = db.Column(db.JSON, nullable=False, default=list)
    tags = db.Column(db.JSON, nullable=True)
    featured = db.Column(db.Boolean, nullable=False, default=False)
    size_chart_image = db.Column(db.String(500), nullable=True)
    description_image = db.Column(db.String(500), nullable=True)
    rating = db.Column(db.Float, nullable=True)
    review_count = db.Column(db.Integer, nullable=True)

    version_id = db.Column(db.Integer, nullable=False, default=1)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    brand = db.relationship("Brand", back_populates="products")
    variants = db.relationship(
        "ProductVariant",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductVariant.sort_order",
    )
    __mapper_args__ = {"version_id_col": version_id}

    def __repr__(self) -> str:
        return f"<Product id={self.id} name={self.name!r} brand_id={self.brand_id} stock={self.stock}>"

    def to_dict(self, include_variants: bool = False) -> dict:
        data = {
            "id": self.id,
            "brand_id": self.brand_id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "price": self.price,
            "original_price": self.original_price,
            "stock": self.stock,
            "variant_tracked": self.variant_tracked,
            "images": list(self.images or []),
            "tags": list(self.tags) if self.tags is not None else None,
            "featured": self.featured,
            "size_chart_image": self.size_chart_image,
            "description_image": self.description_image,
            "rating": self.rating,
            "review_count": self.review_count,
            "version_id": self.version_id,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
        if include_variants:
            data["product_variants"] = [v.to_dict() for v in self.variants]
        return data


class ProductVariant(db.Model):
    """A size of a product with its own stock count."""
    __tablename__ = "product_variants"
    __table_args__ = (
        db.CheckConstraint("stock >= 0", name="ck_product_variants_stock_non_negative"),
        db.Index("ix_product_variants_product_sort", "product_id", "sort_order"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(
        db.Integer,
        db.ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Free-text label: "S", "M", "250", "FREE"...
    size = db.Column(db.String(50), nullable=False)
    stock = db.Column(db.Integer, nullable=False, default=0)
    # Display ordering only
    sort_order = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    product = db.relationship("Product", back_populates="variants")

    def __repr__(self) -> str:
        return f"<ProductVariant id={self.id} product_id={self.product_id} size={self.size!r} stock={self.stock}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "product_id": self.product_id,
            "size": self.size,
            "stock": self.stock,
            "sort_order": self.sort_order,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
