# Overview: Pytest coverage for size variants and the product stock rollup.

"""
Inventory Rollup Tests

ROLLUP RULE: after every successful variant write, products.stock equals the
sum of that product's variant stocks. Failed writes leave both the variant
and the product total untouched.
"""

import pytest
from backoffice.models import Product, ProductVariant
from backoffice.services import inventory_service
from backoffice.services.inventory_service import (
    IN_STOCK,
    LOW_STOCK,
    OUT_OF_STOCK,
    stock_level,
)
from backoffice.validation import NotFoundError, ValidationError


def _stock_of(db_session, product_id):
    db_session.expire_all()
    return db_session.get(Product, product_id).stock


def _variant_sum(db_session, product_id):
    return sum(
        v.stock for v in db_session.query(ProductVariant).filter_by(product_id=product_id)
    )


class TestVariantRollup:
    """products.stock follows the variant sum."""

    def test_create_variants_rolls_up(self, db_session, product):
        """Manual stock is replaced by the variant total on the first variant."""
        first = inventory_service.create_variant(product_id=product.id, size="S", stock=3)
        assert first["product_stock"] == 3

        second = inventory_service.create_variant(product_id=product.id, size="M", stock=4, sort_order=1)
        assert second["product_stock"] == 7
        assert _stock_of(db_session, product.id) == 7

    def test_delete_one_of_two_sizes(self, db_session, product):
        medium = inventory_service.create_variant(product_id=product.id, size="M", stock=10, sort_order=0)
        inventory_service.create_variant(product_id=product.id, size="L", stock=5, sort_order=1)
        assert _stock_of(db_session, product.id) == 15

        inventory_service.delete_variant(variant_id=medium["id"])

        assert _stock_of(db_session, product.id) == 5

    def test_update_stock_rolls_up(self, db_session, product):
        small = inventory_service.create_variant(product_id=product.id, size="S", stock=3)
        inventory_service.create_variant(product_id=product.id, size="M", stock=4)

        result = inventory_service.update_variant_stock(variant_id=small["id"], new_stock=10)

        assert result["stock"] == 10
        assert result["product_stock"] == 14
        assert _stock_of(db_session, product.id) == _variant_sum(db_session, product.id) == 14

    def test_delete_variant_rolls_up(self, db_session, product):
        small = inventory_service.create_variant(product_id=product.id, size="S", stock=3)
        inventory_service.create_variant(product_id=product.id, size="M", stock=4)

        result = inventory_service.delete_variant(variant_id=small["id"])

        assert result == {"product_id": product.id, "product_stock": 4}
        assert _stock_of(db_session, product.id) == 4

    def test_deleting_last_variant_leaves_zero(self, db_session, product):
        """Variant tracking is one way; the manual quantity is not restored."""
        only = inventory_service.create_variant(product_id=product.id, size="FREE", stock=2)

        inventory_service.delete_variant(variant_id=only["id"])

        db_session.expire_all()
        reloaded = db_session.get(Product, product.id)
        assert reloaded.stock == 0
        assert reloaded.variant_tracked is True

    def test_untracked_product_keeps_manual_stock(self, db_session, product):
        assert inventory_service.recompute_product_stock(product_id=product.id) == 5
        assert _stock_of(db_session, product.id) == 5

    def test_size_is_trimmed(self, db_session, product):
        created = inventory_service.create_variant(product_id=product.id, size="  XL ", stock=1)
        assert created["size"] == "XL"


class TestRejectedWrites:
    """Invalid variant writes change nothing."""

    def test_negative_stock_on_update_is_rejected(self, db_session, product):
        small = inventory_service.create_variant(product_id=product.id, size="S", stock=3)

        with pytest.raises(ValidationError):
            inventory_service.update_variant_stock(variant_id=small["id"], new_stock=-1)

        db_session.expire_all()
        assert db_session.get(ProductVariant, small["id"]).stock == 3
        assert _stock_of(db_session, product.id) == 3

    @pytest.mark.parametrize("size", ["", "   ", None])
    def test_blank_size_on_create_is_rejected(self, db_session, product, size):
        with pytest.raises(ValidationError):
            inventory_service.create_variant(product_id=product.id, size=size, stock=1)

        assert db_session.query(ProductVariant).count() == 0
        assert _stock_of(db_session, product.id) == 5

    def test_blank_size_on_update_is_rejected(self, db_session, product):
        small = inventory_service.create_variant(product_id=product.id, size="S", stock=3)

        with pytest.raises(ValidationError):
            inventory_service.update_variant(variant_id=small["id"], patch={"size": "  "})

        db_session.expire_all()
        assert db_session.get(ProductVariant, small["id"]).size == "S"

    def test_unknown_field_is_rejected(self, db_session, product):
        small = inventory_service.create_variant(product_id=product.id, size="S", stock=3)

        with pytest.raises(ValidationError):
            inventory_service.update_variant(variant_id=small["id"], patch={"product_id": 99})

    def test_missing_product(self, db_session):
        with pytest.raises(NotFoundError):
            inventory_service.create_variant(product_id=99999, size="S", stock=1)

    def test_missing_variant(self, db_session):
        with pytest.raises(NotFoundError):
            inventory_service.delete_variant(variant_id=99999)


class TestReconciliation:
    """recompute_product_stock / recompute_all_product_stock"""

    def test_recompute_is_idempotent(self, db_session, product):
        inventory_service.create_variant(product_id=product.id, size="S", stock=3)
        inventory_service.create_variant(product_id=product.id, size="M", stock=4)

        assert inventory_service.recompute_product_stock(product_id=product.id) == 7
        assert inventory_service.recompute_product_stock(product_id=product.id) == 7

    def test_recompute_all_corrects_drift(self, db_session, product):
        inventory_service.create_variant(product_id=product.id, size="S", stock=3)

        db_session.expire_all()
        drifted = db_session.get(Product, product.id)
        drifted.stock = 50
        db_session.commit()

        result = inventory_service.recompute_all_product_stock()

        assert result == {"checked": 1, "corrected": [product.id]}
        assert _stock_of(db_session, product.id) == 3

    def test_list_variants_in_display_order(self, db_session, product):
        inventory_service.create_variant(product_id=product.id, size="L", stock=1, sort_order=2)
        inventory_service.create_variant(product_id=product.id, size="S", stock=1, sort_order=0)
        inventory_service.create_variant(product_id=product.id, size="M", stock=1, sort_order=1)

        sizes = [v["size"] for v in inventory_service.list_variants(product.id)]
        assert sizes == ["S", "M", "L"]


class TestStockLevels:
    """Low-stock listing flags."""

    @pytest.mark.parametrize(
        "stock,expected",
        [(0, OUT_OF_STOCK), (-1, OUT_OF_STOCK), (1, LOW_STOCK), (9, LOW_STOCK), (10, IN_STOCK)],
    )
    def test_stock_level(self, stock, expected):
        assert stock_level(stock, threshold=10) == expected

    def test_low_stock_report(self, db_session, product):
        inventory_service.create_variant(product_id=product.id, size="S", stock=2)
        inventory_service.create_variant(product_id=product.id, size="M", stock=30)

        report = inventory_service.low_stock_report()

        assert report["product_threshold"] == 20
        assert report["variant_threshold"] == 10
        assert [v["size"] for v in report["variants"]] == ["S"]
        assert report["variants"][0]["stock_level"] == LOW_STOCK
        # 32 in total is above the product threshold
        assert report["products"] == []
