# Overview: Pytest coverage for the flask CLI command groups.

from backoffice.models import Brand, Order, Product, ProductVariant, SalesData


class TestCli:
    """flask system / flask inventory"""

    def test_seed_demo_is_idempotent(self, app, db_session):
        runner = app.test_cli_runner()

        result = runner.invoke(args=["system", "seed-demo", "--days", "3"])
        assert result.exit_code == 0, result.output
        assert "PASS" in result.output

        assert db_session.query(Brand).count() == 1
        assert db_session.query(Product).count() == 2
        assert db_session.query(ProductVariant).count() == 3
        assert db_session.query(Order).count() == 3
        assert db_session.query(SalesData).count() == 3

        tee = db_session.query(Product).filter_by(variant_tracked=True).one()
        assert tee.stock == 4 + 12 + 9

        result = runner.invoke(args=["system", "seed-demo"])
        assert "SKIP" in result.output
        assert db_session.query(Brand).count() == 1

    def test_recompute_stock(self, app, db_session, product):
        runner = app.test_cli_runner()

        result = runner.invoke(args=["inventory", "recompute-stock", "--product-id", str(product.id)])
        assert result.exit_code == 0, result.output
        assert f"Product {product.id} stock = 5" in result.output

        result = runner.invoke(args=["inventory", "recompute-stock", "--product-id", "99999"])
        assert result.exit_code != 0
        assert "Product not found" in result.output

    def test_low_stock(self, app, db_session, product):
        runner = app.test_cli_runner()

        result = runner.invoke(args=["inventory", "low-stock"])

        assert result.exit_code == 0, result.output
        assert "Basic Tee" in result.output
