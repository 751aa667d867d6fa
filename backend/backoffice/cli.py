# Overview: Flask CLI command groups for bootstrap and inventory maintenance.

# backend/backoffice/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap:
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
# - python -m flask system seed-demo [--days 7]
#   Insert a demo brand, products with sizes, orders and sales_data rows.
#
# Inventory:
# - python -m flask inventory recompute-stock [--product-id 3]
#   Recompute product totals from size variants and report drift.
# - python -m flask inventory low-stock
#   List products and variants under the low-stock thresholds.

import click
from datetime import timedelta
from flask.cli import with_appcontext

from .extensions import db
from .models import Brand, Order, OrderItem, Product, SalesData
from .services import inventory_service
from .time_utils import utcnow
from .validation import BackofficeError


@click.group('system')
def system_group():
    """System bootstrap commands."""


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset complete. Run 'python -m flask system seed-demo' for sample data.")


@system_group.command('seed-demo')
@click.option('--days', type=int, default=7, show_default=True, help='Days of order history')
@with_appcontext
def seed_demo(days):
    """Insert a small demo catalog with orders. Idempotent on the demo brand slug."""
    brand = db.session.query(Brand).filter_by(slug="demo").first()
    if brand:
        click.echo(f"SKIP Demo brand already exists (ID: {brand.id})")
        return

    brand = Brand(name="데모 브랜드", eng_name="Demo Brand", slug="demo", description="Demo catalog")
    db.session.add(brand)
    db.session.flush()

    tee = Product(brand_id=brand.id, name="베이직 티셔츠", category="tops", price=29000, images=[])
    cap = Product(brand_id=brand.id, name="볼캡", category="accessories", price=19000, stock=35, images=[])
    db.session.add_all([tee, cap])
    db.session.commit()

    for sort_order, (size, stock) in enumerate([("S", 4), ("M", 12), ("L", 9)]):
        inventory_service.create_variant(product_id=tee.id, size=size, stock=stock, sort_order=sort_order)

    now = utcnow()
    for offset in range(days):
        day = now - timedelta(days=offset)
        quantity = offset % 3 + 1
        order = Order(
            user_id=f"demo-user-{offset}",
            customer_name="홍길동",
            total=tee.price * quantity,
            status="pending",
            payment_method="card",
            payment_status="completed",
            shipping_street="세종대로 110",
            shipping_city="서울",
            shipping_state="중구",
            shipping_zip_code="04524",
            shipping_country="KR",
            shipping_phone="010-0000-0000",
            created_at=day,
        )
        order.items.append(OrderItem(product_id=tee.id, size="M", quantity=quantity, price_at_time=tee.price))
        db.session.add(order)
        db.session.add(SalesData(date=day.date(), revenue=order.total, orders=1))
    db.session.commit()

    click.echo(f"PASS Seeded demo brand (ID: {brand.id}) with {days} days of orders")


@click.group('inventory')
def inventory_group():
    """Inventory maintenance commands."""


@inventory_group.command('recompute-stock')
@click.option('--product-id', type=int, default=None, help='Only this product')
@with_appcontext
def recompute_stock_cli(product_id):
    """Recompute products.stock from size variants."""
    try:
        if product_id is not None:
            stock = inventory_service.recompute_product_stock(product_id=product_id)
            click.echo(f"PASS Product {product_id} stock = {stock}")
            return
        result = inventory_service.recompute_all_product_stock()
    except BackofficeError as e:
        raise click.ClickException(e.message)

    click.echo(f"PASS Checked {result['checked']} variant-tracked products")
    if result["corrected"]:
        click.echo(f"WARN Corrected drift on: {', '.join(str(pid) for pid in result['corrected'])}")


@inventory_group.command('low-stock')
@with_appcontext
def low_stock_cli():
    """List products and variants under the low-stock thresholds."""
    report = inventory_service.low_stock_report()

    click.echo("\n" + "=" * 80)
    click.echo(f"PRODUCTS (stock < {report['product_threshold']})")
    click.echo("=" * 80)
    click.echo(f"{'ID':<6} {'Brand':<6} {'Stock':<6} {'Level':<14} Name")
    click.echo("-" * 80)
    for p in report["products"]:
        click.echo(f"{p['id']:<6} {p['brand_id']:<6} {p['stock']:<6} {p['stock_level']:<14} {p['name']}")

    click.echo("\n" + "=" * 80)
    click.echo(f"VARIANTS (stock < {report['variant_threshold']})")
    click.echo("=" * 80)
    click.echo(f"{'ID':<6} {'Product':<8} {'Size':<8} {'Stock':<6} Level")
    click.echo("-" * 80)
    for v in report["variants"]:
        click.echo(f"{v['id']:<6} {v['product_id']:<8} {v['size']:<8} {v['stock']:<6} {v['stock_level']}")
    click.echo("=" * 80 + "\n")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(inventory_group)
