"""CLI commands for the Product aggregate."""

from __future__ import annotations

import click

from storefront.application.add_product import AddProductHandler, RestockProductHandler
from storefront.application.show_stock import ShowStockHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import unit_of_work
from storefront.infrastructure.cli.errors import DomainClickException
from storefront.infrastructure.config import Settings


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Price (e.g. 15.00).")
@click.option("--stock", "units_in_stock", default=0, show_default=True, type=int, help="Opening stock.")
@click.option("--description", default="", help="Free-text description.")
@click.pass_obj
def product_add(
    config: Settings, name: str, price: str, units_in_stock: int, description: str
) -> None:
    """Add a new product to the catalog."""
    handler = AddProductHandler(unit_of_work(config))

    try:
        product = handler.handle(
            name=name, price=price, units_in_stock=units_in_stock, description=description
        )
    except DomainException as exc:
        raise DomainClickException(exc)

    click.echo(
        f"Product #{product.id} '{product.name}' added at {product.price} "
        f"({product.units_in_stock} in stock)"
    )


@click.command("list")
@click.pass_obj
def product_list(config: Settings) -> None:
    """List all products with their stock."""
    snapshots = ShowStockHandler(unit_of_work(config, read_only=True)).handle()

    if not snapshots:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<20} {'In stock':>10}")
    click.echo("-" * 38)
    for s in snapshots:
        click.echo(f"{s.product_id:<6} {s.name:<20} {s.units_in_stock:>10}")


@click.command("restock")
@click.option("--id", "product_id", required=True, type=int, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="Units received.")
@click.pass_obj
def product_restock(config: Settings, product_id: int, quantity: int) -> None:
    """Add received units to a product's stock."""
    handler = RestockProductHandler(unit_of_work(config), config.stock_max_retries)

    try:
        snapshot = handler.handle(product_id, quantity)
    except DomainException as exc:
        raise DomainClickException(exc)

    click.echo(f"Product #{snapshot.product_id} now has {snapshot.units_in_stock} in stock.")
