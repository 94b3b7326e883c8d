"""CLI commands for order items."""

from __future__ import annotations

import click

from storefront.application.add_order_item import AddOrderItemHandler
from storefront.application.delete_order_item import DeleteOrderItemHandler
from storefront.application.modify_item_quantity import ModifyItemQuantityHandler
from storefront.application.show_order import ListOrderItemsHandler, ShowOrderItemHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import unit_of_work
from storefront.infrastructure.cli.errors import DomainClickException
from storefront.infrastructure.config import Settings


@click.command("add")
@click.option("--order", "order_id", required=True, type=int, help="Order ID.")
@click.option("--product", "product_id", required=True, type=int, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="Units to reserve.")
@click.pass_obj
def item_add(config: Settings, order_id: int, product_id: int, quantity: int) -> None:
    """Add an item to an active order (reserves stock)."""
    handler = AddOrderItemHandler(unit_of_work(config), config.stock_max_retries)

    try:
        dto = handler.handle(order_id, product_id, quantity)
    except DomainException as exc:
        raise DomainClickException(exc)

    click.echo(
        f"Item #{dto.id} added to order #{dto.order_id} "
        f"({dto.quantity} x product #{dto.product_id})"
    )


@click.command("show")
@click.option("--id", "item_id", required=True, type=int, help="Item ID.")
@click.pass_obj
def item_show(config: Settings, item_id: int) -> None:
    """Show a single order item."""
    handler = ShowOrderItemHandler(unit_of_work(config, read_only=True))

    try:
        dto = handler.handle(item_id)
    except DomainException as exc:
        raise DomainClickException(exc)

    click.echo(
        f"Item #{dto.id}  order=#{dto.order_id}  product=#{dto.product_id}  quantity={dto.quantity}"
    )


@click.command("list")
@click.pass_obj
def item_list(config: Settings) -> None:
    """List every order item across all orders."""
    items = ListOrderItemsHandler(unit_of_work(config, read_only=True)).handle()

    if not items:
        click.echo("No order items found.")
        return

    click.echo(f"{'ID':<6} {'Order':<8} {'Product':<8} {'Quantity':>8}")
    for dto in items:
        click.echo(f"{dto.id:<6} {dto.order_id:<8} {dto.product_id:<8} {dto.quantity:>8}")


@click.command("update")
@click.option("--id", "item_id", required=True, type=int, help="Item ID.")
@click.option("--quantity", required=True, type=int, help="New quantity (use delete for zero).")
@click.pass_obj
def item_update(config: Settings, item_id: int, quantity: int) -> None:
    """Change an item's quantity (adjusts reserved stock)."""
    handler = ModifyItemQuantityHandler(unit_of_work(config), config.stock_max_retries)

    try:
        dto = handler.handle(item_id, quantity)
    except DomainException as exc:
        raise DomainClickException(exc)

    click.echo(f"Item #{dto.id} quantity set to {dto.quantity}.")


@click.command("delete")
@click.option("--id", "item_id", required=True, type=int, help="Item ID.")
@click.pass_obj
def item_delete(config: Settings, item_id: int) -> None:
    """Remove an item from its order (releases stock)."""
    handler = DeleteOrderItemHandler(unit_of_work(config), config.stock_max_retries)

    try:
        handler.handle(item_id)
    except DomainException as exc:
        raise DomainClickException(exc)

    click.echo(f"Item #{item_id} deleted.")
