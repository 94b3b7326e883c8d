"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from storefront.application.create_order import CreateOrderHandler
from storefront.application.delete_order import DeleteOrderHandler
from storefront.application.dto import OrderDTO, OrderItemSpec
from storefront.application.list_orders import ListOrdersHandler
from storefront.application.product_quantities import ProductQuantitiesHandler
from storefront.application.show_order import ShowOrderHandler
from storefront.application.update_order_status import UpdateOrderStatusHandler
from storefront.domain.exceptions import DomainException
from storefront.domain.model.order import OrderStatus
from storefront.domain.repository.order_repository import ORDER_SORT_FIELDS
from storefront.infrastructure.bootstrap import unit_of_work
from storefront.infrastructure.cli.errors import DomainClickException
from storefront.infrastructure.config import Settings


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id}  (status={dto.status})")
    click.echo(f"User:     {dto.user_id}")
    click.echo(f"Started:  {dto.start_date}")
    if dto.delivery_date:
        click.echo(f"Delivered: {dto.delivery_date}")
    click.echo(f"Delivery: {dto.delivery_price}")
    click.echo()

    click.echo(f"  {'Item':<8} {'Product':>8} {'Qty':>6}")
    click.echo(f"  {'-'*24}")
    for item in dto.items:
        click.echo(f"  {item.id:<8} {item.product_id:>8} {item.quantity:>6}")
    click.echo(f"  {'-'*24}")
    click.echo(f"  {'Total items':<17} {dto.total_items:>6}")


@click.command("create")
@click.option("--user", "user_id", required=True, type=int, help="Owning user ID.")
@click.option("--delivery-price", default="0.00", show_default=True, help="Delivery price.")
@click.option("--product", "product_id", type=int, default=None, help="Product ID of an initial item.")
@click.option("--quantity", type=click.IntRange(min=1), default=None, help="Quantity of the initial item.")
@click.pass_obj
def order_create(
    config: Settings,
    user_id: int,
    delivery_price: str,
    product_id: int | None,
    quantity: int | None,
) -> None:
    """Create a new order, optionally with a first item."""
    if (product_id is None) != (quantity is None):
        raise click.UsageError("--product and --quantity must be given together")

    first_item = OrderItemSpec(product_id, quantity) if product_id is not None else None
    handler = CreateOrderHandler(unit_of_work(config), config.stock_max_retries)

    try:
        dto = handler.handle(user_id, delivery_price=delivery_price, first_item=first_item)
    except DomainException as exc:
        raise DomainClickException(exc)

    click.echo(f"Order #{dto.id} created  (status={dto.status})")


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
@click.pass_obj
def order_show(config: Settings, order_id: int) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(unit_of_work(config, read_only=True))

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise DomainClickException(exc)

    _display_order(dto)


@click.command("list")
@click.option("--page", "page_number", default=0, show_default=True, type=int, help="Zero-based page.")
@click.option("--size", "page_size", default=20, show_default=True, type=int, help="Orders per page.")
@click.option("--sort-by", default="id", show_default=True, type=click.Choice(ORDER_SORT_FIELDS))
@click.option("--user", "user_id", type=int, default=None, help="Only this user's orders.")
@click.pass_obj
def order_list(
    config: Settings,
    page_number: int,
    page_size: int,
    sort_by: str,
    user_id: int | None,
) -> None:
    """List orders one page at a time."""
    handler = ListOrdersHandler(unit_of_work(config, read_only=True))

    try:
        page = handler.handle(page_number, page_size, sort_by=sort_by, user_id=user_id)
    except DomainException as exc:
        raise DomainClickException(exc)

    if not page.orders:
        click.echo("No orders found.")
    else:
        click.echo(f"{'ID':<6} {'User':>6} {'Status':<10} {'Items':>6} {'Started':<10}")
        click.echo("-" * 42)
        for dto in page.orders:
            click.echo(
                f"{dto.id:<6} {dto.user_id:>6} {dto.status:<10} {dto.total_items:>6} {dto.start_date:<10}"
            )
    click.echo(
        f"Page {page.page_number + 1} of {page.total_pages} ({page.total_items} orders)"
    )


@click.command("status")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option(
    "--to",
    "target",
    required=True,
    type=click.Choice([s.value for s in OrderStatus], case_sensitive=True),
    help="New status.",
)
@click.pass_obj
def order_status(config: Settings, order_id: int, target: str) -> None:
    """Move an order to a new status (cancelling releases its stock)."""
    handler = UpdateOrderStatusHandler(unit_of_work(config), config.stock_max_retries)

    try:
        dto = handler.handle(order_id, OrderStatus(target))
    except DomainException as exc:
        raise DomainClickException(exc)

    click.echo(f"Order #{dto.id} is now {dto.status}.")


@click.command("delete")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to delete.")
@click.pass_obj
def order_delete(config: Settings, order_id: int) -> None:
    """Delete an order and release the stock it still holds."""
    handler = DeleteOrderHandler(unit_of_work(config), config.stock_max_retries)

    try:
        handler.handle(order_id)
    except DomainException as exc:
        raise DomainClickException(exc)

    click.echo(f"Order #{order_id} deleted.")


@click.command("quantities")
@click.pass_obj
def order_quantities(config: Settings) -> None:
    """Show units committed per product across open and completed orders."""
    quantities = ProductQuantitiesHandler(unit_of_work(config, read_only=True)).handle()

    if not quantities:
        click.echo("No ordered products.")
        return

    click.echo(f"{'Product':<10} {'Units':>8}")
    click.echo("-" * 19)
    for product_id, units in quantities.items():
        click.echo(f"{product_id:<10} {units:>8}")
