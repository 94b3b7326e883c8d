import click

from storefront.infrastructure import bootstrap
from storefront.infrastructure.cli.item_commands import (
    item_add,
    item_delete,
    item_list,
    item_show,
    item_update,
)
from storefront.infrastructure.cli.order_commands import (
    order_create,
    order_delete,
    order_list,
    order_quantities,
    order_show,
    order_status,
)
from storefront.infrastructure.cli.product_commands import (
    product_add,
    product_list,
    product_restock,
)
from storefront.infrastructure.logging import configure_logging


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Storefront — orders and inventory"""
    config = bootstrap.settings()
    configure_logging(config)
    ctx.obj = config


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def item() -> None:
    """Manage order items."""


@cli.group()
def product() -> None:
    """Manage products and stock."""


# Register subcommands
order.add_command(order_create)
order.add_command(order_delete)
order.add_command(order_list)
order.add_command(order_quantities)
order.add_command(order_show)
order.add_command(order_status)
item.add_command(item_add)
item.add_command(item_delete)
item.add_command(item_list)
item.add_command(item_show)
item.add_command(item_update)
product.add_command(product_add)
product.add_command(product_list)
product.add_command(product_restock)
