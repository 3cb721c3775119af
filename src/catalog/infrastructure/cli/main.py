import click

from catalog.infrastructure import bootstrap
from catalog.infrastructure.cli.product_commands import (
    product_add,
    product_bulk_update,
    product_get,
    product_import,
    product_list,
    product_search,
    product_update,
)
from catalog.infrastructure.logging import configure_logging


@click.group()
def cli() -> None:
    """Catalog: product catalog service"""
    configure_logging(bootstrap.log_level(), json=bootstrap.log_json())


@cli.group()
def product() -> None:
    """Manage products."""


# Register subcommands
product.add_command(product_add)
product.add_command(product_bulk_update)
product.add_command(product_get)
product.add_command(product_import)
product.add_command(product_list)
product.add_command(product_search)
product.add_command(product_update)
