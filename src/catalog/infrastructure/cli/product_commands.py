"""CLI commands for the Product aggregate."""

from __future__ import annotations

import asyncio
import json
from typing import Awaitable, Callable, TypeVar

import click

from catalog.application.batch_operations import add_products, update_products
from catalog.application.dto import ProductSpec, ProductUpdate
from catalog.application.product_repository import ProductRepository
from catalog.domain.exceptions import DomainException
from catalog.domain.model.product import Product
from catalog.infrastructure import bootstrap

T = TypeVar("T")


def _run(operation: Callable[[ProductRepository], Awaitable[T]]) -> T:
    """Connect, run one repository operation, disconnect."""

    async def _session() -> T:
        repo = await bootstrap.connect()
        try:
            return await operation(repo)
        finally:
            await bootstrap.tear_down(repo)

    try:
        return asyncio.run(_session())
    except DomainException as exc:
        raise click.ClickException(str(exc))


def _echo_table(products: list[Product]) -> None:
    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<24} {'Price':>10} {'Stock':>6}")
    click.echo("-" * 49)
    for p in sorted(products, key=lambda p: p.id):
        click.echo(f"{p.id:<6} {p.product_name:<24} {p.price:>10.2f} {p.stock:>6}")


def _load_records(file) -> list[dict]:
    try:
        records = json.load(file)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"Invalid JSON: {exc}")
    if not isinstance(records, list):
        raise click.BadParameter("Expected a JSON list of products.")
    return records


@click.command("add")
@click.option("--id", "product_id", required=True, type=int, help="Product ID.")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, type=float, help="Price (e.g. 5.99).")
@click.option("--stock", required=True, type=int, help="Units in stock.")
def product_add(product_id: int, name: str, price: float, stock: int) -> None:
    """Add a new product to the catalog."""
    product = _run(lambda repo: repo.add_product(product_id, name, price, stock))
    click.echo(f"Product #{product.id} '{product.product_name}' added at ${product.price:.2f}")


@click.command("get")
@click.option("--id", "product_id", required=True, type=int, help="Product ID.")
def product_get(product_id: int) -> None:
    """Show a single product."""
    product = _run(lambda repo: repo.get_product(product_id))
    if product is None:
        raise click.ClickException(f"Product with ID '{product_id}' not found")
    _echo_table([product])


@click.command("list")
def product_list() -> None:
    """List all products in the catalog."""
    _echo_table(_run(lambda repo: repo.get_all_products()))


@click.command("search")
@click.option("--name", default=None, help="Name fragment, case-insensitive.")
@click.option("--price", default=None, type=float, help="Exact price.")
@click.option("--stock", default=None, type=int, help="Exact stock level.")
def product_search(name: str | None, price: float | None, stock: int | None) -> None:
    """Find products by name, price or stock."""
    criteria = [c for c in (name, price, stock) if c is not None]
    if len(criteria) != 1:
        raise click.UsageError("Give exactly one of --name, --price or --stock.")

    if name is not None:
        products = _run(lambda repo: repo.get_products_by_name(name))
    elif price is not None:
        products = _run(lambda repo: repo.get_products_by_price(price))
    else:
        products = _run(lambda repo: repo.get_products_by_stock(stock))
    _echo_table(products)


@click.command("update")
@click.option("--id", "product_id", required=True, type=int, help="Product ID.")
@click.option("--name", default=None, help="New name.")
@click.option("--price", default=None, type=float, help="New price (e.g. 6.49).")
@click.option("--stock", default=None, type=int, help="New stock level.")
def product_update(
    product_id: int, name: str | None, price: float | None, stock: int | None
) -> None:
    """Update a product's name, price and/or stock."""
    if name is None and price is None and stock is None:
        raise click.UsageError("Nothing to update.")

    product = _run(lambda repo: repo.update_product(product_id, name, price, stock))
    click.echo(f"Product #{product.id} updated")
    _echo_table([product])


@click.command("import")
@click.argument("file", type=click.File("r"))
def product_import(file) -> None:
    """Add every product listed in a JSON file."""
    specs = [ProductSpec.from_dict(r) for r in _load_records(file)]
    products = _run(lambda repo: add_products(repo, specs))
    click.echo(f"{len(products)} product(s) added")


@click.command("bulk-update")
@click.argument("file", type=click.File("r"))
def product_bulk_update(file) -> None:
    """Apply every update listed in a JSON file."""
    updates = [ProductUpdate.from_dict(r) for r in _load_records(file)]
    products = _run(lambda repo: update_products(repo, updates))
    click.echo(f"{len(products)} product(s) updated")
