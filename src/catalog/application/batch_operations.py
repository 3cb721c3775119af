"""Application service: batch add and update.

Each item runs through the single-record repository operation and all
items run concurrently. The batch waits for every item to finish, then
re-raises the first failure in input order. Items that committed stay
committed. Batches are not transactions.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Iterable

import structlog

from catalog.application.dto import ProductSpec, ProductUpdate
from catalog.application.product_repository import ProductRepository
from catalog.domain.exceptions import DomainException
from catalog.domain.model.product import Product

logger = structlog.get_logger(__name__)


async def _gather_all(event: str, operations: list[Awaitable[Product]]) -> list[Product]:
    results = await asyncio.gather(*operations, return_exceptions=True)
    failures = [r for r in results if isinstance(r, BaseException)]
    if failures:
        first = failures[0]
        logger.warning(
            event,
            size=len(results),
            failed=len(failures),
            error=first.kind.value if isinstance(first, DomainException) else repr(first),
        )
        raise first
    return results


async def add_products(
    repository: ProductRepository, specs: Iterable[ProductSpec]
) -> list[Product]:
    """Add every product; return them in input order."""
    return await _gather_all(
        "products.batch_add_failed",
        [repository.add_product(s.id, s.product_name, s.price, s.stock) for s in specs],
    )


async def update_products(
    repository: ProductRepository, updates: Iterable[ProductUpdate]
) -> list[Product]:
    """Apply every update; return the updated products in input order."""
    return await _gather_all(
        "products.batch_update_failed",
        [repository.update_product(u.id, u.product_name, u.price, u.stock) for u in updates],
    )
