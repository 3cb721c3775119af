"""Validated CRUD and query operations over the Products collection.

Every operation validates its input before touching the store and
fails fast on the first bad field. Errors are never swallowed: callers
get the typed DomainException subclass and can branch on it.
"""

from __future__ import annotations

from decimal import Decimal

import structlog

from catalog.domain.exceptions import (
    DuplicateKeyError,
    ErrorKind,
    ProductIdExistsError,
    ProductIdNotFoundError,
    raise_for,
)
from catalog.domain.model.product import Product, to_price
from catalog.domain.repository.product_store import ProductStore
from catalog.domain.validators import (
    first_failure,
    validate_id,
    validate_price,
    validate_product_name,
    validate_stock,
)

logger = structlog.get_logger(__name__)


class ProductRepository:

    def __init__(self, store: ProductStore) -> None:
        self._store = store

    @property
    def store(self) -> ProductStore:
        return self._store

    async def validate_id(self, product_id: int, mutation: bool = False) -> None:
        """Check the id format and, unless ``mutation``, that it is unused.

        The uniqueness check is only an early exit: two concurrent adds
        can both pass it, and the store's unique index decides.
        """
        raise_for(validate_id(product_id))
        if not mutation and await self._store.find_by_id(product_id) is not None:
            raise_for(ErrorKind.ID_ALREADY_EXISTS)

    # --- Queries ----------------------------------------------------------------

    async def get_product(self, product_id: int) -> Product | None:
        """Return the product with this id, or None if it is not stored."""
        raise_for(validate_id(product_id))
        return await self._store.find_by_id(product_id)

    async def get_products_by_name(self, product_name: str) -> list[Product]:
        raise_for(validate_product_name(product_name))
        return await self._store.find_by_name_fragment(product_name)

    async def get_products_by_price(self, price: int | float | Decimal) -> list[Product]:
        raise_for(validate_price(price))
        return await self._store.find_by_price(to_price(price))

    async def get_products_by_stock(self, stock: int) -> list[Product]:
        raise_for(validate_stock(stock))
        return await self._store.find_by_stock(stock)

    async def get_all_products(self) -> list[Product]:
        return await self._store.find_all()

    # --- Commands ---------------------------------------------------------------

    async def add_product(
        self,
        product_id: int,
        product_name: str,
        price: int | float | Decimal,
        stock: int,
    ) -> Product:
        """Add a new product to the catalog."""
        await self.validate_id(product_id)
        raise_for(
            first_failure(
                validate_product_name(product_name),
                validate_price(price),
                validate_stock(stock),
            )
        )

        product = Product(
            id=product_id, product_name=product_name, price=price, stock=stock
        )
        try:
            await self._store.insert(product)
        except DuplicateKeyError as exc:
            raise ProductIdExistsError() from exc

        logger.info("product.added", product_id=product_id)
        return product

    async def update_product_name(self, product_id: int, product_name: str) -> Product:
        await self.validate_id(product_id, mutation=True)
        raise_for(validate_product_name(product_name))

        product = await self._get_existing(product_id)
        product.rename(product_name)
        return await self._save(product, ["product_name"])

    async def update_product_price(
        self, product_id: int, price: int | float | Decimal
    ) -> Product:
        await self.validate_id(product_id, mutation=True)
        raise_for(validate_price(price))

        product = await self._get_existing(product_id)
        product.update_price(price)
        return await self._save(product, ["price"])

    async def update_product_stock(self, product_id: int, stock: int) -> Product:
        await self.validate_id(product_id, mutation=True)
        raise_for(validate_stock(stock))

        product = await self._get_existing(product_id)
        product.update_stock(stock)
        return await self._save(product, ["stock"])

    async def update_product(
        self,
        product_id: int,
        product_name: str | None = None,
        price: int | float | Decimal | None = None,
        stock: int | None = None,
    ) -> Product:
        """Apply whichever of name, price and stock are supplied.

        None means "leave unchanged". Any other value, including 0 and
        the empty string, is validated and applied.
        """
        await self.validate_id(product_id, mutation=True)
        raise_for(
            first_failure(
                None if product_name is None else validate_product_name(product_name),
                None if price is None else validate_price(price),
                None if stock is None else validate_stock(stock),
            )
        )

        product = await self._get_existing(product_id)
        changed = []
        if product_name is not None:
            product.rename(product_name)
            changed.append("product_name")
        if price is not None:
            product.update_price(price)
            changed.append("price")
        if stock is not None:
            product.update_stock(stock)
            changed.append("stock")
        return await self._save(product, changed)

    # --- Internal helpers -------------------------------------------------------

    async def _get_existing(self, product_id: int) -> Product:
        product = await self._store.find_by_id(product_id)
        if product is None:
            raise ProductIdNotFoundError(f"Product with ID '{product_id}' not found")
        return product

    async def _save(self, product: Product, fields: list[str]) -> Product:
        await self._store.replace(product)
        logger.info("product.updated", product_id=product.id, fields=fields)
        return product
