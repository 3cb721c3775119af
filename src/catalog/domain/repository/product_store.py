"""Abstract document store for the Products collection.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON file, in-memory) live in
the infrastructure layer and in the test fakes.

The store is the source of truth for id uniqueness: ``insert`` must
reject a second document with the same id atomically, whatever
pre-checks callers did beforehand.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from catalog.domain.model.product import Product


class ProductStore(ABC):

    @abstractmethod
    async def connect(self) -> None:
        """Open the connection; must be called before any query."""

    @abstractmethod
    async def close(self) -> None:
        """Close the connection. Further queries raise StorageError."""

    @abstractmethod
    async def drop(self) -> None:
        """Remove every document from the collection."""

    @abstractmethod
    async def find_by_id(self, product_id: int) -> Product | None:
        """Return the product with this id, or None if not found."""

    @abstractmethod
    async def find_by_name_fragment(self, fragment: str) -> list[Product]:
        """Return products whose name contains ``fragment``, ignoring case."""

    @abstractmethod
    async def find_by_price(self, price: Decimal) -> list[Product]:
        """Return products priced exactly ``price``."""

    @abstractmethod
    async def find_by_stock(self, stock: int) -> list[Product]:
        """Return products with exactly ``stock`` units."""

    @abstractmethod
    async def find_all(self) -> list[Product]:
        """Return every product in the collection."""

    @abstractmethod
    async def insert(self, product: Product) -> None:
        """Persist a new product; raise DuplicateKeyError if the id is taken."""

    @abstractmethod
    async def replace(self, product: Product) -> None:
        """Persist changes to an existing product."""
