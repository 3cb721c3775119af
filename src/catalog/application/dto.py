"""Data Transfer Objects: plain containers that cross layer boundaries.

Batch operations and the CLI describe products with these records
rather than with the entity itself, so an invalid item can be carried
as far as the repository, where it is validated and rejected.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping


def _name_from(raw: Mapping[str, Any]) -> Any:
    # Stored documents and the original API spell it "productName"
    if "product_name" in raw:
        return raw["product_name"]
    return raw.get("productName")


@dataclass(frozen=True)
class ProductSpec:
    """Input: a product to add."""

    id: Any
    product_name: Any
    price: Any
    stock: Any

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> ProductSpec:
        return cls(
            id=raw.get("id"),
            product_name=_name_from(raw),
            price=raw.get("price"),
            stock=raw.get("stock"),
        )


@dataclass(frozen=True)
class ProductUpdate:
    """Input: changes to an existing product. None fields are left alone."""

    id: Any
    product_name: str | None = None
    price: int | float | Decimal | None = None
    stock: int | None = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> ProductUpdate:
        return cls(
            id=raw.get("id"),
            product_name=_name_from(raw),
            price=raw.get("price"),
            stock=raw.get("stock"),
        )
