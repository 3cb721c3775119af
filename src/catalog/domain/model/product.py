"""Product aggregate.

The only entity in the catalog. Ids are chosen by the caller and never
change; name, price and stock may be updated in place.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from catalog.domain.exceptions import raise_for
from catalog.domain.validators import (
    first_failure,
    validate_id,
    validate_price,
    validate_product_name,
    validate_stock,
)


def to_price(value: int | float | Decimal | str) -> Decimal:
    """Coerce a numeric price to Decimal via its string form (5.99 stays 5.99)."""
    return Decimal(str(value))


@dataclass
class Product:
    """A product in the catalog.

    A Product can never exist with a field outside its rule: construction
    and every mutation check the value and raise the matching
    ValidationError subclass.
    """

    id: int
    product_name: str
    price: Decimal
    stock: int

    def __post_init__(self) -> None:
        raise_for(
            first_failure(
                validate_id(self.id),
                validate_product_name(self.product_name),
                validate_price(self.price),
                validate_stock(self.stock),
            )
        )
        self.price = to_price(self.price)

    def rename(self, product_name: str) -> None:
        raise_for(validate_product_name(product_name))
        self.product_name = product_name

    def update_price(self, price: int | float | Decimal) -> None:
        raise_for(validate_price(price))
        self.price = to_price(price)

    def update_stock(self, stock: int) -> None:
        raise_for(validate_stock(stock))
        self.stock = stock
