"""Field validators for the Product entity.

Pure functions: each returns None when the value is acceptable, or the
ErrorKind describing why it is not. Nothing here touches storage; the
id-uniqueness half of id validation lives on the repository.
"""

from __future__ import annotations

import math
import re
from decimal import Decimal

from catalog.domain.exceptions import ErrorKind

PRODUCT_NAME_PATTERN = re.compile(r"[A-Za-z0-9\- ]{3,24}")

MIN_PRICE = Decimal("0.01")
MAX_PRICE = Decimal("9999")

MIN_STOCK = 0
MAX_STOCK = 9999


def _is_int(value: object) -> bool:
    # bool is an int subclass but never a valid id or stock level
    return isinstance(value, int) and not isinstance(value, bool)


def validate_id(product_id: object) -> ErrorKind | None:
    if not product_id:
        return ErrorKind.ID_MISSING
    if not _is_int(product_id) or product_id < 1:
        return ErrorKind.INVALID_ID
    return None


def validate_product_name(product_name: object) -> ErrorKind | None:
    if not isinstance(product_name, str):
        return ErrorKind.INVALID_PRODUCT_NAME
    if PRODUCT_NAME_PATTERN.fullmatch(product_name) is None:
        return ErrorKind.INVALID_PRODUCT_NAME
    return None


def validate_price(price: object) -> ErrorKind | None:
    if isinstance(price, bool) or not isinstance(price, (int, float, Decimal)):
        return ErrorKind.INVALID_PRICE
    if isinstance(price, float) and not math.isfinite(price):
        return ErrorKind.INVALID_PRICE
    if isinstance(price, Decimal) and not price.is_finite():
        return ErrorKind.INVALID_PRICE
    if not MIN_PRICE <= Decimal(str(price)) <= MAX_PRICE:
        return ErrorKind.INVALID_PRICE
    return None


def validate_stock(stock: object) -> ErrorKind | None:
    if not _is_int(stock) or not MIN_STOCK <= stock <= MAX_STOCK:
        return ErrorKind.INVALID_STOCK
    return None


def first_failure(*results: ErrorKind | None) -> ErrorKind | None:
    """Return the first failing kind, in argument order."""
    for result in results:
        if result is not None:
            return result
    return None
