"""Domain-level exceptions.

All failures are expressed as subclasses of DomainException so the CLI
layer (or an HTTP front end) can catch them uniformly. Each exception
carries an ErrorKind; validators return the kind, and the repository
turns it into the matching exception with ``raise_for``.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    ID_MISSING = "id_missing"
    INVALID_ID = "invalid_id"
    ID_ALREADY_EXISTS = "id_already_exists"
    ID_NOT_FOUND = "id_not_found"
    INVALID_PRODUCT_NAME = "invalid_product_name"
    INVALID_PRICE = "invalid_price"
    INVALID_STOCK = "invalid_stock"
    STORAGE_FAILURE = "storage_failure"

    @property
    def http_status(self) -> int:
        """Status code an HTTP front end should answer with."""
        return _HTTP_STATUS.get(self, 400)


_HTTP_STATUS = {
    ErrorKind.ID_ALREADY_EXISTS: 409,
    ErrorKind.ID_NOT_FOUND: 404,
    ErrorKind.STORAGE_FAILURE: 500,
}


class DomainException(Exception):
    """Base class for all domain errors."""

    kind: ErrorKind
    default_message = "Domain error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class ValidationError(DomainException):
    """A field failed its format or range rule."""


class ConflictError(DomainException):
    """An operation collides with existing state."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class IdMissingError(ValidationError):
    kind = ErrorKind.ID_MISSING
    default_message = "Product Id not defined"


class InvalidIdError(ValidationError):
    kind = ErrorKind.INVALID_ID
    default_message = "Invalid Id format"


class InvalidProductNameError(ValidationError):
    kind = ErrorKind.INVALID_PRODUCT_NAME
    default_message = "Invalid product name format"


class InvalidPriceError(ValidationError):
    kind = ErrorKind.INVALID_PRICE
    default_message = "Invalid price format"


class InvalidStockError(ValidationError):
    kind = ErrorKind.INVALID_STOCK
    default_message = "Invalid stock format"


class ProductIdExistsError(ConflictError):
    kind = ErrorKind.ID_ALREADY_EXISTS
    default_message = "Product Id Exists"


class ProductIdNotFoundError(EntityNotFoundError):
    kind = ErrorKind.ID_NOT_FOUND
    default_message = "Product Id does not exist"


class StorageError(DomainException):
    """The document store failed (I/O, decoding, closed connection)."""

    kind = ErrorKind.STORAGE_FAILURE
    default_message = "Storage failure"


class DuplicateKeyError(StorageError):
    """The store's unique index on ``id`` rejected a write."""

    default_message = "Duplicate key"


_BY_KIND: dict[ErrorKind, type[DomainException]] = {
    cls.kind: cls
    for cls in (
        IdMissingError,
        InvalidIdError,
        InvalidProductNameError,
        InvalidPriceError,
        InvalidStockError,
        ProductIdExistsError,
        ProductIdNotFoundError,
        StorageError,
    )
}


def exception_for(kind: ErrorKind) -> type[DomainException]:
    """Return the exception class that reports ``kind``."""
    return _BY_KIND[kind]


def raise_for(kind: ErrorKind | None) -> None:
    """Raise the typed exception for ``kind``; do nothing for None."""
    if kind is not None:
        raise exception_for(kind)()
