"""Composition root: wires the JSON store to the repository.

This is the only place in the codebase that knows about *all* layers.
Settings come from the environment (or a ``.env`` file) via decouple.
"""

from __future__ import annotations

from pathlib import Path

from decouple import config

from catalog.application.product_repository import ProductRepository
from catalog.infrastructure.persistence.json_product_store import JsonProductStore

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


def data_dir() -> Path:
    return Path(config("CATALOG_DATA_DIR", default=str(_DEFAULT_DATA_DIR)))


def database_name(test: bool = False) -> str:
    if test:
        return config("CATALOG_TEST_DATABASE", default="test_apiDirectory")
    return config("CATALOG_DATABASE", default="apiDirectory")


def log_level() -> str:
    return config("CATALOG_LOG_LEVEL", default="INFO")


def log_json() -> bool:
    return config("CATALOG_LOG_JSON", default=False, cast=bool)


def product_store(test: bool = False) -> JsonProductStore:
    return JsonProductStore(data_dir() / database_name(test))


async def connect() -> ProductRepository:
    """Open the production database and return a repository bound to it."""
    store = product_store()
    await store.connect()
    return ProductRepository(store)


async def test_connect() -> ProductRepository:
    """Open the isolated test database and return a repository bound to it."""
    store = product_store(test=True)
    await store.connect()
    return ProductRepository(store)


async def reset_test(repository: ProductRepository) -> None:
    await repository.store.drop()


async def tear_down(repository: ProductRepository) -> None:
    await repository.store.close()
