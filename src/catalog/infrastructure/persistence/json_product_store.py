"""JSON-file-backed implementation of ProductStore.

A database is a directory and a collection is one JSON file in it
holding a list of documents. Writes are serialized with an asyncio lock
so the unique index on ``id`` is enforced atomically, and each write
lands through a temporary file and ``os.replace`` so readers always see
a complete file. File I/O runs in worker threads. ``price`` is stored
as a JSON number.
"""

from __future__ import annotations

import asyncio
import json
import os
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Callable

import structlog

from catalog.domain.exceptions import DuplicateKeyError, StorageError, ValidationError
from catalog.domain.model.product import Product, to_price
from catalog.domain.repository.product_store import ProductStore

logger = structlog.get_logger(__name__)

DEFAULT_COLLECTION = "Products"


class JsonProductStore(ProductStore):

    def __init__(self, database_dir: Path, collection: str = DEFAULT_COLLECTION) -> None:
        self._file_path = Path(database_dir) / f"{collection}.json"
        self._lock: asyncio.Lock | None = None
        self._lock_loop: asyncio.AbstractEventLoop | None = None
        self._connected = False

    @property
    def file_path(self) -> Path:
        return self._file_path

    # --- Lifecycle ------------------------------------------------------------

    async def connect(self) -> None:
        await self._run(self._ensure_file)
        self._lock = None
        self._connected = True
        logger.info("store.connected", path=str(self._file_path))

    async def close(self) -> None:
        self._connected = False
        logger.info("store.closed", path=str(self._file_path))

    async def drop(self) -> None:
        self._check_connected()
        async with self._write_lock():
            await self._run(self._persist, {})
        logger.info("store.dropped", path=str(self._file_path))

    # --- ProductStore interface -----------------------------------------------

    async def find_by_id(self, product_id: int) -> Product | None:
        return (await self._load_all()).get(product_id)

    async def find_by_name_fragment(self, fragment: str) -> list[Product]:
        needle = fragment.lower()
        return [
            p for p in (await self._load_all()).values()
            if needle in p.product_name.lower()
        ]

    async def find_by_price(self, price: Decimal) -> list[Product]:
        return [p for p in (await self._load_all()).values() if p.price == price]

    async def find_by_stock(self, stock: int) -> list[Product]:
        return [p for p in (await self._load_all()).values() if p.stock == stock]

    async def find_all(self) -> list[Product]:
        return list((await self._load_all()).values())

    async def insert(self, product: Product) -> None:
        self._check_connected()
        async with self._write_lock():
            products = await self._run(self._load)
            if product.id in products:
                raise DuplicateKeyError(f"Duplicate key: id {product.id}")
            products[product.id] = product
            await self._run(self._persist, products)

    async def replace(self, product: Product) -> None:
        self._check_connected()
        async with self._write_lock():
            products = await self._run(self._load)
            products[product.id] = product
            await self._run(self._persist, products)

    # --- Serialization helpers ------------------------------------------------

    async def _load_all(self) -> dict[int, Product]:
        self._check_connected()
        return await self._run(self._load)

    def _load(self) -> dict[int, Product]:
        raw = json.loads(self._file_path.read_text(encoding="utf-8"))
        try:
            return {
                item["id"]: Product(
                    id=item["id"],
                    product_name=item["productName"],
                    price=to_price(item["price"]),
                    stock=item["stock"],
                )
                for item in raw
            }
        except (KeyError, TypeError, InvalidOperation, ValidationError) as exc:
            raise StorageError(f"Corrupt document in {self._file_path.name}") from exc

    def _persist(self, products: dict[int, Product]) -> None:
        raw = [
            {
                "id": p.id,
                "productName": p.product_name,
                "price": float(p.price),
                "stock": p.stock,
            }
            for p in products.values()
        ]
        tmp_path = self._file_path.with_name(self._file_path.name + ".tmp")
        tmp_path.write_text(json.dumps(raw, indent=2) + "\n", encoding="utf-8")
        os.replace(tmp_path, self._file_path)

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")

    def _write_lock(self) -> asyncio.Lock:
        # a Lock belongs to one event loop; each asyncio.run gets its own
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    def _check_connected(self) -> None:
        if not self._connected:
            raise StorageError("Store is not connected")

    async def _run(self, func: Callable, *args):
        try:
            return await asyncio.to_thread(func, *args)
        except (OSError, ValueError) as exc:
            # json.JSONDecodeError is a ValueError
            raise StorageError(f"{type(exc).__name__}: {exc}") from exc
