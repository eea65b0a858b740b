# app/domain/repositories/catalog_sources.py
"""
Backing stores for the product catalog.

A source only knows how to load the full product set; filtering and ordering
live in ProductCatalog. Sources are re-read on every call (no cache), so an
external change to the store is visible on the next request.
"""
from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Iterable, List, Protocol, Union

from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import ValidationError

from app.core.errors import Internal
from app.domain.models.product import Product

logger = logging.getLogger(__name__)


class CatalogSource(Protocol):
    async def load_all(self) -> List[Product]:
        ...


def _validate_records(records: Any, origin: str) -> List[Product]:
    if not isinstance(records, list):
        raise Internal("Failed to read products data", code="CATALOG_UNAVAILABLE")
    try:
        return [Product.model_validate(r) for r in records]
    except ValidationError as e:
        logger.error("Invalid product record in %s: %s", origin, e)
        raise Internal("Failed to read products data", code="CATALOG_UNAVAILABLE") from e


class JsonFileCatalogSource:
    """Flat JSON file holding an array of product objects."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _read(self) -> Any:
        with self.path.open("r", encoding="utf-8") as fh:
            return json.load(fh)

    async def load_all(self) -> List[Product]:
        try:
            # file I/O off the event loop
            records = await asyncio.to_thread(self._read)
        except FileNotFoundError as e:
            logger.error("Products data file not found: %s", self.path)
            raise Internal("Products data file not found", code="CATALOG_UNAVAILABLE") from e
        except (OSError, ValueError) as e:
            logger.error("Failed to read products data from %s: %s", self.path, e)
            raise Internal("Failed to read products data", code="CATALOG_UNAVAILABLE") from e

        products = _validate_records(records, str(self.path))
        logger.debug("catalog loaded source=file path=%s count=%s", self.path, len(products))
        return products


class MongoCatalogSource:
    """Every document of a Mongo collection (same camelCase shape as the JSON file)."""

    def __init__(self, db: AsyncIOMotorDatabase, collection_name: str = "products"):
        self.col = db[collection_name]

    async def load_all(self) -> List[Product]:
        try:
            docs = await self.col.find({}, {"_id": 0}).to_list(length=None)
        except Exception as e:
            logger.error("Failed to read products from mongo collection=%s err=%s", self.col.name, e)
            raise Internal("Failed to read products data", code="CATALOG_UNAVAILABLE") from e

        products = _validate_records(docs, f"mongo:{self.col.name}")
        logger.debug("catalog loaded source=mongo collection=%s count=%s", self.col.name, len(products))
        return products


class InMemoryCatalogSource:
    """Fixed product list; used by tests and local tooling."""

    def __init__(self, products: Iterable[Union[Product, dict]]):
        self._records = [p if isinstance(p, Product) else Product.model_validate(p) for p in products]

    async def load_all(self) -> List[Product]:
        # fresh list per call so callers never share state
        return list(self._records)
