# app/domain/repositories/product_repo.py

from __future__ import annotations
from typing import List, Optional, Sequence
import logging

from app.core.errors import InvalidInput, NotFound
from app.domain.models.product import CatalogStats, PriceSummary, Product, ProductFilters
from app.domain.repositories.catalog_sources import CatalogSource

logger = logging.getLogger(__name__)


class ProductCatalog:
    """
    Read-only product catalog backed by an injected CatalogSource.
    Every method reloads the full product set; nothing is cached between calls.
    """

    def __init__(self, source: CatalogSource):
        self.source = source

    async def get_all(self, filters: Optional[ProductFilters] = None) -> List[Product]:
        products = await self.source.load_all()
        if filters is None:
            return products
        return [p for p in products if filters.matches(p)]

    async def get_by_id(self, product_id: str) -> Product:
        products = await self.source.load_all()
        for p in products:
            if p.id == product_id:
                return p
        raise NotFound("Product not found", code="PRODUCT_NOT_FOUND")

    async def get_by_ids(self, ids: Sequence[str]) -> List[Product]:
        """
        Resolve ids in the order given. Unknown ids are dropped, duplicates are kept.
        Raises NotFound when `ids` is empty or nothing resolves.
        """
        if not isinstance(ids, (list, tuple)) or len(ids) == 0:
            raise NotFound("Product IDs array is required", code="PRODUCTS_NOT_FOUND")

        products = await self.source.load_all()
        by_id = {}
        for p in products:
            by_id.setdefault(p.id, p)  # first wins, like a linear scan

        resolved = [by_id[i] for i in ids if i in by_id]
        logger.debug("get_by_ids requested=%s resolved=%s", len(ids), len(resolved))
        if not resolved:
            raise NotFound("No products found with the provided IDs", code="PRODUCTS_NOT_FOUND")
        return resolved

    async def search(self, query: str) -> List[Product]:
        """Case-insensitive substring match on name, description or brand."""
        if not isinstance(query, str) or not query.strip():
            raise InvalidInput("Search query is required", code="MISSING_QUERY")

        term = query.lower()
        products = await self.source.load_all()
        return [
            p for p in products
            if term in p.name.lower() or term in p.description.lower() or term in p.brand.lower()
        ]

    async def get_by_category(self, category: str) -> List[Product]:
        if not isinstance(category, str) or not category.strip():
            raise InvalidInput("Category is required", code="MISSING_CATEGORY")
        return await self.get_all(ProductFilters(category=category))

    async def get_categories(self) -> List[str]:
        products = await self.source.load_all()
        return sorted({p.category for p in products})

    async def get_brands(self) -> List[str]:
        products = await self.source.load_all()
        return sorted({p.brand for p in products})

    async def get_stats(self) -> CatalogStats:
        """Aggregates over one snapshot of the catalog. `average` is not rounded."""
        products = await self.source.load_all()
        prices = [p.price for p in products]
        if prices:
            price_range = PriceSummary(min=min(prices), max=max(prices), average=sum(prices) / len(prices))
        else:
            price_range = PriceSummary()

        in_stock = sum(1 for p in products if p.in_stock)
        return CatalogStats(
            total=len(products),
            categories=sorted({p.category for p in products}),
            brands=sorted({p.brand for p in products}),
            price_range=price_range,
            in_stock=in_stock,
            out_of_stock=len(products) - in_stock,
        )
