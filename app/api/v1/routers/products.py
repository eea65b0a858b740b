# app/api/v1/routers/products.py

from fastapi import APIRouter, Depends, Query
from typing import Optional
import time

from app.api.deps import enforce_rate_limit, get_catalog
from app.api.v1.schemas.envelope import ok, ok_list
from app.core.config import Settings, get_settings
from app.domain.models.product import ProductFilters
from app.domain.repositories.product_repo import ProductCatalog
from app.domain.services.scoring import round2

import logging
logger = logging.getLogger(__name__)

router = APIRouter(tags=["products"], dependencies=[Depends(enforce_rate_limit)])


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    return value if value and value.strip() else None


@router.get("/products", summary="List products, optionally filtered or searched")
async def list_products(
    category: Optional[str] = Query(None, description="Exact category (case-insensitive)"),
    brand: Optional[str] = Query(None, description="Exact brand (case-insensitive)"),
    in_stock: Optional[bool] = Query(None, alias="inStock", description="Stock status"),
    search: Optional[str] = Query(None, description="Free-text search; takes precedence over filters"),
    catalog: ProductCatalog = Depends(get_catalog),
):
    t0 = time.perf_counter()
    if _blank_to_none(search):
        products = await catalog.search(search)
    else:
        filters = ProductFilters(category=_blank_to_none(category), brand=_blank_to_none(brand), in_stock=in_stock)
        products = await catalog.get_all(filters)

    logger.info(
        "Response: list_products count=%s category=%s brand=%s inStock=%s search=%s elapsed_time=%.4fs",
        len(products), category, brand, in_stock, search, time.perf_counter() - t0,
    )
    return ok_list(
        products,
        filters={"category": category, "brand": brand, "inStock": in_stock, "search": search},
    )


@router.get("/products/search", summary="Search products by name, description or brand")
async def search_products(
    q: Optional[str] = Query(None, description="Search query"),
    catalog: ProductCatalog = Depends(get_catalog),
):
    products = await catalog.search(q)
    logger.info("Response: search_products q=%r count=%s", q, len(products))
    return ok_list(products, query=q)


@router.get("/products/stats/overview", summary="Catalog statistics")
async def stats_overview(catalog: ProductCatalog = Depends(get_catalog)):
    stats = await catalog.get_stats()
    return ok(stats)


@router.get("/products/categories/list", summary="Distinct categories, sorted")
async def list_categories(catalog: ProductCatalog = Depends(get_catalog)):
    return ok_list(await catalog.get_categories())


@router.get("/products/brands/list", summary="Distinct brands, sorted")
async def list_brands(catalog: ProductCatalog = Depends(get_catalog)):
    return ok_list(await catalog.get_brands())


@router.get("/products/price-range", summary="Catalog price range summary")
async def price_range(
    catalog: ProductCatalog = Depends(get_catalog),
    settings: Settings = Depends(get_settings),
):
    stats = await catalog.get_stats()
    pr = stats.price_range
    return ok({
        "min": pr.min,
        "max": pr.max,
        "average": round2(pr.average) if pr.average is not None else None,
        "currency": settings.currency,
    })


@router.get("/products/category/{category}", summary="Products in one category")
async def products_by_category(
    category: str,
    catalog: ProductCatalog = Depends(get_catalog),
):
    products = await catalog.get_by_category(category)
    logger.info("Response: products_by_category category=%s count=%s", category, len(products))
    return ok_list(products, category=category)


@router.get("/products/{product_id}", summary="Single product by id")
async def get_product(
    product_id: str,
    catalog: ProductCatalog = Depends(get_catalog),
):
    product = await catalog.get_by_id(product_id)
    return ok(product)
