# app/api/deps.py
from fastapi import Depends, Request
from app.core.config import Settings, get_settings
from app.core.errors import RateLimited
from app.db import mongo
from app.db.redis import get_redis
from app.domain.repositories.catalog_sources import CatalogSource, JsonFileCatalogSource, MongoCatalogSource
from app.domain.repositories.product_repo import ProductCatalog
from app.domain.services.comparison_svc import ComparisonEngine
from app.utils.rate_limit import FixedWindowRateLimiter


# Dependency for the catalog backing store chosen by CATALOG_SOURCE
def catalog_source(settings: Settings = Depends(get_settings)) -> CatalogSource:
    if settings.CATALOG_SOURCE == "mongo":
        return MongoCatalogSource(mongo.get_db(), settings.MONGO_COLLECTION)
    return JsonFileCatalogSource(settings.CATALOG_PATH)


# Fresh accessor per request (no cross-request state)
def get_catalog(source: CatalogSource = Depends(catalog_source)) -> ProductCatalog:
    return ProductCatalog(source)


def get_comparison_engine(catalog: ProductCatalog = Depends(get_catalog)) -> ComparisonEngine:
    return ComparisonEngine(catalog)


# Dependency for injecting the Redis client (None when not configured)
def redis_dep():
    return get_redis()


async def enforce_rate_limit(
    request: Request,
    redis = Depends(redis_dep),
    settings: Settings = Depends(get_settings),
):
    if redis is None:
        return
    limiter = FixedWindowRateLimiter(
        redis,
        limit=settings.rate_limit_max_requests,
        window_s=settings.rate_limit_window_s,
        prefix=settings.rate_limit_prefix,
    )
    client = request.client.host if request.client else "unknown"
    if not await limiter.hit(client):
        raise RateLimited("Too many requests from this IP, please try again later.")
