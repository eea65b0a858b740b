"""
Shared fixtures: an in-memory catalog and a TestClient wired to it.
"""
import os

os.environ.setdefault("APP_ENV", "test")

import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_catalog, redis_dep
from app.core.config import get_settings
from app.domain.repositories.catalog_sources import InMemoryCatalogSource
from app.domain.repositories.product_repo import ProductCatalog
from app.domain.services.comparison_svc import ComparisonEngine


def make_product(pid, name, price, rating, category="smartphones", brand="Apple", in_stock=True, specs=None, description=""):
    record = {
        "id": pid,
        "name": name,
        "description": description or f"{name} description",
        "brand": brand,
        "category": category,
        "price": price,
        "rating": rating,
        "inStock": in_stock,
        "imageUrl": f"https://img.example.com/{pid}.jpg",
    }
    if specs is not None:
        record["specifications"] = specs
    return record


PRODUCTS = [
    make_product("1", "iPhone 15 Pro", 999, 4.8, specs={"display": "6.1-inch", "processor": "A17 Pro", "storage": "128GB"},
                 description="Smartphone with the A17 Pro chip"),
    make_product("2", "Galaxy S24", 799, 4.6, brand="Samsung", specs={"display": "6.2-inch", "storage": "128GB", "stylus": ""}),
    make_product("3", "Pixel 8", 699, 4.5, brand="Google", in_stock=False, specs={"camera": "50MP", "display": "6.2-inch"}),
    make_product("4", "MacBook Air", 1099, 4.7, category="laptops", specs={"processor": "M3", "weight": "1.24 kg"}),
    make_product("5", "XPS 13", 1299, 4.4, category="Laptops", brand="Dell"),
    make_product("6", "IdeaPad Slim", 549, 3.9, category="laptops", brand="Lenovo"),
    make_product("7", "WH-1000XM5", 399, 4.7, category="headphones", brand="Sony", specs={"type": "Over-ear"}),
    make_product("8", "Tune 510BT", 49, 4.2, category="headphones", brand="JBL", in_stock=False),
    make_product("9", "Vision Pro", 3499, 4.1, category="wearables"),
    make_product("10", "Budget Buds", 19, 3.2, category="headphones", brand="Acme"),
]


@pytest.fixture
def products():
    return list(PRODUCTS)


@pytest.fixture
def catalog(products):
    return ProductCatalog(InMemoryCatalogSource(products))


@pytest.fixture
def engine(catalog):
    return ComparisonEngine(catalog)


@pytest.fixture
def app():
    from app.main import app as fastapi_app
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def client(app, catalog):
    app.dependency_overrides[get_catalog] = lambda: catalog
    app.dependency_overrides[redis_dep] = lambda: None
    return TestClient(app)


@pytest.fixture
def reset_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
