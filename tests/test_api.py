"""
HTTP surface tests: envelopes, status codes and error bodies.
"""
import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_catalog, redis_dep
from app.core.config import Settings, get_settings
from app.domain.repositories.catalog_sources import JsonFileCatalogSource
from app.domain.repositories.product_repo import ProductCatalog


class TestListing:

    def test_list_all(self, client, products):
        body = client.get("/api/products").json()
        assert body["success"] is True
        assert body["total"] == len(products)
        assert {"id", "name", "price", "inStock", "imageUrl"} <= set(body["data"][0])

    def test_list_filters_are_echoed(self, client):
        body = client.get("/api/products", params={"category": "laptops", "inStock": "true"}).json()
        assert body["filters"] == {"category": "laptops", "brand": None, "inStock": True, "search": None}
        assert {p["id"] for p in body["data"]} == {"4", "5", "6"}

    def test_search_takes_precedence(self, client):
        body = client.get("/api/products", params={"search": "iphone", "category": "laptops"}).json()
        assert [p["id"] for p in body["data"]] == ["1"]

    def test_invalid_in_stock_is_a_validation_error(self, client):
        resp = client.get("/api/products", params={"inStock": "maybe"})
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_get_product(self, client):
        body = client.get("/api/products/1").json()
        assert body == {"success": True, "data": body["data"]}
        assert body["data"]["name"] == "iPhone 15 Pro"

    def test_get_product_not_found(self, client):
        resp = client.get("/api/products/999")
        assert resp.status_code == 404
        assert resp.json() == {"success": False, "error": {"message": "Product not found", "code": "PRODUCT_NOT_FOUND"}}


class TestLookups:

    def test_search(self, client):
        body = client.get("/api/products/search", params={"q": "Sony"}).json()
        assert body["query"] == "Sony"
        assert body["total"] == 1

    @pytest.mark.parametrize("params", [{}, {"q": ""}, {"q": "  "}])
    def test_search_requires_query(self, client, params):
        resp = client.get("/api/products/search", params=params)
        assert resp.status_code == 400
        assert resp.json()["error"] == {"message": "Search query is required", "code": "MISSING_QUERY"}

    def test_category(self, client):
        body = client.get("/api/products/category/HEADPHONES").json()
        assert body["category"] == "HEADPHONES"
        assert {p["id"] for p in body["data"]} == {"7", "8", "10"}

    def test_blank_category(self, client):
        resp = client.get("/api/products/category/%20")
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "MISSING_CATEGORY"

    def test_categories_and_brands(self, client):
        categories = client.get("/api/products/categories/list").json()
        brands = client.get("/api/products/brands/list").json()
        assert categories["data"] == sorted(set(categories["data"]))
        assert categories["total"] == len(categories["data"])
        assert brands["data"] == sorted(set(brands["data"]))

    def test_stats(self, client, products):
        data = client.get("/api/products/stats/overview").json()["data"]
        assert data["total"] == len(products)
        assert data["inStock"] + data["outOfStock"] == data["total"]
        assert data["priceRange"]["min"] == 19

    def test_price_range(self, client):
        data = client.get("/api/products/price-range").json()["data"]
        assert data["min"] == 19
        assert data["max"] == 3499
        assert data["average"] == 941
        assert data["currency"] == "USD"


class TestCompareEndpoints:

    def test_basic(self, client):
        body = client.get("/api/products/compare", params={"ids": "1,2,999"}).json()
        assert body["success"] is True
        assert body["total"] == 2
        assert body["requestedIds"] == ["1", "2", "999"]
        assert body["foundIds"] == ["1", "2"]
        assert body["missingIds"] == ["999"]
        comparison = body["data"]["comparison"]
        assert comparison["priceRange"] == {"min": 799, "max": 999, "average": 899}
        assert comparison["ratingComparison"][0]["id"] == "1"
        assert comparison["missingIds"] == ["999"]

    @pytest.mark.parametrize("path", ["", "/detailed", "/visual", "/matrix", "/recommendations"])
    @pytest.mark.parametrize("query", ["", "?ids=", "?ids=%20,%20"])
    def test_blank_ids(self, client, path, query):
        resp = client.get(f"/api/products/compare{path}{query}")
        assert resp.status_code == 400
        assert resp.json()["error"] == {"message": "At least one valid product ID is required", "code": "TOO_FEW_IDS"}

    @pytest.mark.parametrize("path,cap,message", [
        ("", 10, "Maximum 10 products can be compared at once"),
        ("/detailed", 10, "Maximum 10 products can be compared at once"),
        ("/visual", 6, "Maximum 6 products can be compared visually"),
        ("/matrix", 8, "Maximum 8 products can be compared in matrix view"),
        ("/recommendations", 10, "Maximum 10 products can be analyzed for recommendations"),
    ])
    def test_too_many(self, client, path, cap, message):
        ids = ",".join(str(i) for i in range(1, cap + 2))
        resp = client.get(f"/api/products/compare{path}", params={"ids": ids})
        assert resp.status_code == 400
        assert resp.json()["error"] == {"message": message, "code": "TOO_MANY_IDS"}

    def test_none_found(self, client):
        resp = client.get("/api/products/compare/matrix", params={"ids": "998,999"})
        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "PRODUCTS_NOT_FOUND"

    def test_detailed(self, client):
        analysis = client.get("/api/products/compare/detailed", params={"ids": "1,2"}).json()["data"]["analysis"]
        assert {"categories", "brands", "priceAnalysis", "ratingAnalysis", "valueAnalysis"} <= set(analysis)
        assert analysis["ratingAnalysis"]["bestRated"]["id"] == "1"

    def test_visual(self, client):
        data = client.get("/api/products/compare/visual", params={"ids": "1,2"}).json()["data"]
        assert data["layout"] == {"columns": 2, "maxColumns": 6, "responsive": "table"}
        assert data["products"][0]["highlights"]["topFeature"] == "display"
        assert "bestValue" in data["comparison"]

    def test_matrix(self, client):
        data = client.get("/api/products/compare/matrix", params={"ids": "1,3"}).json()["data"]
        assert data["features"] == ["display", "processor", "storage", "camera"]
        cell = data["matrix"][0]["values"][0]
        assert cell == {"productId": "1", "productName": "iPhone 15 Pro", "value": "6.1-inch", "hasFeature": True}
        assert data["summary"]["totalProducts"] == 2

    def test_recommendations_with_criteria(self, client):
        body = client.get("/api/products/compare/recommendations", params={"ids": "1,2", "criteria": "value,price"}).json()
        assert body["data"]["criteria"] == ["value", "price"]
        recs = body["data"]["recommendations"]
        assert recs["bestValue"][0]["reason"] == "Best value for money"
        assert "valueScore" in recs["bestValue"][0]
        assert "valueScore" not in recs["bestRated"][0]

    def test_recommendations_empty_criteria_uses_defaults(self, client):
        resp = client.get("/api/products/compare/recommendations", params={"ids": "1,2", "criteria": ""})
        assert resp.status_code == 200
        assert resp.json()["data"]["criteria"] == ["value", "rating", "price"]

    def test_recommendations_malformed_criteria(self, client):
        resp = client.get("/api/products/compare/recommendations", params={"ids": "1", "criteria": ","})
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "INVALID_CRITERIA"


class TestErrors:

    def test_unknown_route(self, client):
        resp = client.get("/api/unknown/route")
        assert resp.status_code == 404
        assert resp.json()["error"] == {"message": "Route /api/unknown/route not found", "code": "ROUTE_NOT_FOUND"}

    def test_catalog_failure_in_development_keeps_message(self, app, tmp_path, monkeypatch, reset_settings):
        monkeypatch.setenv("APP_ENV", "development")
        app.dependency_overrides[get_catalog] = lambda: ProductCatalog(JsonFileCatalogSource(tmp_path / "missing.json"))
        app.dependency_overrides[redis_dep] = lambda: None
        resp = TestClient(app).get("/api/products")
        assert resp.status_code == 500
        assert resp.json()["error"] == {"message": "Products data file not found", "code": "CATALOG_UNAVAILABLE"}

    def test_catalog_failure_redacted_in_production(self, app, tmp_path, monkeypatch, reset_settings):
        monkeypatch.setenv("APP_ENV", "production")
        app.dependency_overrides[get_catalog] = lambda: ProductCatalog(JsonFileCatalogSource(tmp_path / "missing.json"))
        app.dependency_overrides[redis_dep] = lambda: None
        resp = TestClient(app).get("/api/products/compare", params={"ids": "1"})
        assert resp.status_code == 500
        assert resp.json() == {"success": False, "error": {"message": "Internal server error", "code": "INTERNAL_ERROR"}}


class FakeRedis:

    def __init__(self):
        self.counters = {}
        self.ttls = {}

    async def incr(self, key):
        self.counters[key] = self.counters.get(key, 0) + 1
        return self.counters[key]

    async def expire(self, key, seconds):
        self.ttls[key] = seconds


class TestRateLimit:

    def test_limit_per_window(self, app, catalog):
        fake = FakeRedis()
        app.dependency_overrides[get_catalog] = lambda: catalog
        app.dependency_overrides[redis_dep] = lambda: fake
        app.dependency_overrides[get_settings] = lambda: Settings(rate_limit_max_requests=2, rate_limit_window_s=86400)
        client = TestClient(app)

        assert client.get("/api/products/1").status_code == 200
        assert client.get("/api/products/compare", params={"ids": "1"}).status_code == 200
        resp = client.get("/api/products/1")
        assert resp.status_code == 429
        assert resp.json()["error"]["code"] == "RATE_LIMIT_EXCEEDED"
        assert list(fake.ttls.values()) == [86400]

    def test_health_reports_checks(self, app, catalog):
        app.dependency_overrides[get_catalog] = lambda: catalog
        app.dependency_overrides[redis_dep] = lambda: None
        body = TestClient(app).get("/health").json()
        assert body["success"] is True
        assert body["checks"]["catalog"] == "ok"
        assert body["checks"]["redis"] == "skipped"
        assert body["checks"]["products"] == 10

    def test_health_unavailable_catalog_is_503(self, app, tmp_path):
        app.dependency_overrides[get_catalog] = lambda: ProductCatalog(JsonFileCatalogSource(tmp_path / "missing.json"))
        app.dependency_overrides[redis_dep] = lambda: None
        resp = TestClient(app).get("/health")
        assert resp.status_code == 503
        body = resp.json()
        assert body["success"] is False
        assert body["checks"]["catalog"] == "error: Products data file not found"
