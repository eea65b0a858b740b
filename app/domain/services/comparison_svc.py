import logging
from typing import Iterable, List, Optional, Sequence

from app.core.errors import InvalidInput, TooMany
from app.domain.models.comparison import (
    BasicComparison,
    BasicSummary,
    ComparisonResult,
    CurrentSelection,
    DetailedAnalysis,
    DetailedComparison,
    Highlights,
    Layout,
    MatrixCell,
    MatrixComparison,
    MatrixRow,
    MatrixSummary,
    PriceAnalysis,
    PriceBounds,
    PriceDistributionEntry,
    PriceEntry,
    ProductCard,
    RangeStats,
    RatingAnalysis,
    RatingDistributionEntry,
    RatingEntry,
    RecommendationItem,
    RecommendationLists,
    RecommendationReport,
    Reconciliation,
    ValueEntry,
    ValueRecommendationItem,
    VisualCard,
    VisualComparison,
    VisualSummary,
)
from app.domain.models.product import Product
from app.domain.repositories.product_repo import ProductCatalog
from app.domain.services import scoring
from app.domain.services.constants import (
    DEFAULT_CRITERIA,
    MAX_IDS,
    NOT_AVAILABLE,
    RECOMMENDATION_LIMIT,
    TOO_MANY_MESSAGES,
    VIEW_BASIC,
    VIEW_DETAILED,
    VIEW_MATRIX,
    VIEW_RECOMMENDATIONS,
    VIEW_VISUAL,
    VISUAL_TABLE_MAX_COLUMNS,
)

logger = logging.getLogger(__name__)

IDS_REQUIRED_MESSAGE = "At least one valid product ID is required"


# ---- Input parsing ----------------------------------------------------------

def parse_ids(raw: Optional[str]) -> List[str]:
    """Split a comma-separated id list, trim each segment and drop empty ones. Order and duplicates are kept."""
    if raw is None:
        return []
    return [s.strip() for s in str(raw).split(",") if s.strip()]


def validate_ids(raw: Optional[str], view: str) -> List[str]:
    """
    Shared prelude of every comparison view:
      - zero ids after trimming -> InvalidInput (TOO_FEW_IDS)
      - more ids than the view cap -> TooMany (TOO_MANY_IDS)
    """
    ids = parse_ids(raw)
    if not ids:
        raise InvalidInput(IDS_REQUIRED_MESSAGE, code="TOO_FEW_IDS")
    if len(ids) > MAX_IDS[view]:
        raise TooMany(TOO_MANY_MESSAGES[view], code="TOO_MANY_IDS")
    return ids


def parse_criteria(raw: Optional[str]) -> List[str]:
    """Recommendation criteria are passthrough metadata; absent or empty means the defaults."""
    if not raw:
        return list(DEFAULT_CRITERIA)
    criteria = [c.strip() for c in raw.split(",") if c.strip()]
    if not criteria:
        raise InvalidInput("Recommendation criteria must be a comma-separated list", code="INVALID_CRITERIA")
    return criteria


def reconcile(requested: Sequence[str], products: Sequence[Product]) -> Reconciliation:
    found = [p.id for p in products]
    found_set = set(found)
    return Reconciliation(
        requested_ids=list(requested),
        found_ids=found,
        missing_ids=[i for i in requested if i not in found_set],
    )


# ---- Shared aggregates ------------------------------------------------------

def _distinct(values: Iterable[str]) -> List[str]:
    # insertion order of first occurrence
    return list(dict.fromkeys(values))


def _range_stats(values: Sequence[float]) -> RangeStats:
    return RangeStats(min=min(values), max=max(values), average=scoring.round2(scoring.average(values)))


def _price_bounds(products: Sequence[Product]) -> PriceBounds:
    prices = [p.price for p in products]
    return PriceBounds(min=min(prices), max=max(prices))


# ---- Views ------------------------------------------------------------------

def build_basic(products: Sequence[Product], rec: Reconciliation) -> BasicComparison:
    rating_comparison = [
        RatingEntry(id=p.id, name=p.name, rating=p.rating, price=p.price, category=p.category, brand=p.brand)
        for p in scoring.rank_desc(products, key=lambda p: p.rating)
    ]
    price_comparison = [
        PriceEntry(id=p.id, name=p.name, price=p.price, price_per_rating=scoring.price_per_rating(p.price, p.rating))
        for p in scoring.rank_asc(products, key=lambda p: p.price)
    ]
    return BasicComparison(
        products=list(products),
        comparison=BasicSummary(
            total=len(products),
            requested_ids=rec.requested_ids,
            found_ids=rec.found_ids,
            missing_ids=rec.missing_ids,
            price_range=_range_stats([p.price for p in products]),
            rating_comparison=rating_comparison,
            price_comparison=price_comparison,
        ),
    )


def build_detailed(products: Sequence[Product]) -> DetailedComparison:
    value_entries = [
        ValueEntry(
            id=p.id,
            name=p.name,
            price=p.price,
            rating=p.rating,
            value_score=scoring.value_score(p.rating, p.price),
            recommendation=scoring.value_recommendation(p.rating, p.price),
        )
        for p in products
    ]
    analysis = DetailedAnalysis(
        categories=_distinct(p.category for p in products),
        brands=_distinct(p.brand for p in products),
        price_analysis=PriceAnalysis(
            range=_range_stats([p.price for p in products]),
            distribution=[
                PriceDistributionEntry(id=p.id, name=p.name, price=p.price, price_category=scoring.price_bucket(p.price))
                for p in products
            ],
        ),
        rating_analysis=RatingAnalysis(
            best_rated=scoring.best_by(products, scoring.higher_rating),
            average_rating=scoring.round2(scoring.average(p.rating for p in products)),
            rating_distribution=[
                RatingDistributionEntry(id=p.id, name=p.name, rating=p.rating, rating_category=scoring.rating_bucket(p.rating))
                for p in products
            ],
        ),
        value_analysis=scoring.rank_desc(value_entries, key=lambda v: v.value_score),
    )
    return DetailedComparison(products=list(products), analysis=analysis)


def _top_feature(p: Product) -> str:
    if not p.specifications:
        return NOT_AVAILABLE
    return next(iter(p.specifications))


def build_visual(products: Sequence[Product]) -> VisualComparison:
    count = len(products)
    cards = [
        VisualCard(
            **ProductCard.of(p).model_dump(),
            highlights=Highlights(
                top_feature=_top_feature(p),
                price_range=scoring.price_bucket(p.price),
                rating_level=scoring.rating_bucket(p.rating, with_below_average=False),
            ),
        )
        for p in products
    ]
    return VisualComparison(
        layout=Layout(
            columns=count,
            max_columns=MAX_IDS[VIEW_VISUAL],
            responsive="grid" if count > VISUAL_TABLE_MAX_COLUMNS else "table",
        ),
        products=cards,
        comparison=VisualSummary(
            price_range=_price_bounds(products),
            categories=_distinct(p.category for p in products),
            brands=_distinct(p.brand for p in products),
            best_value=scoring.best_by(products, scoring.higher_value),
        ),
    )


def collect_features(products: Sequence[Product]) -> List[str]:
    """Union of specification keys, in order of first appearance, case-sensitive."""
    features: dict = {}
    for p in products:
        for key in (p.specifications or {}):
            features.setdefault(key, None)
    return list(features)


def _matrix_cell(p: Product, feature: str) -> MatrixCell:
    raw = (p.specifications or {}).get(feature)
    has = bool(raw)
    return MatrixCell(product_id=p.id, product_name=p.name, value=raw if has else NOT_AVAILABLE, has_feature=has)


def build_matrix(products: Sequence[Product]) -> MatrixComparison:
    features = collect_features(products)
    return MatrixComparison(
        products=[ProductCard.of(p) for p in products],
        features=features,
        matrix=[MatrixRow(feature=f, values=[_matrix_cell(p, f) for p in products]) for f in features],
        summary=MatrixSummary(
            total_products=len(products),
            total_features=len(features),
            price_range=_range_stats([p.price for p in products]),
            rating_range=_range_stats([p.rating for p in products]),
        ),
    )


def _item(p: Product, reason: str) -> RecommendationItem:
    return RecommendationItem(id=p.id, name=p.name, price=p.price, rating=p.rating, reason=reason)


def build_recommendations(
    products: Sequence[Product],
    catalog: Sequence[Product],
    requested_ids: Sequence[str],
    criteria: List[str],
) -> RecommendationReport:
    """
    Alternatives drawn from the whole catalog minus every requested id (found or not).
    Budget/premium thresholds are strict: price-equal products are not alternatives.
    """
    excluded = set(requested_ids)
    pool = [p for p in catalog if p.id not in excluded]
    min_price = min(p.price for p in products)
    max_price = max(p.price for p in products)
    k = RECOMMENDATION_LIMIT

    best_value = [
        ValueRecommendationItem(
            id=p.id, name=p.name, price=p.price, rating=p.rating,
            value_score=scoring.value_score(p.rating, p.price),
            reason="Best value for money",
        )
        for p in scoring.rank_desc(pool, key=lambda p: scoring.value_ratio(p.rating, p.price))[:k]
    ]
    best_rated = [_item(p, "Highest rated alternatives") for p in scoring.rank_desc(pool, key=lambda p: p.rating)[:k]]
    budget = [
        _item(p, "More affordable options")
        for p in scoring.rank_asc([p for p in pool if p.price < min_price], key=lambda p: p.price)[:k]
    ]
    premium = [
        _item(p, "Premium alternatives")
        for p in scoring.rank_desc([p for p in pool if p.price > max_price], key=lambda p: p.rating)[:k]
    ]

    return RecommendationReport(
        analyzed_products=list(products),
        criteria=criteria,
        recommendations=RecommendationLists(
            best_value=best_value,
            best_rated=best_rated,
            budget_friendly=budget,
            premium=premium,
        ),
        analysis=CurrentSelection(
            current_average_price=scoring.round2(scoring.average(p.price for p in products)),
            current_average_rating=scoring.round2(scoring.average(p.rating for p in products)),
            price_range=PriceBounds(min=min_price, max=max_price),
        ),
    )


# ---- Engine -----------------------------------------------------------------

class ComparisonEngine:
    """
    Validates the id list, resolves it against the catalog and builds one view.
    Validation happens before the catalog is touched; NotFound propagates from
    the catalog when no id resolves.
    """

    def __init__(self, catalog: ProductCatalog):
        self.catalog = catalog

    async def _resolve(self, ids: List[str], view: str):
        products = await self.catalog.get_by_ids(ids)
        rec = reconcile(ids, products)
        logger.info(
            "compare view=%s requested=%s found=%s missing=%s",
            view, len(rec.requested_ids), len(rec.found_ids), rec.missing_ids,
        )
        return products, rec

    async def compare_basic(self, raw_ids: Optional[str]) -> ComparisonResult:
        ids = validate_ids(raw_ids, VIEW_BASIC)
        products, rec = await self._resolve(ids, VIEW_BASIC)
        return ComparisonResult(products, rec, build_basic(products, rec))

    async def compare_detailed(self, raw_ids: Optional[str]) -> ComparisonResult:
        ids = validate_ids(raw_ids, VIEW_DETAILED)
        products, rec = await self._resolve(ids, VIEW_DETAILED)
        return ComparisonResult(products, rec, build_detailed(products))

    async def compare_visual(self, raw_ids: Optional[str]) -> ComparisonResult:
        ids = validate_ids(raw_ids, VIEW_VISUAL)
        products, rec = await self._resolve(ids, VIEW_VISUAL)
        return ComparisonResult(products, rec, build_visual(products))

    async def compare_matrix(self, raw_ids: Optional[str]) -> ComparisonResult:
        ids = validate_ids(raw_ids, VIEW_MATRIX)
        products, rec = await self._resolve(ids, VIEW_MATRIX)
        return ComparisonResult(products, rec, build_matrix(products))

    async def compare_recommendations(self, raw_ids: Optional[str], raw_criteria: Optional[str] = None) -> ComparisonResult:
        ids = validate_ids(raw_ids, VIEW_RECOMMENDATIONS)
        criteria = parse_criteria(raw_criteria)
        products, rec = await self._resolve(ids, VIEW_RECOMMENDATIONS)
        catalog = await self.catalog.get_all()
        report = build_recommendations(products, catalog, rec.requested_ids, criteria)
        return ComparisonResult(products, rec, report)
