from dataclasses import dataclass
from pydantic import BaseModel
from typing import Any, List, Optional

from app.domain.models.product import CAMEL_FROZEN, Product, SpecValue


class Reconciliation(BaseModel):
    """Requested vs found vs missing ids for one comparison call."""
    requested_ids: List[str]
    found_ids: List[str]
    missing_ids: List[str]

    model_config = CAMEL_FROZEN


class PriceBounds(BaseModel):
    min: float
    max: float

    model_config = CAMEL_FROZEN


class RangeStats(BaseModel):
    min: float
    max: float
    average: float

    model_config = CAMEL_FROZEN


# ----- Basic -----------------------------------------------------------------

class RatingEntry(BaseModel):
    id: str
    name: str
    rating: float
    price: float
    category: str
    brand: str

    model_config = CAMEL_FROZEN


class PriceEntry(BaseModel):
    id: str
    name: str
    price: float
    price_per_rating: Optional[float]

    model_config = CAMEL_FROZEN


class BasicSummary(BaseModel):
    total: int
    requested_ids: List[str]
    found_ids: List[str]
    missing_ids: List[str]
    price_range: RangeStats
    rating_comparison: List[RatingEntry]
    price_comparison: List[PriceEntry]

    model_config = CAMEL_FROZEN


class BasicComparison(BaseModel):
    products: List[Product]
    comparison: BasicSummary

    model_config = CAMEL_FROZEN


# ----- Detailed --------------------------------------------------------------

class PriceDistributionEntry(BaseModel):
    id: str
    name: str
    price: float
    price_category: str

    model_config = CAMEL_FROZEN


class PriceAnalysis(BaseModel):
    range: RangeStats
    distribution: List[PriceDistributionEntry]

    model_config = CAMEL_FROZEN


class RatingDistributionEntry(BaseModel):
    id: str
    name: str
    rating: float
    rating_category: str

    model_config = CAMEL_FROZEN


class RatingAnalysis(BaseModel):
    best_rated: Product
    average_rating: float
    rating_distribution: List[RatingDistributionEntry]

    model_config = CAMEL_FROZEN


class ValueEntry(BaseModel):
    id: str
    name: str
    price: float
    rating: float
    value_score: Optional[float]
    recommendation: str

    model_config = CAMEL_FROZEN


class DetailedAnalysis(BaseModel):
    categories: List[str]
    brands: List[str]
    price_analysis: PriceAnalysis
    rating_analysis: RatingAnalysis
    value_analysis: List[ValueEntry]

    model_config = CAMEL_FROZEN


class DetailedComparison(BaseModel):
    products: List[Product]
    analysis: DetailedAnalysis

    model_config = CAMEL_FROZEN


# ----- Visual ----------------------------------------------------------------

class Layout(BaseModel):
    columns: int
    max_columns: int
    responsive: str

    model_config = CAMEL_FROZEN


class Highlights(BaseModel):
    top_feature: str
    price_range: str
    rating_level: str

    model_config = CAMEL_FROZEN


class ProductCard(BaseModel):
    """Display projection of a product (no description, no specifications)."""
    id: str
    name: str
    image_url: str
    price: float
    rating: float
    category: str
    brand: str
    in_stock: bool

    model_config = CAMEL_FROZEN

    @classmethod
    def of(cls, p: Product) -> "ProductCard":
        return cls(
            id=p.id, name=p.name, image_url=p.image_url, price=p.price, rating=p.rating,
            category=p.category, brand=p.brand, in_stock=p.in_stock,
        )


class VisualCard(ProductCard):
    highlights: Highlights


class VisualSummary(BaseModel):
    price_range: PriceBounds
    categories: List[str]
    brands: List[str]
    best_value: Product

    model_config = CAMEL_FROZEN


class VisualComparison(BaseModel):
    layout: Layout
    products: List[VisualCard]
    comparison: VisualSummary

    model_config = CAMEL_FROZEN


# ----- Matrix ----------------------------------------------------------------

class MatrixCell(BaseModel):
    product_id: str
    product_name: str
    value: SpecValue
    has_feature: bool

    model_config = CAMEL_FROZEN


class MatrixRow(BaseModel):
    feature: str
    values: List[MatrixCell]

    model_config = CAMEL_FROZEN


class MatrixSummary(BaseModel):
    total_products: int
    total_features: int
    price_range: RangeStats
    rating_range: RangeStats

    model_config = CAMEL_FROZEN


class MatrixComparison(BaseModel):
    products: List[ProductCard]
    features: List[str]
    matrix: List[MatrixRow]
    summary: MatrixSummary

    model_config = CAMEL_FROZEN


# ----- Recommendations -------------------------------------------------------

class RecommendationItem(BaseModel):
    id: str
    name: str
    price: float
    rating: float
    reason: str

    model_config = CAMEL_FROZEN


class ValueRecommendationItem(RecommendationItem):
    value_score: Optional[float]


class RecommendationLists(BaseModel):
    best_value: List[ValueRecommendationItem]
    best_rated: List[RecommendationItem]
    budget_friendly: List[RecommendationItem]
    premium: List[RecommendationItem]

    model_config = CAMEL_FROZEN


class CurrentSelection(BaseModel):
    current_average_price: float
    current_average_rating: float
    price_range: PriceBounds

    model_config = CAMEL_FROZEN


class RecommendationReport(BaseModel):
    analyzed_products: List[Product]
    criteria: List[str]
    recommendations: RecommendationLists
    analysis: CurrentSelection

    model_config = CAMEL_FROZEN


# ----- Result ----------------------------------------------------------------

@dataclass(frozen=True)
class ComparisonResult:
    """What the engine hands to the presentation layer: reconciliation + one view payload."""
    products: List[Product]
    reconciliation: Reconciliation
    view: Any  # one of the *Comparison / RecommendationReport models above

    @property
    def total(self) -> int:
        return len(self.products)
