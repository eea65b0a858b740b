from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Dict, Optional, Union

SpecValue = Union[str, int, float, bool, None]

# camelCase on the wire (inStock, imageUrl, ...), snake_case in Python
CAMEL_FROZEN = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)  # immuable = safe


class Product(BaseModel):
    """
    A catalog entry. Built fresh from the backing store on every read and never mutated.
    `specifications` keeps the insertion order of the stored mapping.
    """
    id: str
    name: str
    description: str = ""
    brand: str = ""
    category: str = ""
    price: float = Field(ge=0)
    rating: float = Field(ge=0)  # 0..5 expected, not enforced
    in_stock: bool = False
    image_url: str = ""
    specifications: Optional[Dict[str, SpecValue]] = None

    model_config = CAMEL_FROZEN


class ProductFilters(BaseModel):
    """
    Recognized listing filters. A field left to None means "no constraint".
    - category / brand: exact, case-insensitive match
    - in_stock: exact boolean match
    """
    category: Optional[str] = None
    brand: Optional[str] = None
    in_stock: Optional[bool] = None

    model_config = CAMEL_FROZEN

    def matches(self, product: Product) -> bool:
        if self.category is not None and product.category.lower() != self.category.lower():
            return False
        if self.brand is not None and product.brand.lower() != self.brand.lower():
            return False
        if self.in_stock is not None and product.in_stock is not self.in_stock:
            return False
        return True


class PriceSummary(BaseModel):
    min: Optional[float] = None
    max: Optional[float] = None
    average: Optional[float] = None

    model_config = CAMEL_FROZEN


class CatalogStats(BaseModel):
    total: int
    categories: list[str]
    brands: list[str]
    price_range: PriceSummary
    in_stock: int
    out_of_stock: int

    model_config = CAMEL_FROZEN
