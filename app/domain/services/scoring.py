# app/domain/services/scoring.py
"""
Pure scoring and ranking helpers used by the comparison engine.

Zero-division policy:
  - value_ratio / value_score are None when price == 0
  - price_per_rating is None when rating == 0
  - rankings put undefined scores last, keeping input order among equals
"""
from __future__ import annotations

import math
from typing import Callable, Iterable, List, Optional, Sequence, TypeVar

from app.domain.services.constants import (
    BEST_VALUE_MAX_PRICE,
    BEST_VALUE_MIN_RATING,
    GOOD_VALUE_MAX_PRICE,
    GOOD_VALUE_MIN_RATING,
    PRICE_BUDGET_BELOW,
    PRICE_PREMIUM_FROM,
    RATING_AVERAGE,
    RATING_EXCELLENT,
    RATING_GOOD,
    VALUE_SCALE,
)

T = TypeVar("T")


def round2(x: float) -> float:
    """Round half up on the value scaled by 100 (0.125 -> 0.13, -0.125 -> -0.12)."""
    return math.floor(x * 100 + 0.5) / 100


def average(values: Iterable[float]) -> float:
    vals = list(values)
    if not vals:
        raise ValueError("average() of an empty sequence")
    return sum(vals) / len(vals)


def value_ratio(rating: float, price: float) -> Optional[float]:
    if price == 0:
        return None
    return rating / price


def value_score(rating: float, price: float) -> Optional[float]:
    ratio = value_ratio(rating, price)
    return None if ratio is None else round2(ratio * VALUE_SCALE)


def price_per_rating(price: float, rating: float) -> Optional[float]:
    if rating == 0:
        return None
    return round2(price / rating)


def price_bucket(price: float) -> str:
    if price < PRICE_BUDGET_BELOW:
        return "Budget"
    if price < PRICE_PREMIUM_FROM:
        return "Mid-range"
    return "Premium"


def rating_bucket(rating: float, with_below_average: bool = True) -> str:
    """
    Excellent (>=4.5) / Good (>=4.0) / Average (>=3.5) / Below Average.
    Without the below-average tier, everything under Good is "Average".
    """
    if rating >= RATING_EXCELLENT:
        return "Excellent"
    if rating >= RATING_GOOD:
        return "Good"
    if not with_below_average or rating >= RATING_AVERAGE:
        return "Average"
    return "Below Average"


def value_recommendation(rating: float, price: float) -> str:
    if rating >= BEST_VALUE_MIN_RATING and price < BEST_VALUE_MAX_PRICE:
        return "Best Value"
    if rating >= GOOD_VALUE_MIN_RATING and price < GOOD_VALUE_MAX_PRICE:
        return "Good Value"
    return "Consider Alternatives"


def best_by(items: Sequence[T], better: Callable[[T, T], bool]) -> T:
    """
    Left fold keeping the current best unless `better(candidate, best)` holds.
    With a strict comparator the first occurrence wins ties.
    """
    if not items:
        raise ValueError("best_by() of an empty sequence")
    best = items[0]
    for candidate in items[1:]:
        if better(candidate, best):
            best = candidate
    return best


def higher_rating(candidate, best) -> bool:
    return candidate.rating > best.rating


def higher_value(candidate, best) -> bool:
    """Strictly better rating/price ratio; an undefined ratio never beats anything."""
    c = value_ratio(candidate.rating, candidate.price)
    if c is None:
        return False
    b = value_ratio(best.rating, best.price)
    return b is None or c > b


def rank_desc(items: Iterable[T], key: Callable[[T], Optional[float]]) -> List[T]:
    """Stable descending sort; items whose key is None go last."""
    return sorted(items, key=lambda it: (key(it) is None, -(key(it) or 0.0)))


def rank_asc(items: Iterable[T], key: Callable[[T], float]) -> List[T]:
    """Stable ascending sort."""
    return sorted(items, key=key)
