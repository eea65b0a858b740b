# app/api/v1/routers/compare.py
from fastapi import APIRouter, Depends, Query
from typing import Optional
import time
import logging

from app.api.deps import enforce_rate_limit, get_comparison_engine
from app.api.v1.schemas.envelope import comparison_ok
from app.domain.services.comparison_svc import ComparisonEngine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products/compare", tags=["compare"], dependencies=[Depends(enforce_rate_limit)])

IdsQuery = Query(None, description="Comma-separated product ids, e.g. '1,2,3'")


def _log_response(name: str, ids: Optional[str], result, t0: float) -> None:
    logger.info(
        "Response: %s ids=%s found=%s missing=%s elapsed_time=%.4fs",
        name, ids, len(result.reconciliation.found_ids), result.reconciliation.missing_ids,
        time.perf_counter() - t0,
    )


@router.get("", summary="Basic comparison: price range, rating and price rankings (max 10)")
async def compare_basic(
    ids: Optional[str] = IdsQuery,
    engine: ComparisonEngine = Depends(get_comparison_engine),
):
    t0 = time.perf_counter()
    result = await engine.compare_basic(ids)
    _log_response("compare_basic", ids, result, t0)
    return comparison_ok(result)


@router.get("/detailed", summary="Detailed feature analysis (max 10)")
async def compare_detailed(
    ids: Optional[str] = IdsQuery,
    engine: ComparisonEngine = Depends(get_comparison_engine),
):
    t0 = time.perf_counter()
    result = await engine.compare_detailed(ids)
    _log_response("compare_detailed", ids, result, t0)
    return comparison_ok(result)


@router.get("/visual", summary="Side-by-side layout for frontends (max 6)")
async def compare_visual(
    ids: Optional[str] = IdsQuery,
    engine: ComparisonEngine = Depends(get_comparison_engine),
):
    t0 = time.perf_counter()
    result = await engine.compare_visual(ids)
    _log_response("compare_visual", ids, result, t0)
    return comparison_ok(result)


@router.get("/matrix", summary="Feature matrix (max 8)")
async def compare_matrix(
    ids: Optional[str] = IdsQuery,
    engine: ComparisonEngine = Depends(get_comparison_engine),
):
    t0 = time.perf_counter()
    result = await engine.compare_matrix(ids)
    _log_response("compare_matrix", ids, result, t0)
    return comparison_ok(result)


@router.get("/recommendations", summary="Alternatives from the rest of the catalog (max 10)")
async def compare_recommendations(
    ids: Optional[str] = IdsQuery,
    criteria: Optional[str] = Query(None, description="Comma-separated criteria (default: value,rating,price)"),
    engine: ComparisonEngine = Depends(get_comparison_engine),
):
    t0 = time.perf_counter()
    result = await engine.compare_recommendations(ids, criteria)
    _log_response("compare_recommendations", ids, result, t0)
    return comparison_ok(result)
