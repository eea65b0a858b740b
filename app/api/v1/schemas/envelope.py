# api/v1/schemas/envelope.py
"""
Response shaping: `{success: true, data, total?, ...context}`.
No business logic here; models are dumped with their camelCase aliases.
"""
from typing import Any, Dict
from pydantic import BaseModel

from app.domain.models.comparison import ComparisonResult


def to_jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True)
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    return value


def ok(data: Any, **context: Any) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": True, "data": to_jsonable(data)}
    body.update({k: to_jsonable(v) for k, v in context.items()})
    return body


def ok_list(items: list, **context: Any) -> Dict[str, Any]:
    return ok(items, total=len(items), **context)


def comparison_ok(result: ComparisonResult) -> Dict[str, Any]:
    rec = result.reconciliation
    return ok(
        result.view,
        total=result.total,
        requestedIds=rec.requested_ids,
        foundIds=rec.found_ids,
        missingIds=rec.missing_ids,
    )
