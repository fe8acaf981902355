"""
Query engine -- filter / sort / limit over the static datasets.

Semantics:
  1. Filters are ANDed.  A filter on a field the record does not have (or
     holds null) is skipped, not an error.
  2. A filter whose value is a number (or a numeric string) compares
     numerically; a record value that does not parse as a number skips the
     filter.  Otherwise comparison is case-insensitive on strings.
  3. Sort puts nulls last ascending and first descending; numbers compare
     numerically, everything else as lower-cased strings in Unicode collation order.
  4. A limit that is missing, zero or negative means "no limit".
"""
from __future__ import annotations

import json
import math
import re
from functools import cmp_to_key, lru_cache
from typing import Any

from pyuca import Collator
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from src.core.logging import get_logger
from src.data.datasets import load_dataset
from src.interpreter.schema import DatasetType, Filter, SortSpec

logger = get_logger(__name__)

_FILTERS_ADAPTER = TypeAdapter(list[Filter])

# Plain decimal literals only; float() would also take "nan", "inf", "1_000".
_DECIMAL_RE = re.compile(r"^\s*[-+]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][-+]?[0-9]+)?\s*$")


class QueryRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    dataset_type: DatasetType = Field(..., alias="datasetType")
    filters: list[Filter] | None = None
    sort: SortSpec | None = None
    limit: int | None = None


# ── Value helpers ────────────────────────────────────────

def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


def _to_float(v: Any) -> float | None:
    if _is_number(v):
        value = float(v)
    elif isinstance(v, str) and _DECIMAL_RE.match(v):
        value = float(v)
    else:
        return None
    return value if math.isfinite(value) else None


def _is_numeric_filter(value: Any) -> bool:
    return _is_number(value) or (isinstance(value, str) and _to_float(value) is not None)


# ── Filtering ────────────────────────────────────────────

def _apply_filter(record: dict[str, Any], f: Filter) -> bool:
    field_value = record.get(f.field)
    if field_value is None:
        return True

    if _is_numeric_filter(f.value):
        actual = _to_float(field_value)
        if actual is None:
            return True
        expected = _to_float(f.value)
        if f.operator == "gt":
            return actual > expected
        if f.operator == "gte":
            return actual >= expected
        if f.operator == "lt":
            return actual < expected
        if f.operator == "lte":
            return actual <= expected
        if f.operator == "eq":
            return actual == expected
        if f.operator == "neq":
            return actual != expected
        return True

    actual_str = str(field_value).lower()
    expected_str = str(f.value).lower()
    if f.operator == "eq":
        return actual_str == expected_str
    if f.operator == "neq":
        return actual_str != expected_str
    if f.operator == "contains":
        return expected_str in actual_str
    return True


def apply_filters(records: list[dict[str, Any]], filters: list[Filter] | None) -> list[dict[str, Any]]:
    if not filters:
        return list(records)
    return [r for r in records if all(_apply_filter(r, f) for f in filters)]


# ── Sorting / limiting ───────────────────────────────────

@lru_cache(maxsize=1)
def _collator() -> Collator:
    return Collator()


def _collate(a: str, b: str) -> int:
    """Unicode collation order (accents sort beside their base letter)."""
    key = _collator().sort_key
    ka, kb = key(a), key(b)
    return (ka > kb) - (ka < kb)


def _compare(a: Any, b: Any, ascending: bool) -> int:
    if a is None and b is None:
        return 0
    if a is None:
        return 1 if ascending else -1
    if b is None:
        return -1 if ascending else 1

    if _is_number(a) and _is_number(b):
        cmp = (a > b) - (a < b)
    else:
        cmp = _collate(str(a).lower(), str(b).lower())
    return cmp if ascending else -cmp


def apply_sort(records: list[dict[str, Any]], sort: SortSpec | None) -> list[dict[str, Any]]:
    if sort is None or not sort.field:
        return records
    ascending = sort.direction == "asc"
    return sorted(
        records,
        key=cmp_to_key(lambda x, y: _compare(x.get(sort.field), y.get(sort.field), ascending)),
    )


def apply_limit(records: list[dict[str, Any]], limit: int | None) -> list[dict[str, Any]]:
    if not limit or limit <= 0:
        return records
    return records[:limit]


# ── Public API ───────────────────────────────────────────

def execute_query(
    dataset: str,
    filters: list[Filter] | None = None,
    sort: SortSpec | None = None,
    limit: int | None = None,
) -> list[dict[str, Any]]:
    """Run filter → sort → limit over *dataset* and return copies of the rows.

    Raises
    ------
    UnknownDatasetError
        If *dataset* is not one of sales / users / products.
    """
    records = [dict(r) for r in load_dataset(dataset)]
    rows = apply_limit(apply_sort(apply_filters(records, filters), sort), limit)
    logger.info("Query dataset=%s filters=%d sort=%s limit=%s -> %d rows",
                dataset, len(filters or []), sort.field if sort else None, limit, len(rows))
    return rows


def execute_request(request: QueryRequest) -> list[dict[str, Any]]:
    return execute_query(request.dataset_type, request.filters, request.sort, request.limit)


def parse_filters_param(raw: str | None) -> list[Filter]:
    """Decode a JSON ``filters`` query parameter; malformed input means no filters."""
    if not raw:
        return []
    try:
        return _FILTERS_ADAPTER.validate_python(json.loads(raw))
    except (json.JSONDecodeError, ValidationError) as exc:
        logger.warning("Failed to parse filters param, ignoring: %s", exc)
        return []


def parse_sort_param(raw: str | None) -> SortSpec | None:
    """Decode a JSON ``sort`` query parameter; malformed input means no sort."""
    if not raw:
        return None
    try:
        return SortSpec.model_validate(json.loads(raw))
    except (json.JSONDecodeError, ValidationError) as exc:
        logger.warning("Failed to parse sort param, ignoring: %s", exc)
        return None
