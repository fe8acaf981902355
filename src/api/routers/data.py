"""
GET /data, GET /data/summary -- query the static datasets.
"""
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Query

from src.data.datasets import UnknownDatasetError
from src.data.query_engine import (
    QueryRequest,
    execute_query,
    execute_request,
    parse_filters_param,
    parse_sort_param,
)
from src.data.summary import summarize
from src.core.logging import get_logger

logger = get_logger(__name__)
router = APIRouter()

_INVALID_TYPE = "Invalid data type"


@router.get("", response_model=list[dict[str, Any]])
def get_data(
    type: str = Query(..., description="sales | users | products"),
    filters: str | None = Query(None, description="JSON list of {field, operator, value}"),
    sort: str | None = Query(None, description="JSON {field, direction}"),
    limit: int | None = Query(None, description="Row cap; <= 0 means unlimited"),
):
    """Rows of *type* with filters ANDed, then sorted, then limited."""
    try:
        return execute_query(type, parse_filters_param(filters), parse_sort_param(sort), limit)
    except UnknownDatasetError:
        raise HTTPException(status_code=400, detail=_INVALID_TYPE)


@router.post("/query", response_model=list[dict[str, Any]])
def post_query(req: QueryRequest):
    """Same as GET /data with a JSON body (``datasetType``, ``filters``, ``sort``, ``limit``)."""
    return execute_request(req)


@router.get("/summary", response_model=dict[str, Any])
def get_summary(
    type: str = Query(..., description="sales | users | products"),
    filters: str | None = Query(None, description="JSON list of {field, operator, value}"),
):
    """Summary statistics over the (optionally filtered) rows of *type*."""
    try:
        rows = execute_query(type, parse_filters_param(filters))
    except UnknownDatasetError:
        raise HTTPException(status_code=400, detail=_INVALID_TYPE)
    return summarize(type, rows)
