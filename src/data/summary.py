"""
Summary statistics for card components.
"""
from __future__ import annotations

from typing import Any, Callable

from src.data.datasets import UnknownDatasetError


def _total(records: list[dict[str, Any]], field: str) -> float:
    return sum(r.get(field) or 0 for r in records)


def _count(records: list[dict[str, Any]], status: str) -> int:
    return sum(1 for r in records if r.get("status") == status)


def _ratio(num: float, den: float, digits: int = 1) -> float:
    return round(num / den, digits) if den else 0.0


def sales_summary(records: list[dict[str, Any]]) -> dict[str, Any]:
    revenue = _total(records, "revenue")
    profit = _total(records, "profit")
    return {
        "totalRevenue": revenue,
        "totalUnits": _total(records, "unitsSold"),
        "totalProfit": profit,
        "avgMonthlyRevenue": _ratio(revenue, len(records), 2),
        "profitMargin": _ratio(profit * 100, revenue),
    }


def users_summary(records: list[dict[str, Any]]) -> dict[str, Any]:
    return {
        "totalUsers": len(records),
        "activeUsers": _count(records, "active"),
        "inactiveUsers": _count(records, "inactive"),
        "pendingUsers": _count(records, "pending"),
        "avgSessionsPerUser": _ratio(_total(records, "sessionsThisMonth"), len(records)),
    }


def products_summary(records: list[dict[str, Any]]) -> dict[str, Any]:
    inventory_value = sum((r.get("price") or 0) * (r.get("stock") or 0) for r in records)
    return {
        "totalProducts": len(records),
        "inStock": _count(records, "in_stock"),
        "lowStock": _count(records, "low_stock"),
        "outOfStock": _count(records, "out_of_stock"),
        "totalInventoryValue": round(inventory_value, 2),
        "totalUnitsSold": _total(records, "totalSold"),
    }


_SUMMARIES: dict[str, Callable[[list[dict[str, Any]]], dict[str, Any]]] = {
    "sales": sales_summary,
    "users": users_summary,
    "products": products_summary,
}


def summarize(dataset: str, records: list[dict[str, Any]]) -> dict[str, Any]:
    fn = _SUMMARIES.get(dataset)
    if fn is None:
        raise UnknownDatasetError(dataset)
    return fn(records)
