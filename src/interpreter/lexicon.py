"""
Lexical tables for the rule-based interpreter.

Two lookup styles are in play and they are not interchangeable:
  FIELD_SYNONYMS     -- matched as substrings of the whole lower-cased prompt,
                        so multi-word keys ("units sold") work.  Iteration
                        order is significant for dataset inference.
  *_KEYWORDS tables  -- matched against whitespace-split tokens only.
"""
from __future__ import annotations

import re
from types import MappingProxyType
from typing import Mapping, NamedTuple


class FieldRef(NamedTuple):
    field: str
    dataset: str


# ── Field synonyms (user phrasing -> canonical field) ────

FIELD_SYNONYMS: Mapping[str, FieldRef] = MappingProxyType({
    # sales
    "units sold":   FieldRef("unitsSold", "sales"),
    "unitssold":    FieldRef("unitsSold", "sales"),
    "units":        FieldRef("unitsSold", "sales"),
    "sold":         FieldRef("unitsSold", "sales"),
    "revenue":      FieldRef("revenue", "sales"),
    "profit":       FieldRef("profit", "sales"),
    "month":        FieldRef("month", "sales"),
    # users
    "sessions":     FieldRef("sessionsThisMonth", "users"),
    "session":      FieldRef("sessionsThisMonth", "users"),
    "role":         FieldRef("role", "users"),
    "status":       FieldRef("status", "users"),
    "name":         FieldRef("name", "users"),
    "email":        FieldRef("email", "users"),
    # products
    "price":        FieldRef("price", "products"),
    "stock":        FieldRef("stock", "products"),
    "rating":       FieldRef("rating", "products"),
    "totalsold":    FieldRef("totalSold", "products"),
    "total sold":   FieldRef("totalSold", "products"),
    "category":     FieldRef("category", "products"),
})

# ── Token tables ─────────────────────────────────────────

DATASET_KEYWORDS: Mapping[str, str] = MappingProxyType({
    "sales": "sales",
    "revenue": "sales",
    "profit": "sales",
    "income": "sales",
    "earnings": "sales",
    "monthly": "sales",

    "users": "users",
    "user": "users",
    "members": "users",
    "people": "users",
    "accounts": "users",

    "products": "products",
    "product": "products",
    "inventory": "products",
    "items": "products",
})

CHART_KEYWORDS: Mapping[str, str] = MappingProxyType({
    "bar": "bar",
    "column": "bar",
    "line": "line",
    "trend": "line",
    "area": "area",
    "filled": "area",
})

# Component word lists, checked in this priority order by substring.
COMPONENT_WORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("chart", ("chart", "graph", "visualization", "visualize", "plot", "trend")),
    ("card",  ("card", "cards", "summary", "overview", "stats", "statistics", "kpi", "metric")),
    ("table", ("table", "list", "rows", "records")),
)

FILTER_VOCABULARY_RE = re.compile(r"filter|where|condition|above|below|greater|less|equals?", re.IGNORECASE)

# ── Numeric operators ────────────────────────────────────

_NUM = r"([0-9]+(?:\.[0-9]+)?)"  # ASCII digits only

# (operator, patterns) in evaluation order; there is no numeric "neq" family.
NUMERIC_OPERATOR_PATTERNS: tuple[tuple[str, tuple[re.Pattern[str], ...]], ...] = tuple(
    (op, tuple(re.compile(p, re.IGNORECASE) for p in patterns))
    for op, patterns in (
        ("gt", (
            rf"above\s+{_NUM}",
            rf"greater\s+than\s+{_NUM}",
            rf"more\s+than\s+{_NUM}",
            rf">\s*{_NUM}",
            rf"over\s+{_NUM}",
            rf"exceeds?\s+{_NUM}",
        )),
        ("gte", (
            rf"at\s+least\s+{_NUM}",
            rf">=\s*{_NUM}",
            rf"minimum\s+{_NUM}",
            rf"{_NUM}\s+or\s+more",
        )),
        ("lt", (
            rf"below\s+{_NUM}",
            rf"less\s+than\s+{_NUM}",
            rf"under\s+{_NUM}",
            rf"<\s*{_NUM}",
            rf"fewer\s+than\s+{_NUM}",
        )),
        ("lte", (
            rf"at\s+most\s+{_NUM}",
            rf"<=\s*{_NUM}",
            rf"maximum\s+{_NUM}",
            rf"{_NUM}\s+or\s+less",
            rf"up\s+to\s+{_NUM}",
        )),
        ("eq", (
            rf"equals?\s+{_NUM}",
            rf"equal\s+to\s+{_NUM}",
            rf"=\s*{_NUM}",
            rf"exactly\s+{_NUM}",
            rf"is\s+{_NUM}",
        )),
    )
)

# Fields tested for "<field> is <word>" / "<field> contains <word>",
# independent of the detected dataset.
STRING_FILTER_FIELDS: tuple[str, ...] = (
    "name", "email", "status", "role", "category",
    "price", "stock", "rating", "totalSold",
)

OPERATOR_SYMBOLS: Mapping[str, str] = MappingProxyType({
    "gt": ">",
    "gte": ">=",
    "lt": "<",
    "lte": "<=",
    "eq": "=",
    "neq": "!=",
    "contains": "contains",
})

DATASET_DISPLAY_NAMES: Mapping[str, str] = MappingProxyType({
    "sales": "Sales",
    "users": "Users",
    "products": "Products",
})

COMPONENT_DISPLAY_NAMES: Mapping[str, str] = MappingProxyType({
    "chart": "Chart",
    "table": "Data",
    "card": "Summary",
})


def resolve_field(token: str) -> str:
    """Canonical field for an exact synonym, else the token itself."""
    ref = FIELD_SYNONYMS.get(token)
    return ref.field if ref else token
