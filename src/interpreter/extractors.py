"""
Filter, sort and limit extraction from a free-text prompt.

Every extractor works on the lower-cased prompt and either returns a value
or nothing -- there is no "malformed prompt" outcome.
"""
from __future__ import annotations

import re

from src.core.utils import to_number
from src.interpreter.lexicon import (
    FIELD_SYNONYMS,
    NUMERIC_OPERATOR_PATTERNS,
    STRING_FILTER_FIELDS,
    FieldRef,
    resolve_field,
)
from src.interpreter.schema import Filter, SortSpec

# How far back from a numeric value we look for the field it belongs to.
FIELD_WINDOW = 50

# ── Filter patterns ──────────────────────────────────────

_STRING_FILTER_PATTERNS: tuple[tuple[str, re.Pattern[str], re.Pattern[str]], ...] = tuple(
    (
        field,
        re.compile(rf"{field}\s+(?:is|=|equals?)\s+[\"']?([A-Za-z0-9_]+)[\"']?", re.IGNORECASE),
        re.compile(rf"{field}\s+contains\s+[\"']?([A-Za-z0-9_]+)[\"']?", re.IGNORECASE),
    )
    for field in STRING_FILTER_FIELDS
)

_ACTIVE_RE = re.compile(r"\bactive\b")
_ACTIVE_SUBJECT_RE = re.compile(r"active\s+(?:users?|members?|accounts?)")

# First hit wins.
_STOCK_SHORTHANDS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\bin[\s-]?stock\b"), "in_stock"),
    (re.compile(r"\bout[\s-]?of[\s-]?stock\b"), "out_of_stock"),
    (re.compile(r"\blow[\s-]?stock\b"), "low_stock"),
)

# ── Sort / limit patterns ────────────────────────────────

# (pattern, implied direction); None means "read the optional direction group".
_SORT_PATTERNS: tuple[tuple[re.Pattern[str], str | None], ...] = (
    (re.compile(r"sort(?:ed)?\s+by\s+([A-Za-z0-9_]+)\s*(asc|desc|ascending|descending)?"), None),
    (re.compile(r"order(?:ed)?\s+by\s+([A-Za-z0-9_]+)\s*(asc|desc|ascending|descending)?"), None),
    (re.compile(r"highest\s+([A-Za-z0-9_]+)"), "desc"),
    (re.compile(r"lowest\s+([A-Za-z0-9_]+)"), "asc"),
    (re.compile(r"top\s+([A-Za-z0-9_]+)"), "desc"),
    (re.compile(r"bottom\s+([A-Za-z0-9_]+)"), "asc"),
)

_LIMIT_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"top\s+([0-9]+)"),
    re.compile(r"first\s+([0-9]+)"),
    re.compile(r"([0-9]+)\s+(?:results?|items?|records?|rows?)"),
    re.compile(r"limit\s+([0-9]+)"),
    re.compile(r"show\s+([0-9]+)"),
)


def find_field_near(text: str, position: int) -> FieldRef | None:
    """Return the field keyword closest to *position* within the preceding window.

    "Closest" is the keyword whose last occurrence in the window starts
    latest; on a tie the keyword listed first in FIELD_SYNONYMS wins.
    """
    window = text[max(0, position - FIELD_WINDOW):position].lower()
    closest: FieldRef | None = None
    closest_pos = -1
    for keyword, ref in FIELD_SYNONYMS.items():
        pos = window.rfind(keyword)
        if pos > closest_pos:
            closest_pos = pos
            closest = ref
    return closest


def _numeric_filters(text: str) -> list[Filter]:
    filters: list[Filter] = []
    for operator, patterns in NUMERIC_OPERATOR_PATTERNS:
        for pattern in patterns:
            m = pattern.search(text)
            if not m:
                continue
            ref = find_field_near(text, m.start())
            if ref is None:
                continue
            filters.append(Filter(field=ref.field, operator=operator, value=to_number(m.group(1))))
    return filters


def _string_filters(text: str) -> list[Filter]:
    filters: list[Filter] = []
    for field, eq_re, contains_re in _STRING_FILTER_PATTERNS:
        m = eq_re.search(text)
        if m:
            filters.append(Filter(field=field, operator="eq", value=m.group(1)))
        m = contains_re.search(text)
        if m:
            filters.append(Filter(field=field, operator="contains", value=m.group(1)))
    return filters


def _shorthand_filter(text: str, dataset: str, existing: list[Filter]) -> Filter | None:
    if dataset == "users":
        if (
            _ACTIVE_RE.search(text)
            and not any(f.field == "status" for f in existing)
            and not _ACTIVE_SUBJECT_RE.search(text)
        ):
            return Filter(field="status", operator="eq", value="active")
    elif dataset == "products":
        for pattern, status in _STOCK_SHORTHANDS:
            if pattern.search(text):
                return Filter(field="status", operator="eq", value=status)
    return None


def extract_filters(prompt: str, dataset: str) -> list[Filter]:
    """Extract filter predicates for *dataset* from *prompt*.

    Order: numeric comparisons (operator-table order), then string
    equality/contains (allow-list order), then the dataset shorthand.
    Nothing is de-duplicated.
    """
    text = prompt.lower()
    filters = _numeric_filters(text)
    filters.extend(_string_filters(text))
    shorthand = _shorthand_filter(text, dataset, filters)
    if shorthand is not None:
        filters.append(shorthand)
    return filters


def extract_sort(prompt: str) -> SortSpec | None:
    """Return the first sort directive found, trying pattern families in order."""
    text = prompt.lower()
    for pattern, implied in _SORT_PATTERNS:
        m = pattern.search(text)
        if not m:
            continue
        direction = implied or "desc"
        if implied is None and m.group(2):
            direction = "asc" if m.group(2).startswith("asc") else "desc"
        return SortSpec(field=resolve_field(m.group(1)), direction=direction)
    return None


def extract_limit(prompt: str) -> int | None:
    text = prompt.lower()
    for pattern in _LIMIT_PATTERNS:
        m = pattern.search(text)
        if m:
            return int(m.group(1))
    return None
