"""
Dataset, component and chart-type detection.
"""
from __future__ import annotations

from src.interpreter.lexicon import (
    CHART_KEYWORDS,
    COMPONENT_WORDS,
    DATASET_KEYWORDS,
    FIELD_SYNONYMS,
    FILTER_VOCABULARY_RE,
)

DEFAULT_DATASET = "sales"
DEFAULT_CHART_TYPE = "bar"


def _tokens(prompt: str) -> list[str]:
    return prompt.lower().split()


def detect_dataset(prompt: str) -> str:
    """Pick one dataset: first dataset token in prompt order, then the first
    field synonym (table order) found anywhere, then ``sales``."""
    for token in _tokens(prompt):
        dataset = DATASET_KEYWORDS.get(token)
        if dataset:
            return dataset

    text = prompt.lower()
    for keyword, ref in FIELD_SYNONYMS.items():
        if keyword in text:
            return ref.dataset

    return DEFAULT_DATASET


def detect_all_datasets(prompt: str) -> list[str]:
    """Every dataset the prompt refers to.

    Field synonyms are only consulted when no dataset token matched.  The
    result is never empty; callers must not rely on its order.
    """
    found: dict[str, None] = {}
    for token in _tokens(prompt):
        dataset = DATASET_KEYWORDS.get(token)
        if dataset:
            found.setdefault(dataset)

    if not found:
        text = prompt.lower()
        for keyword, ref in FIELD_SYNONYMS.items():
            if keyword in text:
                found.setdefault(ref.dataset)

    return list(found) or [DEFAULT_DATASET]


def detect_component_type(prompt: str) -> str:
    text = prompt.lower()
    for component, words in COMPONENT_WORDS:
        if any(word in text for word in words):
            return component

    # No explicit component: filtered requests read best as a table.
    if FILTER_VOCABULARY_RE.search(text):
        return "table"
    return "chart"


def detect_chart_type(prompt: str) -> str:
    for token in _tokens(prompt):
        chart_type = CHART_KEYWORDS.get(token)
        if chart_type:
            return chart_type
    return DEFAULT_CHART_TYPE
