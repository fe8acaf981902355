"""
Human-readable title and description for an interpretation.

Both are derived purely from already-extracted fields; nothing here looks
at the prompt.
"""
from __future__ import annotations

from src.interpreter.lexicon import (
    COMPONENT_DISPLAY_NAMES,
    DATASET_DISPLAY_NAMES,
    OPERATOR_SYMBOLS,
)
from src.interpreter.schema import Filter, Interpretation

NO_CLAUSES_DESCRIPTION = "All available data"


def describe_filter(f: Filter) -> str:
    return f"{f.field} {OPERATOR_SYMBOLS[f.operator]} {f.value}"


def generate_title(interp: Interpretation) -> str:
    title = f"Top {interp.limit} " if interp.limit else ""
    title += DATASET_DISPLAY_NAMES[interp.dataset_type]
    if interp.filters:
        title += " (Filtered)"
    title += f" {COMPONENT_DISPLAY_NAMES[interp.component_type]}"
    return title


def generate_description(interp: Interpretation) -> str:
    parts: list[str] = []
    if interp.filters:
        parts.append("Filtered: " + ", ".join(describe_filter(f) for f in interp.filters))
    if interp.sort:
        parts.append(f"Sorted by {interp.sort.field} ({interp.sort.direction})")
    if interp.limit:
        parts.append(f"Showing top {interp.limit} results")
    return " • ".join(parts) if parts else NO_CLAUSES_DESCRIPTION


def with_labels(interp: Interpretation) -> Interpretation:
    """Return a copy of *interp* carrying its generated title and description."""
    return interp.model_copy(
        update={"title": generate_title(interp), "description": generate_description(interp)},
    )
