"""
Planner -- converts a free-text dashboard request into Interpretations.

Two modes:
  mock               → deterministic rule-based interpretation (no API key needed)
  openai / anthropic → hosted-model interpretation via llm_interpreter, falling
                       back to the rule-based path on any upstream failure
"""
from __future__ import annotations

from src.core.logging import get_logger
from src.interpreter.detectors import (
    detect_all_datasets,
    detect_chart_type,
    detect_component_type,
    detect_dataset,
)
from src.interpreter.extractors import extract_filters, extract_limit, extract_sort
from src.interpreter.labels import with_labels
from src.interpreter.llm_interpreter import (
    FallbackReason,
    UpstreamInterpretationError,
    interpret_with_llm,
)
from src.interpreter.schema import Filter, Interpretation, SortSpec

logger = get_logger(__name__)

RULES_MODE = "mock"


# ── Rule-based interpreter ───────────────────────────────

def _build(
    dataset: str,
    component: str,
    chart_type: str | None,
    filters: list[Filter],
    sort: SortSpec | None,
    limit: int | None,
) -> Interpretation:
    interp = Interpretation(
        component_type=component,
        dataset_type=dataset,
        chart_type=chart_type,
        filters=filters,
        sort=sort,
        # "top 0" is extractable but not a usable row cap
        limit=limit if limit and limit > 0 else None,
    )
    return with_labels(interp)


def interpret_prompt(prompt: str) -> Interpretation:
    """Interpret *prompt* as a single dashboard component."""
    dataset = detect_dataset(prompt)
    component = detect_component_type(prompt)
    chart_type = detect_chart_type(prompt) if component == "chart" else None
    return _build(
        dataset,
        component,
        chart_type,
        extract_filters(prompt, dataset),
        extract_sort(prompt),
        extract_limit(prompt),
    )


def interpret_multiple(prompt: str) -> list[Interpretation]:
    """One interpretation per dataset the prompt mentions.

    Component, chart type, sort and limit are detected once and shared;
    filters are extracted per dataset.
    """
    datasets = detect_all_datasets(prompt)
    component = detect_component_type(prompt)
    chart_type = detect_chart_type(prompt) if component == "chart" else None
    sort = extract_sort(prompt)
    limit = extract_limit(prompt)
    return [
        _build(dataset, component, chart_type, extract_filters(prompt, dataset), sort, limit)
        for dataset in datasets
    ]


# ── Mode dispatch ────────────────────────────────────────

async def plan_multi(prompt: str, mode: str = RULES_MODE) -> tuple[list[Interpretation], FallbackReason | None]:
    """Interpret *prompt* into one or more components.

    Returns the interpretations and, when a hosted mode had to fall back to
    the rule-based path, the reason it did.
    """
    reason: FallbackReason | None = None
    if mode == RULES_MODE:
        interpretations = interpret_multiple(prompt)
    else:
        try:
            interpretations = await interpret_with_llm(prompt, provider=mode, multi=True)
        except UpstreamInterpretationError as exc:
            reason = exc.reason
            logger.warning("Planner[%s] falling back to rules (%s)", mode, exc)
            interpretations = interpret_multiple(prompt)

    logger.info("Planner[%s] -> %s", mode, [i.to_wire() for i in interpretations])
    return interpretations, reason


async def plan(prompt: str, mode: str = RULES_MODE) -> tuple[Interpretation, FallbackReason | None]:
    """Single-component variant of :func:`plan_multi`."""
    reason: FallbackReason | None = None
    if mode == RULES_MODE:
        interpretation = interpret_prompt(prompt)
    else:
        try:
            interpretation = (await interpret_with_llm(prompt, provider=mode, multi=False))[0]
        except UpstreamInterpretationError as exc:
            reason = exc.reason
            logger.warning("Planner[%s] falling back to rules (%s)", mode, exc)
            interpretation = interpret_prompt(prompt)

    logger.info("Planner[%s] -> %s", mode, interpretation.to_wire())
    return interpretation, reason
