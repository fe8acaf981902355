"""
Hosted-model interpretation.

The model is asked for one JSON object (single mode) or one object per
requested component (multi mode).  Objects are validated one by one and the
invalid ones dropped.  When nothing usable comes back the caller is told
why via ``UpstreamInterpretationError.reason`` and falls back to the
rule-based interpreter.

Only componentType, datasetType, chartType, filters, title and description
are requested here; sort and limit come from the rule-based path alone.
"""
from __future__ import annotations

import asyncio
import json
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from src.core.logging import get_logger
from src.data.catalog import load_catalog
from src.interpreter.llm_client import call_llm
from src.interpreter.schema import (
    ChartType,
    ComponentType,
    DatasetType,
    Filter,
    Interpretation,
)

logger = get_logger(__name__)


class FallbackReason(str, Enum):
    PROVIDER_ERROR = "provider_error"    # network / SDK / missing key / unknown provider
    TIMEOUT = "timeout"
    PARSE_FAILURE = "parse_failure"      # no JSON object, or none decodes
    SCHEMA_MISMATCH = "schema_mismatch"  # decoded, but nothing matches the schema


class UpstreamInterpretationError(Exception):
    def __init__(self, reason: FallbackReason, detail: str = ""):
        super().__init__(f"{reason.value}: {detail}" if detail else reason.value)
        self.reason = reason
        self.detail = detail


# ── Response schema ──────────────────────────────────────

class LLMFilter(BaseModel):
    field: str
    operator: Literal["gt", "gte", "lt", "lte", "eq", "contains"]
    value: int | float | str


class LLMInterpretation(BaseModel):
    """What the hosted model is allowed to return for one component."""

    model_config = ConfigDict(populate_by_name=True)

    component_type: ComponentType = Field(..., alias="componentType")
    dataset_type: DatasetType = Field(..., alias="datasetType")
    chart_type: ChartType | None = Field(None, alias="chartType")
    filters: list[LLMFilter] | None = None
    title: str
    description: str

    def to_interpretation(self) -> Interpretation:
        """Coerce into the shared schema: charts default to ``bar`` and
        non-charts drop any chart type the model volunteered."""
        chart_type = None
        if self.component_type == "chart":
            chart_type = self.chart_type or "bar"
        return Interpretation(
            component_type=self.component_type,
            dataset_type=self.dataset_type,
            chart_type=chart_type,
            filters=[Filter(**f.model_dump()) for f in self.filters or []],
            title=self.title,
            description=self.description,
        )


# ── Prompt templates ─────────────────────────────────────

_COMMON_CONTEXT = """\
{schema}
Available component types:
- chart: For visualizing trends and comparisons (bar, line, or area)
- table: For displaying detailed data in rows and columns
- card: For showing summary statistics and KPIs

Filter operators:
- gt: greater than
- gte: greater than or equal
- lt: less than
- lte: less than or equal
- eq: equals
- contains: string contains

User request: {prompt}
"""

_OBJECT_FIELDS = """\
- componentType: "chart", "table", or "card"
- datasetType: "sales", "users", or "products"
- chartType: "bar", "line", or "area" (only if componentType is "chart")
- filters: array of filter objects with field, operator, value (only if user wants filtered data)
- title: A short title for the component
- description: A brief description"""

_SINGLE_TEMPLATE = (
    "You are a dashboard AI assistant. Interpret the user's request and determine "
    "which UI component, dataset, and filters to apply.\n\n"
    + _COMMON_CONTEXT
    + "\nRespond ONLY with a valid JSON object (no markdown, no code blocks, no explanation) containing:\n"
    + _OBJECT_FIELDS
)

_MULTI_TEMPLATE = (
    "You are a dashboard AI assistant. Interpret the user's request and determine "
    "which UI components, datasets, and filters to apply.\n"
    "The user may be requesting MULTIPLE components. If so, return MULTIPLE JSON objects "
    "(one per line, no array wrapper).\n\n"
    + _COMMON_CONTEXT
    + "\nRespond ONLY with valid JSON objects (no markdown, no code blocks, no explanation).\n"
    "If the request is for multiple components/datasets, return one JSON object per line.\n"
    "Each JSON object should contain:\n"
    + _OBJECT_FIELDS
)


def build_prompt(prompt: str, multi: bool = True) -> str:
    template = _MULTI_TEMPLATE if multi else _SINGLE_TEMPLATE
    return template.format(schema=load_catalog().schema_prompt(), prompt=prompt)


# ── Response parsing ─────────────────────────────────────

def extract_json_objects(text: str) -> list[str]:
    """Return every top-level ``{...}`` span in *text*, in order.

    Brace depth is tracked character by character, so objects may be
    newline-separated, concatenated, or wrapped in prose / code fences.
    """
    objects: list[str] = []
    depth = 0
    start = -1
    for i, ch in enumerate(text):
        if ch == "{":
            if depth == 0:
                start = i
            depth += 1
        elif ch == "}" and depth > 0:
            depth -= 1
            if depth == 0:
                objects.append(text[start:i + 1])
    return objects


def parse_llm_response(text: str) -> list[Interpretation]:
    """Validate every JSON object in *text*; raise if none survives."""
    candidates = extract_json_objects(text)
    if not candidates:
        raise UpstreamInterpretationError(FallbackReason.PARSE_FAILURE, "no JSON object in response")

    decoded: list[Any] = []
    for raw in candidates:
        try:
            decoded.append(json.loads(raw))
        except json.JSONDecodeError as exc:
            logger.warning("Discarding undecodable JSON object: %s", exc)
    if not decoded:
        raise UpstreamInterpretationError(FallbackReason.PARSE_FAILURE, "no decodable JSON object")

    interpretations: list[Interpretation] = []
    for data in decoded:
        try:
            interpretations.append(LLMInterpretation.model_validate(data).to_interpretation())
        except ValidationError as exc:
            logger.warning("Discarding LLM object that fails schema validation: %d error(s)",
                           exc.error_count())
    if not interpretations:
        raise UpstreamInterpretationError(FallbackReason.SCHEMA_MISMATCH, "no object matched the schema")
    return interpretations


async def interpret_with_llm(prompt: str, provider: str, multi: bool = True) -> list[Interpretation]:
    """Ask *provider* to interpret *prompt*.

    Raises
    ------
    UpstreamInterpretationError
        With the reason the hosted result cannot be used.
    """
    try:
        response = await call_llm(build_prompt(prompt, multi=multi), provider=provider)
    except asyncio.TimeoutError as exc:
        raise UpstreamInterpretationError(FallbackReason.TIMEOUT, "LLM call timed out") from exc
    except Exception as exc:
        raise UpstreamInterpretationError(FallbackReason.PROVIDER_ERROR, str(exc)) from exc

    interpretations = parse_llm_response(response)
    return interpretations if multi else interpretations[:1]
