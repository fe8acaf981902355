"""
Interpretation -- the structured query produced from a free-text dashboard
request, plus the Filter / SortSpec pieces it is made of.

Attributes are snake_case in Python and camelCase on the wire
(``componentType``, ``datasetType`` ...).  Serialise with
``model_dump(by_alias=True, exclude_none=True)`` so that an absent filter
list, sort or limit is omitted rather than sent as ``null``.
"""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

ComponentType = Literal["chart", "table", "card"]
DatasetType = Literal["sales", "users", "products"]
ChartType = Literal["bar", "line", "area"]
FilterOperator = Literal["gt", "gte", "lt", "lte", "eq", "neq", "contains"]
SortDirection = Literal["asc", "desc"]

DATASETS: tuple[str, ...] = ("sales", "users", "products")


class Filter(BaseModel):
    """A single ``field <operator> value`` predicate; filters AND together."""

    model_config = ConfigDict(frozen=True)

    field: str = Field(..., description="Canonical field name, e.g. 'unitsSold'")
    operator: FilterOperator
    value: int | float | str


class SortSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    field: str
    direction: SortDirection = "desc"


class Interpretation(BaseModel):
    """One dashboard component request: what to show, from where, and how."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    component_type: ComponentType = Field(..., alias="componentType")
    dataset_type: DatasetType = Field(..., alias="datasetType")
    chart_type: ChartType | None = Field(None, alias="chartType")
    filters: list[Filter] | None = None
    sort: SortSpec | None = None
    limit: int | None = Field(None, gt=0)
    title: str = ""
    description: str = ""

    @field_validator("filters")
    @classmethod
    def _empty_filters_are_absent(cls, v: list[Filter] | None) -> list[Filter] | None:
        return v or None

    @model_validator(mode="after")
    def _chart_type_only_for_charts(self) -> "Interpretation":
        if self.component_type == "chart" and self.chart_type is None:
            raise ValueError("chartType is required when componentType is 'chart'")
        if self.component_type != "chart" and self.chart_type is not None:
            raise ValueError("chartType is only allowed when componentType is 'chart'")
        return self

    def to_wire(self) -> dict:
        """camelCase dict with absent optionals omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)
