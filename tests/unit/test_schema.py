"""
Unit tests -- Interpretation / Filter / SortSpec models.
"""
import pytest
from pydantic import ValidationError

from src.interpreter.schema import Filter, Interpretation, SortSpec


def test_chart_requires_chart_type():
    with pytest.raises(ValidationError):
        Interpretation(componentType="chart", datasetType="sales")


def test_table_rejects_chart_type():
    with pytest.raises(ValidationError):
        Interpretation(componentType="table", datasetType="users", chartType="bar")


def test_unknown_dataset_rejected():
    with pytest.raises(ValidationError):
        Interpretation(componentType="table", datasetType="orders")


def test_limit_must_be_positive():
    with pytest.raises(ValidationError):
        Interpretation(componentType="table", datasetType="users", limit=0)


def test_unknown_operator_rejected():
    with pytest.raises(ValidationError):
        Filter(field="price", operator="between", value=10)


def test_sort_direction_defaults_desc():
    assert SortSpec(field="revenue").direction == "desc"


def test_empty_filters_become_absent():
    interp = Interpretation(componentType="table", datasetType="users", filters=[])
    assert interp.filters is None


def test_populate_by_python_name():
    interp = Interpretation(component_type="card", dataset_type="products")
    assert interp.component_type == "card"
    assert interp.dataset_type == "products"


def test_to_wire_uses_camel_case_and_omits_absent():
    interp = Interpretation(
        componentType="chart",
        datasetType="sales",
        chartType="line",
        title="Sales Chart",
        description="All available data",
    )
    wire = interp.to_wire()
    assert wire == {
        "componentType": "chart",
        "datasetType": "sales",
        "chartType": "line",
        "title": "Sales Chart",
        "description": "All available data",
    }


def test_to_wire_nested_filters_and_sort():
    interp = Interpretation(
        componentType="table",
        datasetType="products",
        filters=[Filter(field="price", operator="lt", value=100)],
        sort=SortSpec(field="rating", direction="asc"),
        limit=3,
    )
    wire = interp.to_wire()
    assert wire["filters"] == [{"field": "price", "operator": "lt", "value": 100}]
    assert wire["sort"] == {"field": "rating", "direction": "asc"}
    assert wire["limit"] == 3
    assert "chartType" not in wire


def test_interpretation_is_frozen():
    interp = Interpretation(componentType="table", datasetType="users")
    with pytest.raises(ValidationError):
        interp.limit = 5


def test_filter_value_keeps_type():
    assert isinstance(Filter(field="price", operator="eq", value=10).value, int)
    assert isinstance(Filter(field="rating", operator="gt", value=4.5).value, float)
    assert Filter(field="price", operator="eq", value="10").value == "10"
