"""
Unit tests -- hosted-model prompt building and response parsing.
"""
import pytest

from src.interpreter import llm_client
from src.interpreter.llm_interpreter import (
    FallbackReason,
    UpstreamInterpretationError,
    build_prompt,
    extract_json_objects,
    interpret_with_llm,
    parse_llm_response,
)
from src.interpreter.schema import Filter



def test_single_prompt_mentions_request_and_schema():
    text = build_prompt("show admins", multi=False)
    assert "User request: show admins" in text
    assert "## USERS Dataset" in text
    assert "a valid JSON object" in text
    assert "MULTIPLE" not in text


def test_multi_prompt_asks_for_one_object_per_line():
    text = build_prompt("users and sales")
    assert "MULTIPLE JSON objects" in text
    assert "one JSON object per line" in text



def test_extract_newline_separated():
    assert extract_json_objects('{"a": 1}\n{"b": 2}') == ['{"a": 1}', '{"b": 2}']


def test_extract_concatenated_and_nested():
    assert extract_json_objects('{"a": {"x": 1}}{"b": 2}') == ['{"a": {"x": 1}}', '{"b": 2}']


def test_extract_from_prose_and_fences():
    text = 'Sure!\n```json\n{"a": 1}\n```\nHope that helps.'
    assert extract_json_objects(text) == ['{"a": 1}']


def test_extract_ignores_stray_closing_brace():
    assert extract_json_objects('} {"a": 1}') == ['{"a": 1}']


def test_extract_nothing():
    assert extract_json_objects("no json here") == []



def test_parse_chart_defaults_to_bar():
    [interp] = parse_llm_response(
        '{"componentType": "chart", "datasetType": "sales", "title": "T", "description": "D"}'
    )
    assert interp.chart_type == "bar"


def test_parse_non_chart_drops_chart_type():
    [interp] = parse_llm_response(
        '{"componentType": "table", "datasetType": "users", "chartType": "line", "title": "T", "description": "D"}'
    )
    assert interp.chart_type is None


def test_parse_keeps_filters():
    [interp] = parse_llm_response(
        '{"componentType": "table", "datasetType": "products", "title": "Cheap", "description": "D",'
        ' "filters": [{"field": "price", "operator": "lt", "value": 50}]}'
    )
    assert interp.filters == [Filter(field="price", operator="lt", value=50)]
    assert interp.title == "Cheap"


def test_parse_drops_invalid_objects():
    text = (
        '{"componentType": "table", "datasetType": "users", "title": "A", "description": "B"}\n'
        '{"componentType": "pie", "datasetType": "users", "title": "A", "description": "B"}\n'
        '{"componentType": "card", "datasetType": "products", "title": "C", "description": "D"}'
    )
    assert [i.dataset_type for i in parse_llm_response(text)] == ["users", "products"]


def test_parse_requires_title_and_description():
    with pytest.raises(UpstreamInterpretationError) as exc:
        parse_llm_response('{"componentType": "table", "datasetType": "users"}')
    assert exc.value.reason == FallbackReason.SCHEMA_MISMATCH


def test_parse_rejects_neq_from_model():
    with pytest.raises(UpstreamInterpretationError) as exc:
        parse_llm_response(
            '{"componentType": "table", "datasetType": "users", "title": "A", "description": "B",'
            ' "filters": [{"field": "role", "operator": "neq", "value": "admin"}]}'
        )
    assert exc.value.reason == FallbackReason.SCHEMA_MISMATCH


def test_parse_no_object():
    with pytest.raises(UpstreamInterpretationError) as exc:
        parse_llm_response("[MOCK] hello")
    assert exc.value.reason == FallbackReason.PARSE_FAILURE


def test_parse_undecodable_object():
    with pytest.raises(UpstreamInterpretationError) as exc:
        parse_llm_response("{not: json}")
    assert exc.value.reason == FallbackReason.PARSE_FAILURE



@pytest.mark.asyncio
async def test_mock_provider_is_a_parse_failure():
    with pytest.raises(UpstreamInterpretationError) as exc:
        await interpret_with_llm("show users", provider="mock")
    assert exc.value.reason == FallbackReason.PARSE_FAILURE


@pytest.mark.asyncio
async def test_provider_sees_built_prompt(monkeypatch):
    seen = []

    async def fake(prompt):
        seen.append(prompt)
        return '{"componentType": "card", "datasetType": "users", "title": "T", "description": "D"}'

    monkeypatch.setitem(llm_client._PROVIDERS, "fake", fake)
    [interp] = await interpret_with_llm("user stats", provider="fake", multi=False)
    assert interp.component_type == "card"
    assert seen == [build_prompt("user stats", multi=False)]


def test_fallback_reason_values():
    assert [r.value for r in FallbackReason] == [
        "provider_error", "timeout", "parse_failure", "schema_mismatch",
    ]
