"""
Loads, parses, and caches the dataset catalog YAML into typed objects.

The catalog describes the three static datasets (sales, users, products):
  - field names and types
  - enumerated values for enum-like fields
  - one sample record per dataset
It feeds the hosted-model prompt and the /catalog endpoints.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

_CATALOG_PATH = Path(__file__).resolve().parents[2] / "catalog" / "datasets.yml"


# ── Typed domain objects ─────────────────────────────────

@dataclass(frozen=True)
class FieldSchema:
    name: str
    type: str  # string | number | boolean | date
    description: str
    possible_values: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class DatasetSchema:
    name: str
    description: str
    fields: list[FieldSchema] = field(default_factory=list)
    sample: dict[str, Any] = field(default_factory=dict)

    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def get_field(self, name: str) -> FieldSchema | None:
        return next((f for f in self.fields if f.name == name), None)


@dataclass
class Catalog:
    """Fully parsed dataset catalog."""

    version: int
    datasets: dict[str, DatasetSchema]  # keyed by name

    def dataset(self, name: str) -> DatasetSchema | None:
        return self.datasets.get(name)

    def get_dataset_names(self) -> list[str]:
        return list(self.datasets.keys())

    def schema_prompt(self) -> str:
        """Render the catalog as the plain-text block used in LLM prompts."""
        lines = ["Available datasets and their fields:", ""]
        for name, ds in self.datasets.items():
            lines.append(f"## {name.upper()} Dataset")
            lines.append(f"Description: {ds.description}")
            lines.append("Fields:")
            for f in ds.fields:
                line = f"  - {f.name} ({f.type}): {f.description}"
                if f.possible_values:
                    line += f" [Values: {', '.join(f.possible_values)}]"
                lines.append(line)
            if ds.sample:
                lines.append(f"Sample record: {json.dumps(ds.sample)}")
            lines.append("")
        return "\n".join(lines)


# ── Parsing ──────────────────────────────────────────────

def _parse_field(raw: dict[str, Any]) -> FieldSchema:
    return FieldSchema(
        name=raw["name"],
        type=raw.get("type", "string"),
        description=raw.get("description", ""),
        possible_values=[str(v) for v in raw.get("possible_values") or []],
    )


def _parse_dataset(raw: dict[str, Any]) -> DatasetSchema:
    return DatasetSchema(
        name=raw["name"],
        description=raw.get("description", ""),
        fields=[_parse_field(f) for f in raw.get("fields", [])],
        sample=raw.get("sample") or {},
    )


def _parse_catalog(raw_yaml: dict[str, Any]) -> Catalog:
    datasets = {d["name"]: _parse_dataset(d) for d in raw_yaml.get("datasets", [])}
    return Catalog(version=raw_yaml.get("version", 1), datasets=datasets)


# ── Public API ───────────────────────────────────────────

@lru_cache
def load_catalog() -> Catalog:
    """Load and cache the dataset catalog from YAML."""
    with open(_CATALOG_PATH) as f:
        raw = yaml.safe_load(f)
    return _parse_catalog(raw)
