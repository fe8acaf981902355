"""
Static dataset store.

Each dataset lives in ``<data_dir>/<name>.json`` as a list of records.  Files
are read once and cached; callers get the cached list and must not mutate it
(the query engine copies records out).
"""
from __future__ import annotations

import json
from functools import lru_cache
from typing import Any

from src.core.config import get_settings
from src.core.logging import get_logger
from src.interpreter.schema import DATASETS

logger = get_logger(__name__)


class UnknownDatasetError(KeyError):
    """Raised for a dataset name outside sales / users / products."""

    def __init__(self, name: Any):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown dataset '{self.name}'. Choose from: {', '.join(DATASETS)}"


@lru_cache
def load_dataset(name: str) -> list[dict[str, Any]]:
    """Return the records of dataset *name*."""
    if name not in DATASETS:
        raise UnknownDatasetError(name)
    path = get_settings().data_dir / f"{name}.json"
    with open(path, encoding="utf-8") as f:
        records = json.load(f)
    logger.info("Loaded dataset %s (%d records) from %s", name, len(records), path)
    return records
