"""
GET /catalog, GET /catalog/{name} -- dataset schema endpoints.
"""
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from src.data.catalog import DatasetSchema, load_catalog

router = APIRouter()


class FieldItem(BaseModel):
    name: str
    type: str
    description: str
    possible_values: list[str] = []


class DatasetItem(BaseModel):
    name: str
    description: str
    fields: list[FieldItem]
    sample: dict[str, Any]


class CatalogResponse(BaseModel):
    datasets: list[DatasetItem]


def _to_item(ds: DatasetSchema) -> DatasetItem:
    return DatasetItem(
        name=ds.name,
        description=ds.description,
        fields=[
            FieldItem(name=f.name, type=f.type, description=f.description, possible_values=f.possible_values)
            for f in ds.fields
        ],
        sample=ds.sample,
    )


@router.get("/catalog", response_model=CatalogResponse)
def full_catalog() -> CatalogResponse:
    """Return every dataset schema for the UI sidebar."""
    catalog = load_catalog()
    return CatalogResponse(datasets=[_to_item(ds) for ds in catalog.datasets.values()])


@router.get("/catalog/{name}", response_model=DatasetItem)
def dataset_detail(name: str) -> DatasetItem:
    ds = load_catalog().dataset(name)
    if ds is None:
        raise HTTPException(status_code=404, detail=f"Unknown dataset '{name}'")
    return _to_item(ds)
