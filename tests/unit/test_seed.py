"""
Unit tests -- synthetic dataset generator.
"""
import json

from pipelines.seed import seed_data
from src.data.catalog import load_catalog


def test_seed_writes_all_datasets(tmp_path):
    seed_data.main(tmp_path)
    sizes = {
        name: len(json.loads((tmp_path / f"{name}.json").read_text(encoding="utf-8")))
        for name in ("sales", "users", "products")
    }
    assert sizes == {"sales": 12, "users": seed_data.NUM_USERS, "products": seed_data.NUM_PRODUCTS}


def test_seeded_records_match_catalog():
    catalog = load_catalog()
    for name, rows in (
        ("sales", seed_data.gen_sales()),
        ("users", seed_data.gen_users()),
        ("products", seed_data.gen_products()),
    ):
        assert set(rows[0]) == set(catalog.dataset(name).field_names())


def test_product_status_follows_stock():
    for p in seed_data.gen_products():
        assert p["status"] == seed_data._stock_status(p["stock"])


def test_inactive_users_have_no_sessions():
    for u in seed_data.gen_users():
        if u["status"] == "inactive":
            assert u["sessionsThisMonth"] == 0


def test_stock_status_thresholds():
    assert seed_data._stock_status(0) == "out_of_stock"
    assert seed_data._stock_status(seed_data.LOW_STOCK_THRESHOLD - 1) == "low_stock"
    assert seed_data._stock_status(seed_data.LOW_STOCK_THRESHOLD) == "in_stock"
