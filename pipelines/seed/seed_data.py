"""
Seed data generator -- writes the static dashboard datasets as JSON.

Generates:
  - 12 monthly sales rows
  - NUM_USERS users
  - NUM_PRODUCTS products

Output goes to ``<project>/data/generated/{sales,users,products}.json`` (or the
directory given as the first argument); point ``DATA_DIR`` there to serve it.
Seeded, so re-runs are identical.
Run:  python -m pipelines.seed.seed_data
"""
from __future__ import annotations

import json
import random
import sys
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

from dotenv import load_dotenv
from faker import Faker

# ── Load .env from project root ─────────────────────────
_PROJECT_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(_PROJECT_ROOT / ".env")

fake = Faker()
Faker.seed(42)
random.seed(42)

# ── Tunables ─────────────────────────────────────────────
NUM_USERS = 10
NUM_PRODUCTS = 8

MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
CATEGORIES = ["Electronics", "Accessories"]
ROLES = ["Admin", "Editor", "Viewer"]
ROLE_WEIGHTS = [0.2, 0.3, 0.5]
USER_STATUSES = ["active", "inactive", "pending"]
USER_STATUS_WEIGHTS = [0.6, 0.25, 0.15]
LOW_STOCK_THRESHOLD = 20

NOW = datetime(2025, 6, 14, 12, 0, tzinfo=timezone.utc)


# ── Generators ───────────────────────────────────────────

def gen_sales() -> list[dict]:
    rows = []
    base = 45_000
    for i, month in enumerate(MONTHS):
        revenue = int(round(base * (1 + 0.06 * i) * random.uniform(0.9, 1.1), -3))
        rows.append({
            "month": month,
            "revenue": revenue,
            "unitsSold": int(revenue / random.uniform(130, 150)),
            "profit": int(round(revenue * random.uniform(0.26, 0.32), -2)),
            "category": random.choice(CATEGORIES),
        })
    return rows


def gen_users() -> list[dict]:
    rows = []
    for uid in range(1, NUM_USERS + 1):
        status = random.choices(USER_STATUSES, weights=USER_STATUS_WEIGHTS, k=1)[0]
        joined = fake.date_between(start_date=date(2022, 1, 1), end_date=NOW.date())
        last_active = NOW - timedelta(days=random.randint(0, 90 if status == "inactive" else 5),
                                      minutes=random.randint(0, 1440))
        rows.append({
            "id": uid,
            "name": fake.name(),
            "email": fake.email(),
            "role": random.choices(ROLES, weights=ROLE_WEIGHTS, k=1)[0],
            "status": status,
            "lastActive": last_active.strftime("%Y-%m-%dT%H:%M:%SZ"),
            "sessionsThisMonth": 0 if status == "inactive" else random.randint(1, 60),
            "joinedDate": joined.isoformat(),
        })
    return rows


def _stock_status(stock: int) -> str:
    if stock == 0:
        return "out_of_stock"
    if stock < LOW_STOCK_THRESHOLD:
        return "low_stock"
    return "in_stock"


def gen_products() -> list[dict]:
    rows = []
    for pid in range(1, NUM_PRODUCTS + 1):
        stock = random.choice([0, random.randint(1, LOW_STOCK_THRESHOLD - 1), random.randint(50, 900)])
        rows.append({
            "id": pid,
            "name": fake.catch_phrase(),
            "category": random.choice(CATEGORIES),
            "price": round(random.uniform(9.99, 499.99), 2),
            "stock": stock,
            "status": _stock_status(stock),
            "rating": round(random.uniform(3.5, 5.0), 1),
            "totalSold": random.randint(100, 4000),
        })
    return rows


# ── Main ─────────────────────────────────────────────────

def main(out_dir: Path | None = None) -> None:
    out_dir = out_dir or _PROJECT_ROOT / "data" / "generated"
    out_dir.mkdir(parents=True, exist_ok=True)
    print("═══ Seed Data Generator ═══")

    for name, rows in (("sales", gen_sales()), ("users", gen_users()), ("products", gen_products())):
        path = out_dir / f"{name}.json"
        path.write_text(json.dumps(rows, indent=2) + "\n", encoding="utf-8")
        print(f"  ✓ {name}: {len(rows):,} rows -> {path}")


if __name__ == "__main__":
    main(Path(sys.argv[1]) if len(sys.argv) > 1 else None)
