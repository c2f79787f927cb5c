"""
Seed the SQLite database with the Parche AI plan catalog.
Drops and recreates the plans table, then inserts every plan from the
JSON seed file.
Run: python scripts/seed_sqlite.py [path/to/plans.json]
"""

import os
import sys

# Add backend directory to path for parche_ai imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from parche_ai.core.config import settings
from parche_ai.db.database import SessionLocal, engine
from parche_ai.db.models import Base
from parche_ai.db.repositories import PlanRepository
from parche_ai.services.catalog import load_seed_catalog


def main():
    json_path = sys.argv[1] if len(sys.argv) > 1 else settings.catalog_seed_path

    print(f"Database: {engine.url}")

    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    print("Tables created")

    records = load_seed_catalog(json_path)
    print(f"Loaded {len(records)} plans from {json_path}")

    db = SessionLocal()
    try:
        repo = PlanRepository(db)
        added = repo.seed(records)
        print(f"Inserted {added} plans")

        catalog = repo.snapshot()
        categories = {}
        for plan in catalog:
            categories[plan.category or "(none)"] = categories.get(plan.category or "(none)", 0) + 1
        print(f"Total in DB: {len(catalog)}")
        for category, count in sorted(categories.items(), key=lambda x: -x[1]):
            print(f"  {category}: {count}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
