"""
Plan Catalog Accessor.
Loads the seed catalog and produces the read-only snapshot each
recommendation request works on.
"""

from typing import List, Optional
from sqlalchemy.orm import Session
import json
import logging

from pydantic import ValidationError

from parche_ai.db.repositories import PlanRepository
from parche_ai.services.models import PlanRecord

logger = logging.getLogger(__name__)


def load_seed_catalog(path: str) -> List[PlanRecord]:
    """Read plan records from a JSON array file. Invalid entries are skipped."""
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, list):
        raise ValueError(f"Seed catalog {path} must be a JSON array")

    records: List[PlanRecord] = []
    skipped = 0
    for item in raw:
        try:
            records.append(PlanRecord(**item))
        except (TypeError, ValidationError) as e:
            skipped += 1
            logger.warning(f"Skipping invalid seed plan {item!r:.80}: {e}")
    logger.info(f"Loaded {len(records)} seed plans from {path} ({skipped} skipped)")
    return records


def get_catalog_snapshot(db: Optional[Session]) -> List[PlanRecord]:
    """
    Complete catalog for one request. Empty when the database is
    unavailable; the engine answers with a clarification in that case.
    """
    if db is None:
        logger.warning("Catalog requested with no DB session -- using empty catalog")
        return []
    return PlanRepository(db).snapshot()


def seed_catalog(db: Session, path: str) -> int:
    """Insert seed plans missing from the database. Returns how many were added."""
    repo = PlanRepository(db)
    added = repo.seed(load_seed_catalog(path))
    logger.info(f"Catalog seeding: {added} plans added, {repo.count()} total")
    return added
