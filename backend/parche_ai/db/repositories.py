"""
Repository for the plan catalog.
The recommendation engine only ever sees `PlanRecord` snapshots produced here.
"""

from typing import Any, Iterable, List, Optional
from sqlalchemy.orm import Session
import logging

from parche_ai.db.models import Plan
from parche_ai.services.models import PlanRecord

logger = logging.getLogger(__name__)

TAG_SEPARATOR = " | "


def _split_tags(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [t.strip() for t in raw.split("|") if t.strip()]


def _join_tags(tags: Iterable[str]) -> str:
    return TAG_SEPARATOR.join(t.strip() for t in tags if t and t.strip())


def to_record(row: Plan) -> PlanRecord:
    return PlanRecord(
        id=row.id,
        name=row.name,
        category=row.category or "",
        description=row.description or "",
        rating=row.rating,
        tags=_split_tags(row.tags),
    )


class PlanRepository:
    """Plan catalog data access (plans table)."""

    def __init__(self, db: Session):
        if db is None:
            raise ValueError("Database session is required")
        self.db = db

    def get(self, plan_id: str) -> Optional[PlanRecord]:
        row = self.db.get(Plan, plan_id)
        return to_record(row) if row else None

    def snapshot(self) -> List[PlanRecord]:
        """The complete catalog, no pagination, ordered by id."""
        rows = self.db.query(Plan).order_by(Plan.id).all()
        return [to_record(r) for r in rows]

    def count(self) -> int:
        return self.db.query(Plan).count()

    def insert(self, record: PlanRecord) -> PlanRecord:
        if self.db.get(Plan, record.id) is not None:
            raise ValueError(f"Plan {record.id} already exists")
        row = Plan(
            id=record.id,
            name=record.name,
            category=record.category,
            description=record.description,
            rating=record.rating,
            tags=_join_tags(record.tags),
        )
        self.db.add(row)
        self.db.commit()
        logger.info(f"Inserted plan {record.id} ({record.name})")
        return to_record(row)

    def update(self, plan_id: str, **fields: Any) -> Optional[PlanRecord]:
        """Update the given columns of a plan. Returns None if it does not exist."""
        row = self.db.get(Plan, plan_id)
        if row is None:
            return None

        allowed = {"name", "category", "description", "rating", "tags"}
        unknown = set(fields) - allowed
        if unknown:
            raise ValueError(f"Unknown plan fields: {sorted(unknown)}")

        if "tags" in fields:
            fields["tags"] = _join_tags(fields["tags"] or [])
        for key, value in fields.items():
            setattr(row, key, value)

        # Validate through the record model before committing
        try:
            record = to_record(row)
        except Exception:
            self.db.rollback()
            raise
        self.db.commit()
        logger.info(f"Updated plan {plan_id}: {sorted(fields)}")
        return record

    def seed(self, records: Iterable[PlanRecord]) -> int:
        """Insert records whose id is not present yet. Returns how many were added."""
        added = 0
        seen = set()
        for record in records:
            if record.id in seen or self.db.get(Plan, record.id) is not None:
                continue
            seen.add(record.id)
            self.db.add(Plan(
                id=record.id,
                name=record.name,
                category=record.category,
                description=record.description,
                rating=record.rating,
                tags=_join_tags(record.tags),
            ))
            added += 1
        self.db.commit()
        return added
