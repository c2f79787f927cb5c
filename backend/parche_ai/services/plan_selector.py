"""
Plan selection for the local recommendation pipeline.

Filters the catalog by the intent's category predicate, falls back to the
whole catalog when the filter comes back empty, then samples at most
MAX_PLANS candidates without replacement.
"""

from __future__ import annotations
from typing import List, Optional, Sequence
import logging
import random

from parche_ai.services.models import Intent, PlanRecord
from parche_ai.services.vocabulary import PLAN_FILTERS, ROMANTIC_MIN_RATING

logger = logging.getLogger(__name__)

MAX_PLANS = 3


def _contains_any(value: str, keywords: Sequence[str]) -> bool:
    return any(kw in value for kw in keywords)


def matches_category(plan: PlanRecord, category: Intent) -> bool:
    """Whether `plan` belongs to `category` (substring match on category, name, tags)."""
    rules = PLAN_FILTERS.get(category)
    if not rules:
        return False

    if category == Intent.ROMANTIC and plan.rating is not None and plan.rating >= ROMANTIC_MIN_RATING:
        return True

    if _contains_any(plan.category.lower(), rules["category"]):
        return True
    if _contains_any(plan.name.lower(), rules["name"]):
        return True
    tags = [t.lower() for t in plan.tags]
    return any(_contains_any(t, rules["tags"]) for t in tags)


def filter_by_category(catalog: Sequence[PlanRecord], category: Intent) -> List[PlanRecord]:
    """Plans in `category`; the whole catalog when none match."""
    matched = [p for p in catalog if matches_category(p, category)]
    if not matched:
        logger.debug(f"No plans match category '{category.value}', using full catalog ({len(catalog)})")
        return list(catalog)
    return matched


def pick_alternative_category(avoid: Optional[Intent], rng: random.Random) -> Intent:
    """Uniformly random category other than `avoid`."""
    pool = [c for c in Intent.categories() if c != avoid]
    return rng.choice(pool)


def sample(candidates: Sequence[PlanRecord], rng: random.Random, limit: int = MAX_PLANS) -> List[PlanRecord]:
    shuffled = list(candidates)
    rng.shuffle(shuffled)
    return shuffled[:limit]


def select(
    catalog: Sequence[PlanRecord],
    intent: Intent,
    avoid: Optional[Intent] = None,
    rng: Optional[random.Random] = None,
    limit: int = MAX_PLANS,
) -> List[PlanRecord]:
    """
    Choose up to `limit` plans for `intent`.

    - category intents: category filter with full-catalog fallback
    - rejection: random category other than `avoid`, then the same filter
    - none: whole catalog
    - greeting / too_short: nothing (the reply is a prompt, not a list)
    """
    if catalog is None:
        raise ValueError("Plan catalog is required")
    rng = rng or random.Random()

    if intent in (Intent.GREETING, Intent.TOO_SHORT) or not catalog:
        return []

    if intent == Intent.REJECTION:
        category = pick_alternative_category(avoid, rng)
        logger.info(f"Rejection: avoiding '{avoid.value if avoid else None}', offering '{category.value}'")
        candidates = filter_by_category(catalog, category)
    elif intent.is_category:
        candidates = filter_by_category(catalog, intent)
    else:
        candidates = list(catalog)

    return sample(candidates, rng, limit)
