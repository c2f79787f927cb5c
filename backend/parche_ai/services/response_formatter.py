"""
Renders selected plans into the chat reply template:

    {intro}

    **{name}**
    {type} – {description}
    ⭐ {rating}/5            (only when the plan has a rating)
    Ideal para: {blurb}

    {closing question}
"""

from typing import List, Optional, Sequence, Tuple

from parche_ai.services.models import Intent, PlanRecord
from parche_ai.services.vocabulary import (
    DEFAULT_DESCRIPTION,
    DEFAULT_INTRO_AND_QUESTION,
    DEFAULT_PLAN_TYPE,
    DESCRIPTION_MAX_CHARS,
    IDEAL_FOR_DEFAULT,
    IDEAL_FOR_HIGH_RATING,
    IDEAL_FOR_HIGH_RATING_MIN,
    IDEAL_FOR_RULES,
    INTRO_AND_QUESTION,
    NO_PLANS_REPLY,
    VENUE_TYPES,
)


def intro_and_question(intent: Intent) -> Tuple[str, str]:
    return INTRO_AND_QUESTION.get(intent, DEFAULT_INTRO_AND_QUESTION)


def plan_type(plan: PlanRecord) -> str:
    category = plan.category.lower()
    name = plan.name.lower()
    for keywords, label in VENUE_TYPES:
        if any(kw in category or kw in name for kw in keywords):
            return label
    return plan.category or DEFAULT_PLAN_TYPE


def ideal_for(plan: PlanRecord) -> str:
    """
    Blurb derived from the plan's own signals, not from the intent that
    selected it (a plan pulled in by the full-catalog fallback still gets
    an accurate blurb).
    """
    category = plan.category.lower()
    name = plan.name.lower()
    tags = [t.lower() for t in plan.tags]

    for cat_kws, name_kws, tag_kws, blurb in IDEAL_FOR_RULES:
        if any(kw in category for kw in cat_kws):
            return blurb
        if any(kw in name for kw in name_kws):
            return blurb
        if any(kw in t for t in tags for kw in tag_kws):
            return blurb

    if plan.rating is not None and plan.rating >= IDEAL_FOR_HIGH_RATING_MIN:
        return IDEAL_FOR_HIGH_RATING
    return IDEAL_FOR_DEFAULT


def short_description(description: Optional[str]) -> str:
    text = (description or "").strip()
    if not text:
        return DEFAULT_DESCRIPTION
    if len(text) > DESCRIPTION_MAX_CHARS:
        return text[:DESCRIPTION_MAX_CHARS].rstrip() + "..."
    return text


def format_rating(rating: Optional[float]) -> str:
    # 0 means "not rated yet" in the catalog
    if not rating:
        return ""
    return f"⭐ {rating:.1f}/5"


def format_plan(plan: PlanRecord) -> List[str]:
    lines = [
        f"**{plan.name}**",
        f"{plan_type(plan)} – {short_description(plan.description)}",
    ]
    rating = format_rating(plan.rating)
    if rating:
        lines.append(rating)
    lines.append(f"Ideal para: {ideal_for(plan)}")
    return lines


def format_plans(plans: Sequence[PlanRecord], intro: str, closing_question: str) -> str:
    """Full reply text; a clarification request when there is nothing to show."""
    if not plans:
        return NO_PLANS_REPLY

    blocks = [intro, ""]
    for plan in plans:
        blocks.extend(format_plan(plan))
        blocks.append("")
    blocks.append(closing_question)
    return "\n".join(blocks)
