"""
Finds which catalog plans a reply mentions, so the client can render them
as tappable cards.

  exact   -- the full plan name appears in the text (case-insensitive): 0.95
  partial -- every significant word of a multi-word name appears in the
             text, but not the name as a whole: 0.75
"""

from typing import List, Sequence, Set
import logging
import re

from parche_ai.services.models import PlanRecord, PlanReference

logger = logging.getLogger(__name__)

EXACT_MATCH_CONFIDENCE = 0.95
PARTIAL_MATCH_CONFIDENCE = 0.75
MAX_REFERENCES = 4

_MIN_TOKEN_LEN = 3
_STOP = {"the", "and", "del", "las", "los", "con", "por", "para", "una", "uno"}
_WORD_RE = re.compile(r"\w+", re.UNICODE)


def _words(text: str) -> List[str]:
    return _WORD_RE.findall(text.lower())


def _significant(words: Sequence[str]) -> Set[str]:
    return {w for w in words if len(w) >= _MIN_TOKEN_LEN and w not in _STOP}


def match_confidence(plan_name: str, text_lower: str, text_words: Set[str]) -> float:
    """0.95 exact, 0.75 partial, 0.0 not mentioned."""
    name = plan_name.strip().lower()
    if not name:
        return 0.0
    if name in text_lower:
        return EXACT_MATCH_CONFIDENCE

    tokens = _significant(_words(name))
    if len(tokens) >= 2 and tokens <= text_words:
        return PARTIAL_MATCH_CONFIDENCE
    return 0.0


def extract(text: str, catalog: Sequence[PlanRecord], limit: int = MAX_REFERENCES) -> List[PlanReference]:
    """Plan references found in `text`, best first, at most `limit`."""
    if catalog is None:
        raise ValueError("Plan catalog is required")
    if not text:
        return []

    text_lower = text.lower()
    text_words = set(_words(text))

    references: List[PlanReference] = []
    seen: Set[str] = set()
    for plan in catalog:
        if plan.id in seen:
            continue
        confidence = match_confidence(plan.name, text_lower, text_words)
        if confidence > 0:
            seen.add(plan.id)
            references.append(PlanReference(plan_id=plan.id, match_name=plan.name, confidence=confidence))

    # stable sort keeps catalog order among equal confidences
    references.sort(key=lambda r: r.confidence, reverse=True)
    if len(references) > limit:
        logger.debug(f"Found {len(references)} plan mentions, keeping top {limit}")
    return references[:limit]
