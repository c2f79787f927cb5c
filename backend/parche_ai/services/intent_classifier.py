"""
Intent classification for Parche AI.

Rule-based: a fixed chain of short-circuit detectors followed by keyword
scoring against the per-category vocabularies in `vocabulary.INTENT_KEYWORDS`.

Order (first match wins):
  1. too_short   -- nothing to work with, ask for more info
  2. rejection   -- drop the previous category and offer another
  3. greeting    -- canned welcome (first time) or terse prompt (repeat)
  4. too general -- short, no question, no request verb; greeted like a
                    first-time greeting unless the conversation already
                    had one, in which case keyword scoring continues
  5. category    -- romantic > nightlife > food > adventure > culture > nature_chill
  6. none        -- generic recommendation over the whole catalog

The category priority mirrors the order the product has always used when a
message mentions more than one kind of plan. It is a product decision, not
a ranking signal.
"""

from typing import Optional, Sequence
import logging
import re

from parche_ai.services.conversation_memory import has_greeted_before
from parche_ai.services.models import ConversationTurn, Intent
from parche_ai.services.vocabulary import (
    GENERAL_MESSAGE_MAX_LENGTH,
    GREETING_WORDS,
    INTENT_KEYWORDS,
    REJECTION_PHRASES,
    REJECTION_WORDS,
    REQUEST_VERBS,
    TOO_SHORT_MAX_LENGTH,
    TOO_SHORT_WORDS,
)

logger = logging.getLogger(__name__)

# Whole words only: "bueno quiero" is not "no quiero"
_REJECTION_RE = re.compile(r"\b(?:" + "|".join(re.escape(p) for p in REJECTION_PHRASES) + r")\b")


def normalize(message: Optional[str]) -> str:
    return (message or "").strip().lower()


def is_too_short(text: str) -> bool:
    return len(text) <= TOO_SHORT_MAX_LENGTH or text in TOO_SHORT_WORDS


def is_rejection(text: str) -> bool:
    if text in REJECTION_WORDS:
        return True
    return _REJECTION_RE.search(text) is not None


def is_greeting(text: str) -> bool:
    for g in GREETING_WORDS:
        if (
            text == g
            or text.startswith(g + " ")
            or text.endswith(" " + g)
            or f" {g} " in text
        ):
            return True
    return False


def is_too_general(text: str) -> bool:
    if len(text) >= GENERAL_MESSAGE_MAX_LENGTH or "?" in text:
        return False
    return not any(verb in text for verb in REQUEST_VERBS)


def match_category(text: str) -> Optional[Intent]:
    """First category (in priority order) whose vocabulary appears in `text`."""
    for intent in Intent.categories():
        if any(kw in text for kw in INTENT_KEYWORDS[intent]):
            return intent
    return None


def classify(message: Optional[str], history: Optional[Sequence[ConversationTurn]] = None) -> Intent:
    """Map a raw user message (plus history) to an Intent. Never raises."""
    text = normalize(message)

    if is_too_short(text):
        return Intent.TOO_SHORT
    if is_rejection(text):
        return Intent.REJECTION
    if is_greeting(text):
        return Intent.GREETING
    if is_too_general(text) and not has_greeted_before(history):
        return Intent.GREETING

    category = match_category(text)
    if category is not None:
        return category

    logger.debug(f"No category keywords in message ({len(text)} chars), using generic intent")
    return Intent.NONE
