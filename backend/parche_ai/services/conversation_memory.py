"""
Read-only helpers over the conversation history supplied by the caller.
Nothing here mutates the history list.
"""

from typing import Optional, Sequence

from parche_ai.services.models import ConversationTurn, Intent
from parche_ai.services.vocabulary import ASSISTANT_CATEGORY_MARKERS, GREETING_MEMORY_MARKERS

DEFAULT_WINDOW = 10


def recent_turns(history: Optional[Sequence[ConversationTurn]], window: int = DEFAULT_WINDOW) -> list:
    """Last `window` turns, oldest first."""
    if not history or window <= 0:
        return []
    return list(history[-window:])


def has_greeted_before(history: Optional[Sequence[ConversationTurn]]) -> bool:
    for turn in history or ():
        content = (turn.content or "").lower()
        if any(marker in content for marker in GREETING_MEMORY_MARKERS):
            return True
    return False


def last_assistant_category(history: Optional[Sequence[ConversationTurn]]) -> Optional[Intent]:
    """
    Category the assistant offered in its most recent reply, if any.
    Used by the rejection path so the next offer is a different category.
    """
    last_reply = ""
    for turn in reversed(history or ()):
        if turn.role == "assistant":
            last_reply = (turn.content or "").lower()
            break
    if not last_reply:
        return None

    for intent, markers in ASSISTANT_CATEGORY_MARKERS:
        if any(m in last_reply for m in markers):
            return intent
    return None
