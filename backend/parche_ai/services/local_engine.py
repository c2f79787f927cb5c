"""
Local (deterministic-rule) recommendation pipeline.

    message + history
      -> intent_classifier.classify
      -> plan_selector.select
      -> response_formatter.format_plans
      -> plan_references.extract

This is the single implementation behind both the server completion route
(/ai/chat) and the dispatcher's fallback when the remote model is out.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Sequence
import logging
import random

from parche_ai.core.config import settings
from parche_ai.services import conversation_memory, plan_references, plan_selector
from parche_ai.services.intent_classifier import classify
from parche_ai.services.models import ConversationTurn, EngineResponse, Intent, PlanRecord
from parche_ai.services.response_formatter import format_plans, intro_and_question
from parche_ai.services.vocabulary import CLARIFICATION_REPLY, REPEAT_GREETING_REPLY, WELCOME_REPLY

logger = logging.getLogger(__name__)

PROMPT_CONFIDENCE = 0.8
RECOMMENDATION_CONFIDENCE = 0.7


@dataclass
class LocalReply:
    """Text produced by the local pipeline plus how it got there."""
    text: str
    intent: Intent
    plans: List[PlanRecord] = field(default_factory=list)
    avoided: Optional[Intent] = None

    @property
    def is_prompt(self) -> bool:
        """True for clarification / greeting replies that carry no plans."""
        return self.intent in (Intent.TOO_SHORT, Intent.GREETING)


def typing_delay(rng: random.Random) -> float:
    """Simulated typing latency in seconds, uniform in [min, max)."""
    low = settings.typing_delay_min_seconds
    high = settings.typing_delay_max_seconds
    return low + rng.random() * (high - low)


class LocalEngine:
    """
    Stateless apart from its random source; safe to share between
    concurrent requests when built with the default (unseeded) source.
    """

    def __init__(self, rng: Optional[random.Random] = None, history_window: Optional[int] = None,
                 max_recommendations: Optional[int] = None, max_references: Optional[int] = None):
        self.rng = rng or random.Random()
        self.history_window = history_window if history_window is not None else settings.history_window
        self.max_recommendations = (
            max_recommendations if max_recommendations is not None else settings.max_recommendations
        )
        self.max_references = max_references if max_references is not None else settings.max_plan_references

    def generate_reply(
        self,
        message: str,
        history: Optional[Sequence[ConversationTurn]],
        catalog: Sequence[PlanRecord],
    ) -> LocalReply:
        if catalog is None:
            raise ValueError("Plan catalog is required")

        window = conversation_memory.recent_turns(history, self.history_window)
        intent = classify(message, window)

        if intent == Intent.TOO_SHORT:
            return LocalReply(CLARIFICATION_REPLY, intent)

        if intent == Intent.GREETING:
            if conversation_memory.has_greeted_before(window):
                return LocalReply(REPEAT_GREETING_REPLY, intent)
            return LocalReply(WELCOME_REPLY, intent)

        avoid = None
        if intent == Intent.REJECTION:
            avoid = conversation_memory.last_assistant_category(window)

        plans = plan_selector.select(catalog, intent, avoid=avoid, rng=self.rng,
                                     limit=self.max_recommendations)
        intro, question = intro_and_question(intent)
        text = format_plans(plans, intro, question)
        logger.info(f"Local reply: intent={intent.value} plans={len(plans)} catalog={len(catalog)}",
                    extra={"intent": intent.value})
        return LocalReply(text, intent, plans, avoided=avoid)

    def respond(
        self,
        message: str,
        history: Optional[Sequence[ConversationTurn]],
        catalog: Sequence[PlanRecord],
    ) -> EngineResponse:
        reply = self.generate_reply(message, history, catalog)
        references = plan_references.extract(reply.text, catalog, limit=self.max_references)
        confidence = PROMPT_CONFIDENCE if reply.is_prompt else RECOMMENDATION_CONFIDENCE
        return EngineResponse(
            content=reply.text,
            plan_references=[] if reply.is_prompt else references,
            typing_delay_seconds=typing_delay(self.rng),
            confidence_score=confidence,
        )
