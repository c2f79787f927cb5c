"""
Remote/Local Dispatcher
=======================
Answers a chat message by asking the remote completion endpoint first and
falling back to the local pipeline when the remote side is unusable.

Outcome table for the remote call:

  2xx + JSON body            -> remote completion (+ plan references)
  429                        -> user-facing "too many requests" text
  5xx                        -> user-facing "server problem" text
  404                        -> local fallback
  other non-2xx              -> user-facing "connection error" text
  non-JSON body (HTML, ...)  -> local fallback
  malformed JSON             -> local fallback
  transport error / timeout  -> local fallback

Error results carry confidenceScore 0.1 and no plan references. Nothing is
retried here; retry policy belongs to the caller.
"""

from __future__ import annotations
from typing import Optional, Sequence
import json
import logging
import random

import httpx

from parche_ai.core.config import settings
from parche_ai.core.monitoring import track_performance
from parche_ai.services import conversation_memory, plan_references
from parche_ai.services.local_engine import LocalEngine, typing_delay
from parche_ai.services.models import ConversationTurn, EngineResponse, PlanRecord
from parche_ai.services.prompt_builder import build_messages, build_system_prompt
from parche_ai.services.vocabulary import (
    CONNECTION_ERROR_REPLY,
    EMPTY_COMPLETION_REPLY,
    RATE_LIMITED_REPLY,
    UPSTREAM_UNAVAILABLE_REPLY,
)

logger = logging.getLogger(__name__)

ERROR_CONFIDENCE = 0.1
REMOTE_WITH_REFERENCES_CONFIDENCE = 0.9
REMOTE_WITHOUT_REFERENCES_CONFIDENCE = 0.7


class UpstreamError(Exception):
    """Remote failure that must be shown to the user instead of falling back."""

    def __init__(self, user_message: str, status_code: Optional[int] = None):
        super().__init__(user_message)
        self.user_message = user_message
        self.status_code = status_code


class FallbackRequired(Exception):
    """Remote answer is unusable; answer locally instead."""


def _looks_like_json(response: httpx.Response) -> bool:
    content_type = response.headers.get("content-type", "")
    return "application/json" in content_type or "+json" in content_type


def _looks_like_html(body: str) -> bool:
    head = body.lstrip()[:20].lower()
    return head.startswith("<!doctype") or head.startswith("<html")


class RecommendationDispatcher:
    """
    One instance can serve many concurrent requests: the catalog and
    history are passed per call and never stored.
    """

    def __init__(
        self,
        remote_url: Optional[str] = None,
        timeout: Optional[float] = None,
        local_engine: Optional[LocalEngine] = None,
        client: Optional[httpx.AsyncClient] = None,
        rng: Optional[random.Random] = None,
        city: Optional[str] = None,
    ):
        self.remote_url = settings.remote_completion_url if remote_url is None else remote_url
        self.timeout = timeout if timeout is not None else settings.remote_timeout_seconds
        self.rng = rng or random.Random()
        self.local_engine = local_engine or LocalEngine(rng=self.rng)
        self.city = city or settings.city_name
        self._client = client

    # ------------------------------------------------------------------
    # Public entry point
    # ------------------------------------------------------------------

    @track_performance("assistant_reply")
    async def reply(
        self,
        message: str,
        history: Optional[Sequence[ConversationTurn]],
        catalog: Sequence[PlanRecord],
    ) -> EngineResponse:
        if catalog is None:
            raise ValueError("Plan catalog is required")

        window = conversation_memory.recent_turns(history, settings.history_window)

        if not self.remote_url:
            return self.local_engine.respond(message, window, catalog)

        try:
            completion = await self._call_remote(message, window, catalog)
        except FallbackRequired as e:
            logger.warning(f"Remote completion unusable, answering locally: {e}")
            return self.local_engine.respond(message, window, catalog)
        except UpstreamError as e:
            logger.warning(f"Remote completion failed (status={e.status_code}): {e.user_message}")
            return EngineResponse(content=e.user_message, confidence_score=ERROR_CONFIDENCE)

        references = plan_references.extract(completion, catalog, limit=settings.max_plan_references)
        confidence = REMOTE_WITH_REFERENCES_CONFIDENCE if references else REMOTE_WITHOUT_REFERENCES_CONFIDENCE
        return EngineResponse(
            content=completion,
            plan_references=references,
            typing_delay_seconds=typing_delay(self.rng),
            confidence_score=confidence,
        )

    # ------------------------------------------------------------------
    # Remote call
    # ------------------------------------------------------------------

    async def _post(self, payload: dict) -> httpx.Response:
        if self._client is not None:
            return await self._client.post(self.remote_url, json=payload, timeout=self.timeout)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(self.remote_url, json=payload)

    async def _call_remote(
        self,
        message: str,
        history: Sequence[ConversationTurn],
        catalog: Sequence[PlanRecord],
    ) -> str:
        """Completion text, or raises FallbackRequired / UpstreamError."""
        system_prompt = build_system_prompt(catalog, self.city, settings.max_recommendations)
        payload = {"messages": build_messages(message, history, system_prompt)}

        try:
            response = await self._post(payload)
        except httpx.HTTPError as e:
            raise FallbackRequired(f"transport error: {e.__class__.__name__}: {e}") from e

        status = response.status_code
        if status == 429:
            raise UpstreamError(RATE_LIMITED_REPLY, status)
        if status >= 500:
            raise UpstreamError(UPSTREAM_UNAVAILABLE_REPLY, status)
        if status == 404:
            raise FallbackRequired("endpoint returned 404")
        if not response.is_success:
            raise UpstreamError(CONNECTION_ERROR_REPLY, status)

        if not _looks_like_json(response):
            kind = "HTML" if _looks_like_html(response.text) else "non-JSON"
            raise FallbackRequired(f"{kind} body ({response.headers.get('content-type', 'no content-type')})")

        try:
            data = response.json()
        except (json.JSONDecodeError, ValueError) as e:
            raise FallbackRequired(f"malformed JSON: {e}") from e

        if not isinstance(data, dict):
            raise FallbackRequired(f"unexpected JSON payload type {type(data).__name__}")

        completion = data.get("completion") or data.get("error") or ""
        return str(completion).strip() or EMPTY_COMPLETION_REPLY
