"""
Parche AI chat completion route.

POST /ai/chat
  body:  {"messages": [{"role": "system"|"user"|"assistant", "content": "..."}]}
  200:   {"completion": "...", "timestamp": "..."}
  400:   {"error": "Invalid request format"}
  500:   {"error": "...", "completion": "<apology>"}

The last "user" message is the active query; every non-system message
before it is the conversation history. Answered by the local pipeline.
This is the endpoint the dispatcher's remote URL points at when the
service talks to itself.
"""

from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError
from typing import Any, Dict, List, Literal, Optional, Tuple
from datetime import datetime, timezone
import logging

from parche_ai.api.dependencies import get_catalog, get_local_engine
from parche_ai.core.rate_limiting import limiter, CHAT_LIMIT
from parche_ai.services.local_engine import LocalEngine
from parche_ai.services.models import ConversationTurn, PlanRecord
from parche_ai.services.vocabulary import TECHNICAL_PROBLEM_REPLY

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai", tags=["AI Chat"])


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------

class WireMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str = ""


class ChatCompletionRequest(BaseModel):
    messages: List[WireMessage] = Field(..., min_length=1)


def split_messages(messages: List[WireMessage]) -> Optional[Tuple[str, List[ConversationTurn]]]:
    """(active user message, history before it), or None when there is no user message."""
    last_user = None
    for i in range(len(messages) - 1, -1, -1):
        if messages[i].role == "user":
            last_user = i
            break
    if last_user is None:
        return None

    history = [
        ConversationTurn(role=m.role, content=m.content)
        for m in messages[:last_user]
        if m.role != "system"
    ]
    return messages[last_user].content, history


def _invalid_request() -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": "Invalid request format"})


# ---------------------------------------------------------------------------
# Endpoint
# ---------------------------------------------------------------------------

@router.post("/chat")
@limiter.limit(CHAT_LIMIT)
async def chat_completion(
    request: Request,
    payload: Dict[str, Any] = Body(...),
    catalog: List[PlanRecord] = Depends(get_catalog),
    engine: LocalEngine = Depends(get_local_engine),
):
    try:
        body = ChatCompletionRequest.model_validate(payload)
    except ValidationError as e:
        logger.info(f"Rejected chat request: {e.error_count()} validation error(s)")
        return _invalid_request()

    split = split_messages(body.messages)
    if split is None:
        return _invalid_request()
    message, history = split

    try:
        reply = engine.generate_reply(message, history, catalog)
    except Exception as e:
        logger.error(f"AI chat error: {e}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Error processing request", "completion": TECHNICAL_PROBLEM_REPLY},
        )

    return {
        "completion": reply.text,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
