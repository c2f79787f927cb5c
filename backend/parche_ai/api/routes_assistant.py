"""
Assistant message route used by the mobile chat screen.

POST /assistant/messages
  body:  {"message": "...", "history": [{"role": "user"|"assistant", "content": "..."}]}
  200:   {"content", "planReferences", "typingDelaySeconds", "confidenceScore"}
  429:   message sent before the per-client throttle window elapsed
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from typing import List
import logging

from parche_ai.api.dependencies import get_catalog, get_dispatcher, get_message_throttle
from parche_ai.core.rate_limiting import limiter, ASSISTANT_LIMIT, MessageThrottle
from parche_ai.services.dispatcher import RecommendationDispatcher
from parche_ai.services.models import ConversationTurn, PlanRecord

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/assistant", tags=["Assistant"])


class AssistantMessageRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=2000)
    history: List[ConversationTurn] = Field(default_factory=list)


@router.post("/messages")
@limiter.limit(ASSISTANT_LIMIT)
async def send_message(
    request: Request,
    body: AssistantMessageRequest,
    catalog: List[PlanRecord] = Depends(get_catalog),
    dispatcher: RecommendationDispatcher = Depends(get_dispatcher),
    throttle: MessageThrottle = Depends(get_message_throttle),
):
    """Answer one chat message with recommendations and plan references."""
    client_key = request.client.host if request.client else "unknown"
    if not throttle.allow(client_key):
        retry_after = throttle.retry_after(client_key)
        logger.info(f"Message throttled for {client_key} ({retry_after:.2f}s left)")
        return JSONResponse(
            status_code=429,
            content={
                "error": "Espera un momento antes de enviar otro mensaje.",
                "retry_after": round(retry_after, 2),
            },
        )

    response = await dispatcher.reply(body.message, body.history, catalog)
    return response.model_dump(by_alias=True)
