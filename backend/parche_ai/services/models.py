"""
Engine data model.
Plans, conversation turns, intents and the response envelope returned
to the chat client. Everything here is built per request and discarded.
"""

from __future__ import annotations
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Intent(str, Enum):
    """Classified purpose behind a user message."""
    ROMANTIC = "romantic"
    NIGHTLIFE = "nightlife"
    FOOD = "food"
    ADVENTURE = "adventure"
    CULTURE = "culture"
    NATURE_CHILL = "nature_chill"
    GREETING = "greeting"
    TOO_SHORT = "too_short"
    REJECTION = "rejection"
    NONE = "none"

    @classmethod
    def categories(cls) -> List["Intent"]:
        """The six recommendable categories, in tie-break priority order."""
        return [
            cls.ROMANTIC,
            cls.NIGHTLIFE,
            cls.FOOD,
            cls.ADVENTURE,
            cls.CULTURE,
            cls.NATURE_CHILL,
        ]

    @property
    def is_category(self) -> bool:
        return self in Intent.categories()


class PlanRecord(BaseModel):
    """A recommendable venue or experience. Read-only for the engine."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    category: str = ""
    description: str = ""
    rating: Optional[float] = Field(None, ge=0, le=5)
    tags: List[str] = Field(default_factory=list)


class ConversationTurn(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: str = ""


class PlanReference(BaseModel):
    """Pointer from a response back to a catalog plan."""
    model_config = ConfigDict(populate_by_name=True)

    plan_id: str = Field(..., alias="planId")
    match_name: str = Field(..., alias="matchName")
    confidence: float = Field(..., ge=0, le=1)


class EngineResponse(BaseModel):
    """What the chat client renders: text, tappable plan cards, fake latency."""
    model_config = ConfigDict(populate_by_name=True)

    content: str
    plan_references: List[PlanReference] = Field(default_factory=list, alias="planReferences")
    typing_delay_seconds: float = Field(0.0, ge=0, alias="typingDelaySeconds")
    confidence_score: float = Field(..., ge=0, le=1, alias="confidenceScore")

    @field_validator("content")
    @classmethod
    def content_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("content must not be empty")
        return v

    @field_validator("plan_references")
    @classmethod
    def cap_references(cls, v: List[PlanReference]) -> List[PlanReference]:
        if len(v) > 4:
            raise ValueError("at most 4 plan references per response")
        return v
