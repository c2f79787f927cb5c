"""
Shared FastAPI dependencies.
Overridable in tests via app.dependency_overrides.
"""

from typing import List, Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from parche_ai.core.rate_limiting import MessageThrottle, message_throttle
from parche_ai.db.database import get_db
from parche_ai.services.catalog import get_catalog_snapshot
from parche_ai.services.dispatcher import RecommendationDispatcher
from parche_ai.services.local_engine import LocalEngine
from parche_ai.services.models import PlanRecord

_local_engine = LocalEngine()
_dispatcher = RecommendationDispatcher(local_engine=_local_engine)


def get_catalog(db: Optional[Session] = Depends(get_db)) -> List[PlanRecord]:
    return get_catalog_snapshot(db)


def get_local_engine() -> LocalEngine:
    return _local_engine


def get_dispatcher() -> RecommendationDispatcher:
    return _dispatcher


def get_message_throttle() -> MessageThrottle:
    return message_throttle
