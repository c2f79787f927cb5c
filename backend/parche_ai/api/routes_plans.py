from fastapi import APIRouter, Depends, HTTPException, Request
from typing import Any, Dict, List

from parche_ai.api.dependencies import get_catalog
from parche_ai.core.rate_limiting import limiter, CATALOG_LIMIT
from parche_ai.services.models import PlanRecord

router = APIRouter(prefix="/plans", tags=["plans"])


@router.get("", response_model=List[Dict[str, Any]])
@limiter.limit(CATALOG_LIMIT)
def list_plans(request: Request, catalog: List[PlanRecord] = Depends(get_catalog)):
    """Full plan catalog, ordered by id. Empty when the database is down."""
    return [p.model_dump() for p in catalog]


@router.get("/{plan_id}", response_model=Dict[str, Any])
@limiter.limit(CATALOG_LIMIT)
def get_plan(request: Request, plan_id: str, catalog: List[PlanRecord] = Depends(get_catalog)):
    """Single plan by id. The mobile client opens this from a plan reference."""
    for plan in catalog:
        if plan.id == plan_id:
            return plan.model_dump()
    raise HTTPException(status_code=404, detail=f"Plan {plan_id} not found")
