"""Route optimizer endpoints."""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import List

from fastapi import APIRouter, HTTPException, Query, status

from ...data.visits_repository import VisitFilters
from ...schemas.optimizer import (
    OptimizationFiltersResponse,
    OptimizationRequest,
    OptimizationResponse,
)
from ...services.optimizer import fetch_optimization_filters, fetch_optimization_suggestions

router = APIRouter(prefix="/optimizer", tags=["optimizer"])


@router.post("/suggestions", response_model=OptimizationResponse, status_code=status.HTTP_200_OK)
def suggest_reassignments(payload: OptimizationRequest) -> OptimizationResponse:
    filters = VisitFilters(branch_code=payload.branch_code, week=payload.week, routes=list(payload.routes))
    result = fetch_optimization_suggestions(payload.company_id, filters, payload.allowed_branches)
    if not result.success:
        logging.warning(f"Optimization run failed for company {payload.company_id}: {result.debug}")
    return OptimizationResponse.model_validate(asdict(result))


@router.get("/filters", response_model=OptimizationFiltersResponse, status_code=status.HTTP_200_OK)
def list_filters(
    company_id: str = Query(..., description="Company whose branches and routes are listed"),
    allowed_branches: List[str] | None = Query(default=None, description="Restrict to these branch names"),
) -> OptimizationFiltersResponse:
    try:
        return OptimizationFiltersResponse(**fetch_optimization_filters(company_id, allowed_branches))
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error listing optimizer filters: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to list optimizer filters: {str(exc)}",
        ) from exc
