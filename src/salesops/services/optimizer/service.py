"""Route optimizer orchestration."""

from __future__ import annotations

import logging
from typing import Sequence

from ...data.visits_repository import (
    VisitFilters,
    distinct_route_names,
    fetch_branch_and_route_options,
    fetch_visits,
    is_analyzable,
)
from ...models.domain import Visit
from .grouping import group_visits
from .models import OptimizationResult
from .ranking import rank_candidates
from .search import OptimizerConfig, search_swap_candidates
from .travel_time import TieredSpeedEstimator, TravelTimeEstimator


def analyze_visits(
    visits: Sequence[Visit],
    *,
    config: OptimizerConfig | None = None,
    estimator: TravelTimeEstimator | None = None,
) -> OptimizationResult:
    """Run grouping, candidate search and ranking over one visit snapshot.

    Holds no state between calls; the same snapshot always yields the same
    candidates.
    """

    config = config or OptimizerConfig()
    estimator = estimator or TieredSpeedEstimator()
    routes = distinct_route_names(visits)

    if not visits:
        return OptimizationResult.empty(
            success=True,
            debug={"message": "No customers found with valid GPS coordinates"},
        )

    analyzable = [visit for visit in visits if is_analyzable(visit)]
    groups = group_visits(analyzable)
    logging.info(f"Grouped {len(analyzable)} visits into {len(groups)} unique routes")

    candidates = search_swap_candidates(groups, config=config, estimator=estimator)
    ranked = rank_candidates(candidates, limit=config.max_suggestions)
    logging.info(
        f"Found {len(candidates)} raw candidates, keeping {len(ranked.suggestions)} "
        f"across {ranked.distinct_clients} clients"
    )

    return OptimizationResult(
        success=True,
        total_savings=ranked.stats,
        suggestions=ranked.suggestions,
        routes=routes,
        debug={
            "total_visits": len(visits),
            "total_routes": len(groups),
            "distinct_clients": ranked.distinct_clients,
        },
    )


def fetch_optimization_suggestions(
    company_id: str,
    filters: VisitFilters | None = None,
    allowed_branches: Sequence[str] | None = None,
    *,
    config: OptimizerConfig | None = None,
    estimator: TravelTimeEstimator | None = None,
) -> OptimizationResult:
    """Fetch a fresh snapshot and analyze it.

    A failed fetch or analysis yields an empty, unsuccessful result carrying
    the error message instead of raising.
    """

    filters = filters or VisitFilters()
    logging.info(f"Fetching visits for optimization (company={company_id}, filters={filters})")
    try:
        visits = fetch_visits(company_id, filters, allowed_branches)
        return analyze_visits(visits, config=config, estimator=estimator)
    except Exception as err:
        logging.error(f"Optimization error: {err}")
        return OptimizationResult.empty(success=False, debug={"error": str(err)})


def fetch_optimization_filters(company_id: str, allowed_branches: Sequence[str] | None = None) -> dict:
    return fetch_branch_and_route_options(company_id, allowed_branches)
