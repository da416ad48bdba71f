"""Route re-assignment optimizer."""

from .grouping import RouteGroup, RouteKey, group_visits
from .models import OptimizationResult, OptimizationStats, SwapCandidate
from .ranking import rank_candidates
from .search import OptimizerConfig, search_swap_candidates
from .service import analyze_visits, fetch_optimization_filters, fetch_optimization_suggestions
from .travel_time import ConstantSpeedEstimator, TieredSpeedEstimator

__all__ = [
    "RouteGroup",
    "RouteKey",
    "group_visits",
    "SwapCandidate",
    "OptimizationStats",
    "OptimizationResult",
    "rank_candidates",
    "OptimizerConfig",
    "search_swap_candidates",
    "analyze_visits",
    "fetch_optimization_suggestions",
    "fetch_optimization_filters",
    "ConstantSpeedEstimator",
    "TieredSpeedEstimator",
]
