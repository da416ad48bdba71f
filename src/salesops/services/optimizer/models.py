"""Route optimizer domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal

SwapType = Literal["USER_SWAP", "DAY_SWAP"]


@dataclass(slots=True)
class SwapCandidate:
    id: str
    type: SwapType
    client_code: str
    client_name: str
    client_arabic: str
    district: str
    classification: str
    store_type: str
    from_user: str
    from_day: str
    from_week: str
    from_route: str
    to_user: str
    to_day: str
    to_week: str
    to_route: str
    distance_saved: float
    time_saved: int
    impact_score: int
    confidence: int
    reason: str
    latitude: float
    longitude: float
    current_route_avg_dist: float
    new_route_avg_dist: float
    neighbors_sample: List[tuple[float, float]] = field(default_factory=list)
    target_route_path: List[tuple[float, float]] = field(default_factory=list)


@dataclass(slots=True)
class OptimizationStats:
    distance_km: float
    time_hours: float
    optimizations: int


@dataclass(slots=True)
class RankedCandidates:
    suggestions: List[SwapCandidate]
    stats: OptimizationStats
    distinct_clients: int


@dataclass(slots=True)
class OptimizationResult:
    success: bool
    total_savings: OptimizationStats
    suggestions: List[SwapCandidate]
    routes: List[str]
    debug: dict = field(default_factory=dict)

    @classmethod
    def empty(cls, *, success: bool, debug: dict, routes: List[str] | None = None) -> "OptimizationResult":
        return cls(
            success=success,
            total_savings=OptimizationStats(distance_km=0.0, time_hours=0.0, optimizations=0),
            suggestions=[],
            routes=routes or [],
            debug=debug,
        )
