"""Rank, de-duplicate and cap swap candidates."""

from __future__ import annotations

from typing import Iterable, List

from ..geospatial import round_half_up
from .models import OptimizationStats, RankedCandidates, SwapCandidate


def best_per_client(candidates: Iterable[SwapCandidate]) -> List[SwapCandidate]:
    """Keep the highest-impact candidate per client code.

    The sort is stable, so equal scores keep their search order.
    """

    ordered = sorted(candidates, key=lambda candidate: candidate.impact_score, reverse=True)
    seen: set[str] = set()
    distinct: List[SwapCandidate] = []
    for candidate in ordered:
        if candidate.client_code in seen:
            continue
        seen.add(candidate.client_code)
        distinct.append(candidate)
    return distinct


def summarize(candidates: Iterable[SwapCandidate]) -> OptimizationStats:
    selected = list(candidates)
    total_distance = sum(candidate.distance_saved for candidate in selected)
    total_minutes = sum(candidate.time_saved for candidate in selected)
    return OptimizationStats(
        distance_km=round_half_up(total_distance, 1),
        time_hours=round_half_up(total_minutes / 60, 1),
        optimizations=len(selected),
    )


def rank_candidates(candidates: Iterable[SwapCandidate], *, limit: int = 50) -> RankedCandidates:
    if limit < 0:
        raise ValueError("limit must be >= 0")
    distinct = best_per_client(candidates)
    top = distinct[:limit]
    return RankedCandidates(
        suggestions=top,
        stats=summarize(top),
        distinct_clients=len(distinct),
    )
