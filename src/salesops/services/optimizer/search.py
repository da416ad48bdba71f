"""Candidate search for single-customer route re-assignments."""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Iterator, Mapping, Optional, Sequence

from ...config import settings
from ...models.domain import Visit
from ..geospatial import haversine_km, is_valid_coordinate, round_half_up, round_int
from .grouping import RouteGroup, RouteKey
from .models import SwapCandidate, SwapType
from .travel_time import TieredSpeedEstimator, TravelTimeEstimator

SWAP_TYPES: tuple[SwapType, ...] = ("USER_SWAP", "DAY_SWAP")
UNKNOWN = "Unknown"
NOT_AVAILABLE = "N/A"
MISSING_ORDER = 999


@dataclass(slots=True)
class OptimizerConfig:
    min_improvement_km: float = settings.min_improvement_km
    isolated_peer_distance_km: float = settings.isolated_peer_distance_km
    neighbors_sample_size: int = settings.neighbors_sample_size
    max_suggestions: int = settings.max_suggestions


def move_type(source: RouteKey, target: RouteKey) -> SwapType | None:
    """Classify a (source, target) group pair, or None when it is not a legal move."""

    if source.week_number != target.week_number:
        return None
    if source.rep_code != target.rep_code and source.day_name == target.day_name:
        return "USER_SWAP"
    if source.rep_code == target.rep_code and source.day_name != target.day_name:
        return "DAY_SWAP"
    return None


def average_distance_to_peers(visit: Visit, group: RouteGroup, *, isolated_km: float) -> float:
    """Mean distance from ``visit`` to the rest of its own group.

    Members sharing the visit's client code are not peers. With no valid peer
    the ``isolated_km`` sentinel is returned.
    """

    total = 0.0
    count = 0
    for peer in group.members:
        if peer.client_code == visit.client_code:
            continue
        if not is_valid_coordinate(peer.latitude, peer.longitude):
            continue
        total += haversine_km(visit.latitude, visit.longitude, peer.latitude, peer.longitude)
        count += 1
    return total / count if count else isolated_km


def average_distance_to_group(visit: Visit, group: RouteGroup) -> Optional[float]:
    """Mean distance from ``visit`` to every valid member of ``group``; None if there are none."""

    total = 0.0
    count = 0
    for member in group.members:
        if not is_valid_coordinate(member.latitude, member.longitude):
            continue
        total += haversine_km(visit.latitude, visit.longitude, member.latitude, member.longitude)
        count += 1
    if count == 0:
        return None
    return total / count


def _valid_points(visits: Sequence[Visit]) -> list[tuple[float, float]]:
    return [
        (visit.latitude, visit.longitude)
        for visit in visits
        if is_valid_coordinate(visit.latitude, visit.longitude)
    ]


def _route_path(group: RouteGroup) -> list[tuple[float, float]]:
    ordered = sorted(
        group.members,
        key=lambda member: member.visit_order if member.visit_order else MISSING_ORDER,
    )
    return _valid_points(ordered)


def _reason(swap_type: SwapType, visit: Visit, source: RouteGroup, target: RouteGroup, distance_saved: float) -> str:
    district = visit.district or "district"
    if swap_type == "USER_SWAP":
        return (
            f"Customer in {district} is {round_int(distance_saved)}km closer to "
            f"{target.key.rep_code}'s route based in {source.branch}."
        )
    return (
        f"Customer in {district} creates backtracking on {source.key.day_name}. "
        f"Fits better on {target.key.day_name}."
    )


def _build_candidate(
    candidate_id: str,
    swap_type: SwapType,
    visit: Visit,
    source: RouteGroup,
    target: RouteGroup,
    avg_current: float,
    avg_other: float,
    estimator: TravelTimeEstimator,
    config: OptimizerConfig,
) -> SwapCandidate:
    distance_saved = avg_current - avg_other
    if swap_type == "USER_SWAP":
        to_route = target.route_name or UNKNOWN
    else:
        to_route = visit.route_name or UNKNOWN

    return SwapCandidate(
        id=candidate_id,
        type=swap_type,
        client_code=visit.client_code or UNKNOWN,
        client_name=visit.customer_name_en or UNKNOWN,
        client_arabic=visit.customer_name_ar or "",
        district=visit.district or "",
        classification=visit.classification or NOT_AVAILABLE,
        store_type=visit.store_type or NOT_AVAILABLE,
        from_user=source.key.rep_code,
        from_day=source.key.day_name,
        from_week=source.key.week_number,
        from_route=visit.route_name or UNKNOWN,
        to_user=target.key.rep_code,
        to_day=target.key.day_name,
        to_week=target.key.week_number,
        to_route=to_route,
        distance_saved=round_half_up(distance_saved, 1),
        time_saved=round_int(estimator.estimate_minutes(distance_saved, is_urban=True)),
        impact_score=min(100, round_int(distance_saved / avg_current * 100)),
        confidence=min(95, 70 + round_int(distance_saved)),
        reason=_reason(swap_type, visit, source, target, distance_saved),
        latitude=visit.latitude,
        longitude=visit.longitude,
        current_route_avg_dist=round_half_up(avg_current, 1),
        new_route_avg_dist=round_half_up(avg_other, 1),
        neighbors_sample=_valid_points(target.members[: config.neighbors_sample_size]),
        target_route_path=_route_path(target),
    )


def iter_swap_candidates(
    groups: Mapping[RouteKey, RouteGroup],
    *,
    config: OptimizerConfig | None = None,
    estimator: TravelTimeEstimator | None = None,
) -> Iterator[SwapCandidate]:
    """Yield every qualifying USER_SWAP and DAY_SWAP move.

    Each visit is compared against the full membership of every compatible
    group of the same branch, so the cost is quadratic in both group count and
    group size. Candidates come out in group order, then member order, with a
    visit's USER_SWAP moves ahead of its DAY_SWAP moves.
    """

    config = config or OptimizerConfig()
    estimator = estimator or TieredSpeedEstimator()
    sequence = itertools.count(1)
    group_list = list(groups.values())

    for group in group_list:
        branch = group.branch
        if not branch:
            continue
        for visit in group.members:
            if not is_valid_coordinate(visit.latitude, visit.longitude):
                continue
            avg_current = average_distance_to_peers(
                visit, group, isolated_km=config.isolated_peer_distance_km
            )
            for swap_type in SWAP_TYPES:
                for other in group_list:
                    if other is group or move_type(group.key, other.key) != swap_type:
                        continue
                    if other.branch != branch:
                        continue
                    avg_other = average_distance_to_group(visit, other)
                    if avg_other is None:
                        continue
                    if avg_current - avg_other <= config.min_improvement_km:
                        continue
                    yield _build_candidate(
                        f"opt_{next(sequence)}",
                        swap_type,
                        visit,
                        group,
                        other,
                        avg_current,
                        avg_other,
                        estimator,
                        config,
                    )


def search_swap_candidates(
    groups: Mapping[RouteKey, RouteGroup],
    *,
    config: OptimizerConfig | None = None,
    estimator: TravelTimeEstimator | None = None,
) -> list[SwapCandidate]:
    return list(iter_swap_candidates(groups, config=config, estimator=estimator))
