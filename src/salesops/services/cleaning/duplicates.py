"""Greedy duplicate-pair detection over a full lead snapshot."""

from __future__ import annotations

from typing import Callable, Optional, Sequence

from ...config import settings
from ...models.domain import LeadRecord
from ..geospatial import has_coordinates, planar_degree_distance
from .models import DuplicatePair

ProgressCallback = Callable[[int], None]


def names_similar(name_a: str, name_b: str) -> bool:
    """Case-insensitive containment in either direction.

    An empty name is contained in every name, so it matches anything.
    """

    a = (name_a or "").lower()
    b = (name_b or "").lower()
    return a in b or b in a


def same_branch(record_a: LeadRecord, record_b: LeadRecord) -> bool:
    # Exact field equality: two records without a branch share one.
    return record_a.branch == record_b.branch


def is_near(record_a: LeadRecord, record_b: LeadRecord, threshold_degrees: float) -> bool:
    if not has_coordinates(record_a.latitude, record_a.longitude):
        return False
    if not has_coordinates(record_b.latitude, record_b.longitude):
        return False
    distance = planar_degree_distance(
        record_a.latitude, record_a.longitude, record_b.latitude, record_b.longitude
    )
    return distance < threshold_degrees


def _conflict_type(near: bool, branch: bool) -> str:
    if near and branch:
        return "Multi-Factor Match"
    if near:
        return "Name + Location Match"
    return "Name + Branch Match"


def _proof(record: LeadRecord, near: bool, branch: bool) -> str:
    proof = ["Name Similarity"]
    if near:
        proof.append("Location Proximity < 100m")
    if branch:
        proof.append(f"Matching Branch ({record.branch or ''})")
    return " + ".join(proof)


def find_duplicate_pairs(
    records: Sequence[LeadRecord],
    *,
    proximity_degrees: float | None = None,
    on_progress: Optional[ProgressCallback] = None,
) -> list[DuplicatePair]:
    """Pair up likely duplicates in a single greedy pass.

    A pair matches when the names contain one another and the records are
    either co-located or share a branch. The first match for a record wins and
    both records are then consumed, so results depend on input order.
    """

    threshold = proximity_degrees if proximity_degrees is not None else settings.duplicate_proximity_degrees
    total = len(records)
    report_every = max(100, total // 50)
    processed: set[str] = set()
    pairs: list[DuplicatePair] = []

    if on_progress:
        on_progress(0)

    for i, record_a in enumerate(records):
        if on_progress and i and i % report_every == 0:
            on_progress(round(i / total * 100))
        if record_a.id in processed:
            continue
        for record_b in records[i + 1:]:
            if record_b.id in processed or record_b.id == record_a.id:
                continue
            if not names_similar(record_a.name, record_b.name):
                continue
            near = is_near(record_a, record_b, threshold)
            branch = same_branch(record_a, record_b)
            if not (near or branch):
                continue
            pairs.append(
                DuplicatePair(
                    record_a=record_a,
                    record_b=record_b,
                    conflict_type=_conflict_type(near, branch),
                    proof=_proof(record_a, near, branch),
                    name_similar=True,
                    is_near=near,
                    same_branch=branch,
                )
            )
            processed.add(record_a.id)
            processed.add(record_b.id)
            break

    if on_progress:
        on_progress(100)
    return pairs
