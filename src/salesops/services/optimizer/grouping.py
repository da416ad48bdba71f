"""Partition visits into (rep, day, week) route groups."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, NamedTuple, Optional

from ...models.domain import Visit


class RouteKey(NamedTuple):
    rep_code: str
    day_name: str
    week_number: str


@dataclass(slots=True)
class RouteGroup:
    key: RouteKey
    members: List[Visit] = field(default_factory=list)

    @property
    def branch(self) -> Optional[str]:
        # Groups are assumed branch-homogeneous; the first member decides.
        return self.members[0].branch_code if self.members else None

    @property
    def route_name(self) -> Optional[str]:
        return self.members[0].route_name if self.members else None


def route_key(visit: Visit) -> RouteKey | None:
    if not visit.rep_code or not visit.day_name or not visit.week_number:
        return None
    return RouteKey(str(visit.rep_code), str(visit.day_name), str(visit.week_number))


def group_visits(visits: Iterable[Visit]) -> Dict[RouteKey, RouteGroup]:
    """Group visits by rep/day/week, preserving first-seen order.

    Visits missing any part of the key are dropped.
    """

    groups: Dict[RouteKey, RouteGroup] = {}
    for visit in visits:
        key = route_key(visit)
        if key is None:
            continue
        group = groups.get(key)
        if group is None:
            group = groups[key] = RouteGroup(key=key)
        group.members.append(visit)
    return groups
