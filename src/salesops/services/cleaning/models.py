"""Cleaning engine domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Optional

from ...models.domain import LeadRecord

Resolution = Literal["KEEP_A", "KEEP_B", "SMART_MERGE"]


@dataclass(slots=True)
class DuplicatePair:
    record_a: LeadRecord
    record_b: LeadRecord
    conflict_type: str
    proof: str
    name_similar: bool = True
    is_near: bool = False
    same_branch: bool = False


@dataclass(slots=True)
class StandardizationProposal:
    id: str
    field: str
    old_value: Optional[str]
    new_value: str

    @property
    def key(self) -> str:
        return f"{self.id}_{self.field}"


@dataclass(slots=True)
class GapFillGroup:
    coordinate_key: str
    latitude: float
    longitude: float
    proposed_address: str
    records: List[LeadRecord] = field(default_factory=list)
    affected_count: int = 0


@dataclass(slots=True)
class BranchVariationCluster:
    master: str
    variations: List[str] = field(default_factory=list)
    records: List[LeadRecord] = field(default_factory=list)


@dataclass(slots=True)
class CleaningReport:
    total_scanned: int
    duplicates: List[DuplicatePair]
    standardizations: List[StandardizationProposal]
    gaps: List[GapFillGroup]
    branch_clusters: List[BranchVariationCluster]

    @property
    def normalized(self) -> int:
        return len(self.standardizations)

    @property
    def duplicates_found(self) -> int:
        return 2 * len(self.duplicates)


@dataclass(slots=True)
class ApplyPlan:
    upserts: List[dict] = field(default_factory=list)
    deletes: List[str] = field(default_factory=list)


@dataclass(slots=True)
class ApplyOutcome:
    action: Literal["upsert", "delete"]
    record_id: str
    success: bool
    error: Optional[str] = None


@dataclass(slots=True)
class ApplyReport:
    outcomes: List[ApplyOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> List[ApplyOutcome]:
        return [outcome for outcome in self.outcomes if outcome.success]

    @property
    def failed(self) -> List[ApplyOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.success]
