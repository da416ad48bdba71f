"""Data cleaning request/response schemas."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class CleaningAnalyzeRequest(BaseModel):
    records: Optional[List[dict]] = Field(
        default=None,
        description="Rows to analyze. When omitted the lead store is read.",
    )


class DuplicatePairModel(BaseModel):
    record_a: dict
    record_b: dict
    conflict_type: str
    proof: str


class StandardizationProposalModel(BaseModel):
    id: str
    field: str
    old_value: Optional[str] = None
    new_value: str


class GapFillGroupModel(BaseModel):
    coordinate_key: str
    latitude: float
    longitude: float
    proposed_address: str
    affected_count: int
    record_ids: List[str]
    proposals: List[StandardizationProposalModel] = Field(
        default_factory=list,
        description="One proposal per record and address column; approve by key.",
    )


class BranchClusterModel(BaseModel):
    master: str
    variations: List[str]
    record_ids: List[str]
    proposals: List[StandardizationProposalModel] = Field(
        default_factory=list,
        description="Branch rewrites for records not already on the master name.",
    )


class CleaningStatsModel(BaseModel):
    total_scanned: int
    normalized: int
    duplicates_found: int


class CleaningReportResponse(BaseModel):
    stats: CleaningStatsModel
    duplicates: List[DuplicatePairModel]
    standardizations: List[StandardizationProposalModel]
    gaps: List[GapFillGroupModel]
    branch_clusters: List[BranchClusterModel]


class PairResolutionModel(BaseModel):
    record_a_id: str
    record_b_id: str
    resolution: Literal["KEEP_A", "KEEP_B", "SMART_MERGE"]


class CleaningApplyRequest(BaseModel):
    records: List[dict] = Field(..., description="Snapshot the proposals were derived from.")
    proposals: List[StandardizationProposalModel] = Field(default_factory=list)
    approved_keys: List[str] = Field(default_factory=list, description="Approved '<id>_<field>' keys.")
    resolutions: List[PairResolutionModel] = Field(default_factory=list)


class ApplyOutcomeModel(BaseModel):
    action: Literal["upsert", "delete"]
    record_id: str
    success: bool
    error: Optional[str] = None


class CleaningApplyResponse(BaseModel):
    succeeded: int
    failed: int
    outcomes: List[ApplyOutcomeModel]
