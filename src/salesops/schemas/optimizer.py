"""Route optimizer request/response schemas."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class OptimizationRequest(BaseModel):
    company_id: str
    branch_code: Optional[str] = Field(default=None, description="Branch code, or 'All Branches'.")
    week: Optional[str] = Field(default=None, description="Week number, or 'All Weeks'.")
    routes: List[str] = Field(default_factory=list, description="Route names to include; empty for all.")
    allowed_branches: Optional[List[str]] = Field(
        default=None,
        description="Branch codes the caller may see.",
    )


class SwapCandidateModel(BaseModel):
    id: str
    type: Literal["USER_SWAP", "DAY_SWAP"]
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
    neighbors_sample: List[tuple[float, float]]
    target_route_path: List[tuple[float, float]]


class TotalSavingsModel(BaseModel):
    distance_km: float
    time_hours: float
    optimizations: int


class OptimizationResponse(BaseModel):
    success: bool
    total_savings: TotalSavingsModel
    suggestions: List[SwapCandidateModel]
    routes: List[str]
    debug: dict


class BranchOptionModel(BaseModel):
    code: str
    name: str


class RouteDetailModel(BaseModel):
    name: str
    branch: str


class OptimizationFiltersResponse(BaseModel):
    branches: List[BranchOptionModel]
    routes: List[str]
    route_details: List[RouteDetailModel]
