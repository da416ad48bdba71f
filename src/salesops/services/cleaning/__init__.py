"""Lead data cleaning and duplicate detection."""

from .applier import build_apply_plan, execute_plan, smart_merge
from .duplicates import find_duplicate_pairs
from .models import (
    ApplyPlan,
    ApplyReport,
    BranchVariationCluster,
    CleaningReport,
    DuplicatePair,
    GapFillGroup,
    StandardizationProposal,
)
from .service import CleaningConfig, analyze_records
from .session import ReviewSession
from .standardization import (
    PlaceholderAddressResolver,
    branch_cluster_proposals,
    find_address_gaps,
    find_branch_variations,
    find_region_standardizations,
    gap_fill_proposals,
)

__all__ = [
    "analyze_records",
    "CleaningConfig",
    "CleaningReport",
    "find_duplicate_pairs",
    "DuplicatePair",
    "find_address_gaps",
    "find_branch_variations",
    "find_region_standardizations",
    "gap_fill_proposals",
    "branch_cluster_proposals",
    "PlaceholderAddressResolver",
    "GapFillGroup",
    "BranchVariationCluster",
    "StandardizationProposal",
    "ReviewSession",
    "build_apply_plan",
    "execute_plan",
    "smart_merge",
    "ApplyPlan",
    "ApplyReport",
]
