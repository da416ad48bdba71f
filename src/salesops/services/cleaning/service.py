"""Full cleaning analysis pass."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Mapping, Optional, Sequence

from ...config import settings
from ...models.domain import LeadRecord
from .duplicates import find_duplicate_pairs
from .models import CleaningReport
from .standardization import (
    AddressResolver,
    PlaceholderAddressResolver,
    find_address_gaps,
    find_branch_variations,
    find_region_standardizations,
)


@dataclass(slots=True)
class CleaningConfig:
    proximity_degrees: float = settings.duplicate_proximity_degrees
    branch_master_min_length: int = settings.branch_master_min_length
    region_aliases: Mapping[str, str] = field(default_factory=lambda: dict(settings.region_aliases))


def analyze_records(
    records: Sequence[LeadRecord],
    *,
    config: CleaningConfig | None = None,
    resolver: AddressResolver | None = None,
    on_progress: Optional[Callable[[int], None]] = None,
) -> CleaningReport:
    """Run every cleaning analysis over one snapshot.

    Plain blocking computation; callers that need responsiveness run it off
    their main thread and use ``on_progress`` for feedback.
    """

    config = config or CleaningConfig()
    resolver = resolver or PlaceholderAddressResolver()

    standardizations = find_region_standardizations(records, config.region_aliases)
    duplicates = find_duplicate_pairs(
        records,
        proximity_degrees=config.proximity_degrees,
        on_progress=on_progress,
    )
    gaps = find_address_gaps(records, resolver)
    clusters = find_branch_variations(records, min_length=config.branch_master_min_length)

    logging.info(
        f"Cleaning scan of {len(records)} records: {len(standardizations)} standardizations, "
        f"{len(duplicates)} duplicate pairs, {len(gaps)} address gaps, {len(clusters)} branch clusters"
    )
    return CleaningReport(
        total_scanned=len(records),
        duplicates=duplicates,
        standardizations=standardizations,
        gaps=gaps,
        branch_clusters=clusters,
    )
