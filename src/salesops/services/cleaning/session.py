"""Caller-owned review state for a cleaning session."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence, Tuple

from .models import DuplicatePair, Resolution, StandardizationProposal

RESOLUTIONS: tuple[Resolution, ...] = ("KEEP_A", "KEEP_B", "SMART_MERGE")


@dataclass
class ReviewSession:
    """Human decisions taken on one cleaning report.

    Proposals are tracked by ``id_field`` keys and duplicate pairs by their
    index in the report, so a session is only meaningful for the report it was
    opened on.
    """

    approved_keys: set[str] = field(default_factory=set)
    resolutions: Dict[int, Resolution] = field(default_factory=dict)

    def approve(self, proposal: StandardizationProposal) -> None:
        self.approved_keys.add(proposal.key)

    def reject(self, proposal: StandardizationProposal) -> None:
        self.approved_keys.discard(proposal.key)

    def approve_all(self, proposals: Iterable[StandardizationProposal]) -> None:
        self.approved_keys.update(proposal.key for proposal in proposals)

    def is_approved(self, proposal: StandardizationProposal) -> bool:
        return proposal.key in self.approved_keys

    def resolve(self, pair_index: int, resolution: Resolution) -> None:
        if resolution not in RESOLUTIONS:
            raise ValueError(f"Unknown resolution '{resolution}'.")
        self.resolutions[pair_index] = resolution

    def skip(self, pair_index: int) -> None:
        self.resolutions.pop(pair_index, None)

    def approved_proposals(self, proposals: Iterable[StandardizationProposal]) -> List[StandardizationProposal]:
        return [proposal for proposal in proposals if self.is_approved(proposal)]

    def resolved_pairs(self, pairs: Sequence[DuplicatePair]) -> List[Tuple[DuplicatePair, Resolution]]:
        resolved: List[Tuple[DuplicatePair, Resolution]] = []
        for index, resolution in sorted(self.resolutions.items()):
            if 0 <= index < len(pairs):
                resolved.append((pairs[index], resolution))
        return resolved
