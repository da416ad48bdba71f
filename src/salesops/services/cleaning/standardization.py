"""Field standardization proposals: address gaps, branch variations, region aliases."""

from __future__ import annotations

import re
from typing import Dict, List, Mapping, Protocol, Sequence

from ...config import settings
from ...data.leads_repository import ADDRESS_FIELDS, BRANCH_FIELD
from ...models.domain import LeadRecord
from ..geospatial import has_coordinates
from .models import BranchVariationCluster, GapFillGroup, StandardizationProposal

BRANCH_SUFFIX_PATTERN = re.compile(r"[-_\d]")


class AddressResolver(Protocol):
    def resolve(self, latitude: float, longitude: float) -> str:
        ...


class PlaceholderAddressResolver:
    """Descriptive stand-in; performs no geocoding."""

    def resolve(self, latitude: float, longitude: float) -> str:
        return f"Resolved Map Address for {latitude:.6f}, {longitude:.6f}"


def coordinate_key(latitude: float, longitude: float) -> str:
    return f"{latitude:.6f},{longitude:.6f}"


def find_address_gaps(
    records: Sequence[LeadRecord],
    resolver: AddressResolver | None = None,
) -> List[GapFillGroup]:
    """Group address-less records that share exact coordinates."""

    resolver = resolver or PlaceholderAddressResolver()
    groups: Dict[str, GapFillGroup] = {}
    for record in records:
        if record.address:
            continue
        if not has_coordinates(record.latitude, record.longitude):
            continue
        key = coordinate_key(record.latitude, record.longitude)
        group = groups.get(key)
        if group is None:
            group = groups[key] = GapFillGroup(
                coordinate_key=key,
                latitude=record.latitude,
                longitude=record.longitude,
                proposed_address=resolver.resolve(record.latitude, record.longitude),
            )
        group.affected_count += 1
        if all(existing.id != record.id for existing in group.records):
            group.records.append(record)
    return list(groups.values())


def master_branch_name(branch: str) -> str:
    """Text before the first digit, dash or underscore, trimmed."""

    return BRANCH_SUFFIX_PATTERN.split(branch, maxsplit=1)[0].strip()


def find_branch_variations(
    records: Sequence[LeadRecord],
    *,
    min_length: int | None = None,
) -> List[BranchVariationCluster]:
    """Cluster branch labels by master name; only masters with several spellings are returned."""

    min_length = min_length if min_length is not None else settings.branch_master_min_length
    clusters: Dict[str, BranchVariationCluster] = {}
    for record in records:
        if not record.branch:
            continue
        master = master_branch_name(record.branch)
        if len(master) < min_length:
            continue
        cluster = clusters.get(master)
        if cluster is None:
            cluster = clusters[master] = BranchVariationCluster(master=master)
        if record.branch not in cluster.variations:
            cluster.variations.append(record.branch)
        if all(existing.id != record.id for existing in cluster.records):
            cluster.records.append(record)
    return [cluster for cluster in clusters.values() if len(cluster.variations) > 1]


def find_region_standardizations(
    records: Sequence[LeadRecord],
    aliases: Mapping[str, str] | None = None,
) -> List[StandardizationProposal]:
    """Propose canonical region names for known misspellings and aliases."""

    aliases = aliases if aliases is not None else settings.region_aliases
    proposals: List[StandardizationProposal] = []
    for record in records:
        lookup = (record.branch or "").strip().lower()
        canonical = aliases.get(lookup)
        if canonical is None or record.branch == canonical:
            continue
        proposals.append(
            StandardizationProposal(
                id=record.id,
                field=BRANCH_FIELD,
                old_value=record.branch,
                new_value=canonical,
            )
        )
    return proposals


def gap_fill_proposals(group: GapFillGroup) -> List[StandardizationProposal]:
    """One proposal per record and address column."""
    return [
        StandardizationProposal(
            id=record.id,
            field=field_name,
            old_value=record.raw.get(field_name),
            new_value=group.proposed_address,
        )
        for record in group.records
        for field_name in ADDRESS_FIELDS
    ]


def branch_cluster_proposals(cluster: BranchVariationCluster) -> List[StandardizationProposal]:
    return [
        StandardizationProposal(
            id=record.id,
            field=BRANCH_FIELD,
            old_value=record.branch,
            new_value=cluster.master,
        )
        for record in cluster.records
        if record.branch != cluster.master
    ]
