"""Translate review decisions into upserts and deletes."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from ...models.domain import LeadRecord
from ...persistence.leads import LeadStore
from .models import ApplyOutcome, ApplyPlan, ApplyReport, DuplicatePair, Resolution, StandardizationProposal


def smart_merge(keep: Mapping, other: Mapping) -> dict:
    """Fill empty fields of ``keep`` from ``other``; populated fields are never overwritten."""

    merged = dict(keep)
    for key, value in other.items():
        if not merged.get(key) and value:
            merged[key] = value
    return merged


def build_apply_plan(
    records: Sequence[LeadRecord],
    proposals: Iterable[StandardizationProposal],
    resolved_pairs: Iterable[Tuple[DuplicatePair, Resolution]],
) -> ApplyPlan:
    """Compute the upserts and deletes for approved proposals and resolved pairs.

    Upserts carry the full original row with the approved fields replaced. A
    record that ends up deleted is never also upserted.
    """

    by_id: Dict[str, LeadRecord] = {record.id: record for record in records}
    updates: Dict[str, dict] = {}
    deletes: List[str] = []

    for proposal in proposals:
        original = by_id.get(proposal.id)
        if original is None:
            logging.warning(f"Skipping proposal for unknown record {proposal.id}")
            continue
        row = updates.setdefault(proposal.id, dict(original.raw))
        row[proposal.field] = proposal.new_value

    for pair, resolution in resolved_pairs:
        keep_a = pair.record_a
        keep_b = pair.record_b
        if resolution == "KEEP_A":
            deletes.append(keep_b.id)
        elif resolution == "KEEP_B":
            deletes.append(keep_a.id)
        elif resolution == "SMART_MERGE":
            base = updates.get(keep_a.id, keep_a.raw)
            other = updates.get(keep_b.id, keep_b.raw)
            updates[keep_a.id] = smart_merge(base, other)
            deletes.append(keep_b.id)
        else:
            raise ValueError(f"Unknown resolution '{resolution}'.")

    unique_deletes = list(dict.fromkeys(deletes))
    deleted = set(unique_deletes)
    upserts = [row for record_id, row in updates.items() if record_id not in deleted]
    return ApplyPlan(upserts=upserts, deletes=unique_deletes)


def execute_plan(plan: ApplyPlan, store: LeadStore) -> ApplyReport:
    """Run a plan against the store, reporting each upsert and delete separately."""

    report = ApplyReport()

    if plan.upserts:
        try:
            store.upsert(plan.upserts)
            report.outcomes.extend(
                ApplyOutcome(action="upsert", record_id=str(row.get("id")), success=True)
                for row in plan.upserts
            )
        except Exception as e:
            logging.warning(f"Batch upsert failed, trying individual upserts: {e}")
            for row in plan.upserts:
                record_id = str(row.get("id"))
                try:
                    store.upsert([row])
                    report.outcomes.append(ApplyOutcome(action="upsert", record_id=record_id, success=True))
                except Exception as item_error:
                    logging.warning(f"Failed to upsert record {record_id}: {item_error}")
                    report.outcomes.append(
                        ApplyOutcome(action="upsert", record_id=record_id, success=False, error=str(item_error))
                    )

    for record_id in plan.deletes:
        try:
            store.delete(record_id)
            report.outcomes.append(ApplyOutcome(action="delete", record_id=record_id, success=True))
        except Exception as e:
            logging.warning(f"Failed to delete record {record_id}: {e}")
            report.outcomes.append(ApplyOutcome(action="delete", record_id=record_id, success=False, error=str(e)))

    logging.info(f"Applied cleaning plan: {len(report.succeeded)} succeeded, {len(report.failed)} failed")
    return report
