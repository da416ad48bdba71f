"""Data cleaning endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...data.leads_repository import leads_from_rows, load_leads
from ...persistence.leads import get_lead_store
from ...schemas.cleaning import (
    CleaningAnalyzeRequest,
    CleaningApplyRequest,
    CleaningApplyResponse,
    CleaningReportResponse,
)
from ...services.cleaning import (
    CleaningReport,
    DuplicatePair,
    ReviewSession,
    StandardizationProposal,
    analyze_records,
    branch_cluster_proposals,
    build_apply_plan,
    execute_plan,
    gap_fill_proposals,
)

router = APIRouter(prefix="/cleaning", tags=["cleaning"])


def _proposal_to_dict(proposal: StandardizationProposal) -> dict:
    return {
        "id": proposal.id,
        "field": proposal.field,
        "old_value": proposal.old_value,
        "new_value": proposal.new_value,
    }


def _report_to_response(report: CleaningReport) -> CleaningReportResponse:
    return CleaningReportResponse.model_validate(
        {
            "stats": {
                "total_scanned": report.total_scanned,
                "normalized": report.normalized,
                "duplicates_found": report.duplicates_found,
            },
            "duplicates": [
                {
                    "record_a": pair.record_a.raw,
                    "record_b": pair.record_b.raw,
                    "conflict_type": pair.conflict_type,
                    "proof": pair.proof,
                }
                for pair in report.duplicates
            ],
            "standardizations": [_proposal_to_dict(proposal) for proposal in report.standardizations],
            "gaps": [
                {
                    "coordinate_key": gap.coordinate_key,
                    "latitude": gap.latitude,
                    "longitude": gap.longitude,
                    "proposed_address": gap.proposed_address,
                    "affected_count": gap.affected_count,
                    "record_ids": [record.id for record in gap.records],
                    "proposals": [_proposal_to_dict(proposal) for proposal in gap_fill_proposals(gap)],
                }
                for gap in report.gaps
            ],
            "branch_clusters": [
                {
                    "master": cluster.master,
                    "variations": cluster.variations,
                    "record_ids": [record.id for record in cluster.records],
                    "proposals": [_proposal_to_dict(proposal) for proposal in branch_cluster_proposals(cluster)],
                }
                for cluster in report.branch_clusters
            ],
        }
    )


@router.post("/analyze", response_model=CleaningReportResponse, status_code=status.HTTP_200_OK)
def analyze(payload: CleaningAnalyzeRequest) -> CleaningReportResponse:
    try:
        records = leads_from_rows(payload.records) if payload.records is not None else load_leads()
        return _report_to_response(analyze_records(records))
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error analyzing lead data: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to analyze lead data: {str(exc)}",
        ) from exc


@router.post("/apply", response_model=CleaningApplyResponse, status_code=status.HTTP_200_OK)
def apply(payload: CleaningApplyRequest) -> CleaningApplyResponse:
    records = leads_from_rows(payload.records)
    by_id = {record.id: record for record in records}

    proposals = [
        StandardizationProposal(
            id=item.id,
            field=item.field,
            old_value=item.old_value,
            new_value=item.new_value,
        )
        for item in payload.proposals
    ]
    session = ReviewSession(approved_keys=set(payload.approved_keys))

    pairs: list[DuplicatePair] = []
    for resolution in payload.resolutions:
        record_a = by_id.get(resolution.record_a_id)
        record_b = by_id.get(resolution.record_b_id)
        if record_a is None or record_b is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Unknown record in pair {resolution.record_a_id}/{resolution.record_b_id}",
            )
        pairs.append(DuplicatePair(record_a=record_a, record_b=record_b, conflict_type="", proof=""))
        session.resolve(len(pairs) - 1, resolution.resolution)

    plan = build_apply_plan(records, session.approved_proposals(proposals), session.resolved_pairs(pairs))

    try:
        store = get_lead_store()
    except RuntimeError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc

    report = execute_plan(plan, store)
    return CleaningApplyResponse.model_validate(
        {
            "succeeded": len(report.succeeded),
            "failed": len(report.failed),
            "outcomes": [
                {
                    "action": outcome.action,
                    "record_id": outcome.record_id,
                    "success": outcome.success,
                    "error": outcome.error,
                }
                for outcome in report.outcomes
            ],
        }
    )
