"""Loading customer/lead rows for the cleaning engine."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from ..config import settings
from ..db.supabase import get_supabase_client
from ..models.domain import LeadRecord
from .visits_repository import _coerce_float

BRANCH_FIELD = "region_description"
ADDRESS_FIELDS = ("customer_address", "address")
PAGE_SIZE = 1000


def _first_text(row: Mapping[str, Any], *keys: str) -> str | None:
    for key in keys:
        value = row.get(key)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            return text
    return None


def lead_from_row(row: Mapping[str, Any]) -> LeadRecord:
    record_id = row.get("id")
    if record_id is None or str(record_id).strip() == "":
        raise ValueError("Lead row is missing an 'id'")
    branch = row.get(BRANCH_FIELD)
    return LeadRecord(
        id=str(record_id),
        name=str(row.get("name") or ""),
        latitude=_coerce_float(row.get("lat")),
        longitude=_coerce_float(row.get("lng")),
        branch=str(branch) if branch is not None else None,
        address=_first_text(row, *ADDRESS_FIELDS),
        raw=dict(row),
    )


def leads_from_rows(rows: Iterable[Mapping[str, Any]]) -> list[LeadRecord]:
    """Convert rows, skipping any without an id."""
    records: list[LeadRecord] = []
    for row in rows:
        try:
            records.append(lead_from_row(row))
        except ValueError as e:
            logging.warning(f"Skipping lead row: {e}")
    return records


def load_leads() -> list[LeadRecord]:
    """Read the full lead table page by page. Returns [] when Supabase is not configured."""
    supabase = get_supabase_client()
    if not supabase:
        return []

    rows: list[dict] = []
    start = 0
    while True:
        response = (
            supabase.table(settings.leads_table)
            .select("*")
            .range(start, start + PAGE_SIZE - 1)
            .execute()
        )
        batch = response.data or []
        rows.extend(batch)
        if len(batch) < PAGE_SIZE:
            break
        start += PAGE_SIZE

    logging.info(f"Loaded {len(rows)} lead rows for cleaning")
    return leads_from_rows(rows)
