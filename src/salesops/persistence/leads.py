"""Customer/lead store persistence."""

from __future__ import annotations

import logging
from typing import Any, Protocol, Sequence

from ..config import settings
from ..db.supabase import get_supabase_client


class LeadStore(Protocol):
    def upsert(self, records: Sequence[dict]) -> None:
        ...

    def delete(self, record_id: str) -> None:
        ...

    def delete_all(self) -> None:
        ...


class SupabaseLeadStore:
    """Lead table access; upserts merge partial rows by primary key."""

    batch_size = 100

    def __init__(self, client: Any, table: str | None = None) -> None:
        self.client = client
        self.table = table or settings.leads_table

    def upsert(self, records: Sequence[dict]) -> None:
        for i in range(0, len(records), self.batch_size):
            batch = list(records[i:i + self.batch_size])
            self.client.table(self.table).upsert(batch).execute()

    def delete(self, record_id: str) -> None:
        self.client.table(self.table).delete().eq("id", record_id).execute()

    def delete_all(self) -> None:
        # PostgREST may cap deletes, so remove ids page by page
        page_size = 1000
        total_deleted = 0
        while True:
            response = self.client.table(self.table).select("id").limit(page_size).execute()
            if not response.data:
                break
            ids = [row["id"] for row in response.data]
            self.client.table(self.table).delete().in_("id", ids).execute()
            total_deleted += len(ids)
            if len(response.data) < page_size:
                break
        logging.info(f"Cleared {total_deleted} rows from {self.table}")


def get_lead_store() -> SupabaseLeadStore:
    supabase = get_supabase_client()
    if not supabase:
        raise RuntimeError("Supabase not configured. Set SALESOPS_SUPABASE_URL and SALESOPS_SUPABASE_KEY.")
    return SupabaseLeadStore(supabase)
