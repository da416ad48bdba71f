from types import SimpleNamespace

import pytest

from salesops.data import leads_repository
from salesops.data.leads_repository import lead_from_row, leads_from_rows, load_leads
from salesops.persistence.leads import SupabaseLeadStore
from salesops.services.cleaning.service import CleaningConfig, analyze_records


def _rows() -> list[dict]:
    return [
        {"id": 1, "name": "Al Noor Market", "lat": 24.7136, "lng": 46.6753, "region_description": "Riyadh-01"},
        {"id": 2, "name": "al noor market", "lat": 24.71362, "lng": 46.6753, "region_description": "Riyadh-02"},
        {"id": 3, "name": "Panda", "lat": 21.5, "lng": 39.2, "region_description": "jedda", "address": ""},
        {"id": 4, "name": "Tamimi", "lat": 26.4, "lng": 50.1, "region_description": "Dammam", "customer_address": "Corniche"},
    ]


class RecordingTable:
    def __init__(self, pages=None):
        self.pages = list(pages or [])
        self.calls = []

    def __getattr__(self, name):
        def method(*args, **kwargs):
            self.calls.append((name, args))
            return self

        return method

    def execute(self):
        data = self.pages.pop(0) if self.pages else []
        return SimpleNamespace(data=data)


class RecordingClient:
    def __init__(self, table):
        self._table = table

    def table(self, name):
        return self._table


def test_lead_from_row_reads_named_fields():
    record = lead_from_row({"id": 7, "name": None, "lat": "24.5", "lng": None, "address": " Olaya "})

    assert record.id == "7"
    assert record.name == ""
    assert record.latitude == pytest.approx(24.5)
    assert record.longitude is None
    assert record.branch is None
    assert record.address == "Olaya"


def test_rows_without_id_are_skipped():
    records = leads_from_rows([{"id": 1, "name": "A"}, {"name": "no id"}, {"id": "", "name": "blank"}])

    assert [r.id for r in records] == ["1"]


def test_analyze_records_report():
    records = leads_from_rows(_rows())
    progress = []

    report = analyze_records(records, on_progress=progress.append)

    assert report.total_scanned == 4
    assert [(p.record_a.id, p.record_b.id) for p in report.duplicates] == [("1", "2")]
    assert report.duplicates_found == 2
    assert [(p.id, p.new_value) for p in report.standardizations] == [("3", "Jeddah")]
    assert report.normalized == 1
    assert [g.coordinate_key for g in report.gaps] == [
        "24.713600,46.675300",
        "24.713620,46.675300",
        "21.500000,39.200000",
    ]
    assert [c.master for c in report.branch_clusters] == ["Riyadh"]
    assert progress[0] == 0 and progress[-1] == 100


def test_analyze_records_with_custom_config():
    records = leads_from_rows(_rows())
    config = CleaningConfig(proximity_degrees=0.00001, region_aliases={})

    report = analyze_records(records, config=config)

    assert report.duplicates == []
    assert report.standardizations == []


def test_analyze_empty_snapshot():
    report = analyze_records([])

    assert report.total_scanned == 0
    assert report.duplicates == report.gaps == report.branch_clusters == []


def test_load_leads_pages_through_table(monkeypatch):
    first_page = [{"id": i, "name": f"Lead {i}"} for i in range(leads_repository.PAGE_SIZE)]
    table = RecordingTable(pages=[first_page, [{"id": "last", "name": "Last"}]])
    monkeypatch.setattr(leads_repository, "get_supabase_client", lambda: RecordingClient(table))

    records = load_leads()

    assert len(records) == leads_repository.PAGE_SIZE + 1
    ranges = [args for name, args in table.calls if name == "range"]
    assert ranges == [(0, 999), (1000, 1999)]


def test_load_leads_without_database(monkeypatch):
    monkeypatch.setattr(leads_repository, "get_supabase_client", lambda: None)

    assert load_leads() == []


def test_lead_store_batches_upserts_and_deletes_by_id():
    table = RecordingTable()
    store = SupabaseLeadStore(RecordingClient(table), table="leads")
    store.batch_size = 2

    store.upsert([{"id": "1"}, {"id": "2"}, {"id": "3"}])
    store.delete("9")

    assert [args for name, args in table.calls if name == "upsert"] == [
        ([{"id": "1"}, {"id": "2"}],),
        ([{"id": "3"}],),
    ]
    assert ("eq", ("id", "9")) in table.calls
