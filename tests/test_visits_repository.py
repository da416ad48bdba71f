import csv
from pathlib import Path
from types import SimpleNamespace

import pytest
from openpyxl import Workbook

from salesops.config import settings
from salesops.data import visits_repository
from salesops.data.visits_repository import (
    VISIT_COLUMNS,
    VisitFilters,
    fetch_branch_and_route_options,
    fetch_visits,
    load_visits_from_file,
    visit_from_row,
)


def _row(code: str, **overrides) -> dict:
    row = {
        "client_code": code,
        "customer_name_en": f"Customer {code}",
        "customer_name_ar": "",
        "rep_code": "R1",
        "day_name": "SUN",
        "week_number": "1",
        "route_name": "R1-SUN",
        "district": "Olaya",
        "classification": "A",
        "store_type": "Grocery",
        "branch_code": "RYD",
        "lat": "24.7",
        "lng": "46.7",
        "visit_order": "1",
    }
    row.update(overrides)
    return row


def _write_csv(path: Path, rows: list[dict]) -> Path:
    fieldnames = list(VISIT_COLUMNS) + ["segment"]
    with path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.DictWriter(handle, fieldnames=fieldnames)
        writer.writeheader()
        for row in rows:
            writer.writerow({"segment": "retail", **row})
    return path


class FakeQuery:
    def __init__(self, rows):
        self.rows = rows
        self.calls = []

    def __getattr__(self, name):
        def method(*args, **kwargs):
            self.calls.append((name, args))
            return self

        return method

    @property
    def not_(self):
        return self

    def execute(self):
        return SimpleNamespace(data=self.rows)


class FakeClient:
    def __init__(self, rows):
        self.query = FakeQuery(rows)
        self.tables = []

    def table(self, name):
        self.tables.append(name)
        return self.query


def test_visit_from_row_coerces_values():
    visit = visit_from_row(_row("C1", week_number=2.0, lat="bad", visit_order="", segment="retail"))

    assert visit.week_number == "2"
    assert visit.latitude is None
    assert visit.longitude == pytest.approx(46.7)
    assert visit.visit_order is None
    assert visit.extra == {"segment": "retail"}


def test_non_finite_visit_order_is_dropped():
    assert visit_from_row(_row("C1", visit_order="inf")).visit_order is None
    assert visit_from_row(_row("C1", visit_order="nan")).visit_order is None
    assert visit_from_row(_row("C1", visit_order="4.0")).visit_order == 4


def test_visit_filters_treat_all_sentinels_as_unset():
    filters = VisitFilters(branch_code="All Branches", week="All Weeks")

    assert filters.effective_branch is None
    assert filters.effective_week is None
    assert VisitFilters(branch_code="RYD", week="2").effective_week == "2"


def test_load_visits_from_file_applies_filters(tmp_path):
    path = _write_csv(
        tmp_path / "visits.csv",
        [
            _row("C1"),
            _row("C2", branch_code="JED"),
            _row("C3", week_number="2"),
            _row("C4", route_name="R9-SUN"),
        ],
    )

    visits = load_visits_from_file(path, VisitFilters(branch_code="RYD", week="1", routes=["R1-SUN"]))

    assert [v.client_code for v in visits] == ["C1"]


def test_load_visits_from_file_respects_allowed_branches(tmp_path):
    path = _write_csv(tmp_path / "visits.csv", [_row("C1"), _row("C2", branch_code="JED")])

    visits = load_visits_from_file(path, allowed_branches=["JED"])

    assert [v.client_code for v in visits] == ["C2"]


def test_load_visits_from_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_visits_from_file(tmp_path / "missing.csv")


def test_fetch_visits_falls_back_to_file(tmp_path, monkeypatch):
    path = _write_csv(
        tmp_path / "visits.csv",
        [_row("C1"), _row("C2", lat="0"), _row("C3", rep_code=""), _row("C4", branch_code="")],
    )
    monkeypatch.setattr(visits_repository, "get_supabase_client", lambda: None)
    monkeypatch.setattr(settings, "visits_file", path)

    visits = fetch_visits("acme")

    assert [v.client_code for v in visits] == ["C1"]


def test_fetch_visits_queries_database(monkeypatch):
    client = FakeClient([_row("C1"), _row("C2", day_name=None)])
    monkeypatch.setattr(visits_repository, "get_supabase_client", lambda: client)

    visits = fetch_visits("acme", VisitFilters(branch_code="RYD", week="1", routes=["R1-SUN"]), ["RYD"])

    assert [v.client_code for v in visits] == ["C1"]
    assert client.tables == [settings.visits_table]
    calls = client.query.calls
    assert ("eq", ("company_id", "acme")) in calls
    assert ("eq", ("branch_code", "RYD")) in calls
    assert ("eq", ("week_number", "1")) in calls
    assert ("in_", ("branch_code", ["RYD"])) in calls
    assert ("in_", ("route_name", ["R1-SUN"])) in calls


def test_fetch_visits_propagates_query_errors(monkeypatch):
    class BrokenClient:
        def table(self, name):
            raise RuntimeError("timeout")

    monkeypatch.setattr(visits_repository, "get_supabase_client", lambda: BrokenClient())

    with pytest.raises(RuntimeError):
        fetch_visits("acme")


def test_filter_options_without_database(monkeypatch):
    monkeypatch.setattr(visits_repository, "get_supabase_client", lambda: None)

    assert fetch_branch_and_route_options("acme") == {"branches": [], "routes": [], "route_details": []}


def test_filter_options_from_database(monkeypatch):
    class OptionsClient:
        def table(self, name):
            if name == settings.branches_table:
                return FakeQuery([{"id": 1, "code": "RYD", "name_en": "Riyadh"}])
            return FakeQuery(
                [
                    {"name": "R2-SUN", "branch": {"code": "RYD", "name_en": "Riyadh"}},
                    {"name": "R1-SUN", "branch": None},
                ]
            )

    monkeypatch.setattr(visits_repository, "get_supabase_client", lambda: OptionsClient())

    options = fetch_branch_and_route_options("acme", ["Riyadh"])

    assert options["branches"] == [{"code": "RYD", "name": "Riyadh"}]
    assert options["routes"] == ["R1-SUN", "R2-SUN"]
    assert options["route_details"] == [
        {"name": "R2-SUN", "branch": "Riyadh"},
        {"name": "R1-SUN", "branch": "Unassigned"},
    ]


def test_load_visits_from_workbook(tmp_path):
    workbook = Workbook()
    sheet = workbook.active
    sheet.append(list(VISIT_COLUMNS))
    for code, branch in (("C1", "RYD"), ("C2", "JED"), ("C3", "RYD")):
        row = _row(code, branch_code=branch, week_number=1, lat=24.7, lng=46.7, visit_order=2)
        sheet.append([row[column] for column in VISIT_COLUMNS])
    path = tmp_path / "visits.xlsx"
    workbook.save(path)

    visits = load_visits_from_file(path, VisitFilters(branch_code="RYD", week="1"))

    assert [v.client_code for v in visits] == ["C1", "C3"]
    assert visits[0].week_number == "1"
    assert visits[0].latitude == pytest.approx(24.7)
    assert visits[0].visit_order == 2


def test_empty_workbook_is_rejected(tmp_path):
    path = tmp_path / "empty.xlsx"
    Workbook().save(path)

    with pytest.raises(ValueError):
        load_visits_from_file(path)
