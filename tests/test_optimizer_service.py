import math
from dataclasses import asdict

import pytest

from salesops.data.visits_repository import VisitFilters
from salesops.models.domain import Visit
from salesops.services.optimizer import service
from salesops.services.optimizer.service import analyze_visits, fetch_optimization_suggestions

KM_PER_DEGREE = 6371.0 * math.pi / 180


def _visit(code: str, lat: float = 24.0, rep: str = "R1", day: str = "SUN", branch: str | None = "RYD") -> Visit:
    return Visit(
        client_code=code,
        customer_name_en=f"Customer {code}",
        customer_name_ar="",
        latitude=lat,
        longitude=46.0,
        rep_code=rep,
        day_name=day,
        week_number="1",
        route_name=f"{rep}-{day}",
        branch_code=branch,
    )


def _snapshot() -> list[Visit]:
    far = 24.0 + 50.0 / KM_PER_DEGREE
    return [
        _visit("C1"),
        _visit("P1", far),
        _visit("P2", far),
        _visit("P3", far),
        *[_visit(f"B{i}", rep="R2") for i in range(1, 6)],
    ]


def test_analyze_visits_end_to_end():
    result = analyze_visits(_snapshot())

    assert result.success
    assert len(result.suggestions) == 1
    assert result.suggestions[0].client_code == "C1"
    assert result.total_savings.distance_km == 50.0
    assert result.total_savings.time_hours == pytest.approx(0.9)
    assert result.total_savings.optimizations == 1
    assert result.routes == ["R1-SUN", "R2-SUN"]
    assert result.debug == {"total_visits": 9, "total_routes": 2, "distinct_clients": 1}


def test_analyze_visits_drops_rows_without_branch():
    visits = _snapshot() + [_visit("X1", rep="R3", branch=None)]

    result = analyze_visits(visits)

    assert result.debug["total_routes"] == 2


def test_analyze_empty_snapshot():
    result = analyze_visits([])

    assert result.success
    assert result.suggestions == []
    assert result.total_savings.optimizations == 0
    assert "message" in result.debug


def test_analysis_is_stateless():
    visits = _snapshot()

    assert asdict(analyze_visits(visits)) == asdict(analyze_visits(visits))


def test_fetch_failure_yields_unsuccessful_empty_result(monkeypatch):
    def broken_fetch(company_id, filters, allowed_branches):
        raise RuntimeError("connection refused")

    monkeypatch.setattr(service, "fetch_visits", broken_fetch)

    result = fetch_optimization_suggestions("acme")

    assert result.success is False
    assert result.suggestions == []
    assert result.total_savings.distance_km == 0.0
    assert result.debug == {"error": "connection refused"}


def test_fetch_passes_filters_through(monkeypatch):
    calls = []

    def fake_fetch(company_id, filters, allowed_branches):
        calls.append((company_id, filters, allowed_branches))
        return _snapshot()

    monkeypatch.setattr(service, "fetch_visits", fake_fetch)
    filters = VisitFilters(branch_code="RYD", week="1", routes=["R1-SUN"])

    result = fetch_optimization_suggestions("acme", filters, ["RYD"])

    assert result.success
    assert calls == [("acme", filters, ["RYD"])]
