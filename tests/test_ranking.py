import pytest

from salesops.services.optimizer.models import SwapCandidate
from salesops.services.optimizer.ranking import best_per_client, rank_candidates, summarize


def _candidate(
    candidate_id: str,
    client_code: str,
    impact: int,
    swap_type: str = "USER_SWAP",
    distance: float = 10.0,
    minutes: int = 12,
) -> SwapCandidate:
    return SwapCandidate(
        id=candidate_id,
        type=swap_type,
        client_code=client_code,
        client_name=f"Customer {client_code}",
        client_arabic="",
        district="",
        classification="N/A",
        store_type="N/A",
        from_user="R1",
        from_day="SUN",
        from_week="1",
        from_route="R1-SUN",
        to_user="R2" if swap_type == "USER_SWAP" else "R1",
        to_day="SUN" if swap_type == "USER_SWAP" else "MON",
        to_week="1",
        to_route="R2-SUN",
        distance_saved=distance,
        time_saved=minutes,
        impact_score=impact,
        confidence=80,
        reason="",
        latitude=24.7,
        longitude=46.7,
        current_route_avg_dist=20.0,
        new_route_avg_dist=20.0 - distance,
    )


def test_best_candidate_per_client_wins():
    candidates = [
        _candidate("opt_1", "C1", 60, swap_type="DAY_SWAP"),
        _candidate("opt_2", "C1", 80, swap_type="USER_SWAP"),
    ]

    result = best_per_client(candidates)

    assert len(result) == 1
    assert result[0].type == "USER_SWAP"
    assert result[0].impact_score == 80


def test_ties_keep_search_order():
    candidates = [
        _candidate("opt_1", "C1", 70),
        _candidate("opt_2", "C2", 70),
        _candidate("opt_3", "C1", 70, swap_type="DAY_SWAP"),
    ]

    assert [c.id for c in best_per_client(candidates)] == ["opt_1", "opt_2"]


def test_ranking_sorts_by_impact_descending():
    candidates = [
        _candidate("opt_1", "C1", 20),
        _candidate("opt_2", "C2", 90),
        _candidate("opt_3", "C3", 55),
    ]

    ranked = rank_candidates(candidates)

    assert [c.client_code for c in ranked.suggestions] == ["C2", "C3", "C1"]


@pytest.mark.parametrize("clients,expected", [(30, 30), (60, 50)])
def test_output_is_capped(clients, expected):
    candidates = [_candidate(f"opt_{i}", f"C{i}", i % 100) for i in range(clients)]

    ranked = rank_candidates(candidates, limit=50)

    assert len(ranked.suggestions) == expected
    assert ranked.distinct_clients == clients
    assert len({c.client_code for c in ranked.suggestions}) == expected


def test_stats_cover_surviving_candidates_only():
    candidates = [
        _candidate("opt_1", "C1", 90, distance=12.3, minutes=30),
        _candidate("opt_2", "C2", 80, distance=7.4, minutes=45),
        _candidate("opt_3", "C1", 10, distance=100.0, minutes=500),
    ]

    ranked = rank_candidates(candidates)

    assert ranked.stats.optimizations == 2
    assert ranked.stats.distance_km == pytest.approx(19.7)
    assert ranked.stats.time_hours == pytest.approx(1.3)


def test_summarize_empty():
    stats = summarize([])

    assert stats.distance_km == 0.0
    assert stats.time_hours == 0.0
    assert stats.optimizations == 0


def test_negative_limit_is_rejected():
    with pytest.raises(ValueError):
        rank_candidates([], limit=-1)
