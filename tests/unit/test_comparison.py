"""Tests for saved-route performance comparison."""
from datetime import datetime, timedelta

import pytest

from fitcore.analysis.comparison import (
    RouteCompletion,
    compare_route_performance,
    parse_interval,
)


def completions(*times, paces=None):
    """Completions ordered newest first, one day apart."""
    newest = datetime(2025, 6, 1, 7, 0)
    paces = paces or [None] * len(times)
    return [
        RouteCompletion(
            completed_at=newest - timedelta(days=i),
            completion_time_s=t,
            average_pace=p,
        )
        for i, (t, p) in enumerate(zip(times, paces))
    ]


class TestParseInterval:
    @pytest.mark.parametrize("value,expected", [
        ("3600 seconds", 3600.0),
        ("95.5 seconds", 95.5),
        ("01:23:45", 5025.0),
        ("00:00:00", 0.0),
        ("garbage", 0.0),
        ("12:30", 0.0),
    ])
    def test_formats(self, value, expected):
        assert parse_interval(value) == expected

    @pytest.mark.parametrize("value", ["abc seconds", "1:x:3"])
    def test_malformed_numbers_yield_zero(self, value, caplog):
        assert parse_interval(value) == 0.0
        assert "Unparseable interval" in caplog.text


class TestCompareRoutePerformance:
    def test_no_attempts(self):
        result = compare_route_performance([])
        assert result.total_attempts == 0
        assert result.best_time is None
        assert result.worst_time is None
        assert result.average_time is None
        assert result.best_pace is None
        assert result.improvement_pct is None
        assert result.recent_completions == []

    def test_single_attempt_has_no_improvement(self):
        result = compare_route_performance(completions(1500))
        assert result.total_attempts == 1
        assert result.best_time == result.worst_time == 1500
        assert result.improvement_pct == 0.0

    def test_improvement_newest_vs_oldest(self):
        result = compare_route_performance(completions(1500, 1600, 1800))
        assert result.best_time == 1500
        assert result.worst_time == 1800
        assert result.average_time == pytest.approx(1633.33, abs=0.01)
        assert result.improvement_pct == 16.7

    def test_slower_newest_is_negative(self):
        result = compare_route_performance(completions(1800, 1500))
        assert result.improvement_pct == -20.0

    def test_best_pace_ignores_missing(self):
        result = compare_route_performance(
            completions(1500, 1600, 1700, paces=[None, "4:55", "5:10"])
        )
        assert result.best_pace == "4:55"

    def test_recent_completions_capped_at_five(self):
        attempts = completions(*range(1000, 1800, 100))
        result = compare_route_performance(attempts)
        assert result.total_attempts == 8
        assert result.recent_completions == attempts[:5]
