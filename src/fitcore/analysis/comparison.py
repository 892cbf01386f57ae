"""
Performance comparison across repeated completions of the same saved route.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from fitcore.analysis.geo import pace_to_seconds

logger = logging.getLogger(__name__)

RECENT_COMPLETIONS_SHOWN = 5


@dataclass
class RouteCompletion:
    """One finished attempt at a saved route."""
    completed_at: datetime
    completion_time_s: float
    average_pace: Optional[str] = None  # "m:ss" per km


@dataclass
class RouteComparison:
    total_attempts: int
    best_time: Optional[float]         # seconds
    worst_time: Optional[float]        # seconds
    average_time: Optional[float]      # seconds
    best_pace: Optional[str]
    improvement_pct: Optional[float]   # positive = newest attempt faster than oldest
    recent_completions: List[RouteCompletion] = field(default_factory=list)


def parse_interval(interval: str) -> float:
    """
    Parse a stored duration into seconds.

    Accepts "3600 seconds" and "01:23:45". Anything else yields 0.0.
    """
    try:
        if "seconds" in interval:
            return float(interval.replace("seconds", "").strip())

        parts = interval.split(":")
        if len(parts) == 3:
            hours, minutes, seconds = (float(p) for p in parts)
            return hours * 3600 + minutes * 60 + seconds
    except ValueError:
        logger.warning("Unparseable interval %r", interval)

    return 0.0


def compare_route_performance(completions: List[RouteCompletion]) -> RouteComparison:
    """
    Summarize every attempt at one route.

    Args:
        completions: attempts ordered newest first

    Returns:
        RouteComparison. With no attempts every statistic is None.
    """
    if not completions:
        return RouteComparison(
            total_attempts=0,
            best_time=None,
            worst_time=None,
            average_time=None,
            best_pace=None,
            improvement_pct=None,
        )

    times = [c.completion_time_s for c in completions]
    paces = [c.average_pace for c in completions if c.average_pace is not None]

    best_pace: Optional[str] = None
    for pace in paces:
        if best_pace is None or pace_to_seconds(pace) < pace_to_seconds(best_pace):
            best_pace = pace

    # Newest is first, oldest is last
    newest, oldest = times[0], times[-1]
    if len(times) > 1 and oldest > 0:
        improvement = round((oldest - newest) / oldest * 100, 1)
    else:
        improvement = 0.0

    return RouteComparison(
        total_attempts=len(completions),
        best_time=min(times),
        worst_time=max(times),
        average_time=sum(times) / len(times),
        best_pace=best_pace,
        improvement_pct=improvement,
        recent_completions=completions[:RECENT_COMPLETIONS_SHOWN],
    )
