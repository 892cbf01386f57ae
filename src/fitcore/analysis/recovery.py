"""
Daily recovery scoring and rest-day suggestions.

The score starts at 50 and moves with six factors:

  sleep              +5 per hour              (max +40)
  soreness           -5 per level             (max -50)
  energy             +3 per level             (max +30)
  workouts this week -3 per workout beyond 4  (max -15)
  days since rest    -5 per day beyond 2      (max -25)
  recent intensity   -0.01 per avg calorie    (max -20)

and is rounded and clamped to 0-100.

Two decision tables sit on top of the score and are intentionally separate:
generate_recommendation() turns a score into advice text, suggest_rest_day()
decides whether to schedule rest from trailing history. They use different
inputs and different precedence.

Also provides pure helpers that derive the factor values from in-memory
workout and rest-day logs.

Only None counts as missing. A logged 0 for sleep, soreness or energy is
scored as 0, not replaced by the default.
"""
import math
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from typing import List, Optional, Sequence

# Assumed when no daily log exists. These change the score materially
# compared to treating missing data as zero.
DEFAULT_SLEEP_HOURS = 7.0
DEFAULT_SORENESS_LEVEL = 5.0
DEFAULT_ENERGY_LEVEL = 5.0

BASE_SCORE = 50
MIN_SCORE = 0
MAX_SCORE = 100

LOW_RECOVERY_THRESHOLD = 40
NO_REST_RECORDED_DAYS = 999
RECENT_WINDOW_DAYS = 7

RECOMMEND_INTENSE = "Great recovery! You're ready for intense workout today."
RECOMMEND_MODERATE = "Good recovery. A moderate workout is ok today."
RECOMMEND_ACTIVE_RECOVERY_SORENESS = (
    "High soreness detected. Consider an active recovery day with light stretching or yoga."
)
RECOMMEND_OVERDUE_REST = "You haven't rested in a while. Consider taking a full rest day."
RECOMMEND_LOW_SLEEP = "Low sleep detected. Prioritize rest and recovery today."
RECOMMEND_LIGHT = "Moderate recovery. Consider a light workout or active recovery."
RECOMMEND_REST_STREAK = (
    "Your body needs rest! You've been working out for 7+ consecutive days. "
    "Take a complete rest day."
)
RECOMMEND_REST_SORENESS = (
    "Very high soreness level. Take a complete rest day and focus on recovery."
)
RECOMMEND_REST_SLEEP = "Severe sleep deficit. Your body needs rest to recover properly."
RECOMMEND_REST = (
    "Low recovery score. Your body needs rest. Consider taking a complete rest day."
)


@dataclass
class RecoveryFactors:
    """
    Inputs to the recovery score.

    sleep, soreness and energy come from the athlete's daily log and may be
    missing (None); the DEFAULT_* constants are substituted when scoring.
    """
    sleep: Optional[float] = None       # hours
    soreness: Optional[float] = None    # 0-10
    energy: Optional[float] = None      # 0-10
    workouts_this_week: int = 0
    days_since_rest: int = 0
    recent_intensity: float = 0.0       # average calories per workout, last 7 days


@dataclass
class RecoveryScore:
    score: int                  # 0-100
    factors: RecoveryFactors    # with defaults applied
    recommendation: str


@dataclass
class RestSuggestion:
    should_rest: bool
    reason: str
    severity: str  # "low" | "medium" | "high"


@dataclass
class RestDayLog:
    """A logged rest day, optionally with that morning's self-assessment."""
    date: date
    recovery_type: Optional[str] = None  # "active" | "passive" | "complete"
    notes: Optional[str] = None
    sleep_hours: Optional[float] = None
    soreness_level: Optional[float] = None
    energy_level: Optional[float] = None


@dataclass
class WorkoutLog:
    completed_at: datetime
    calories_burned: Optional[float] = None


# ─── Scoring ──────────────────────────────────────────────────────────────────

def _resolve_defaults(factors: RecoveryFactors) -> RecoveryFactors:
    return replace(
        factors,
        sleep=DEFAULT_SLEEP_HOURS if factors.sleep is None else factors.sleep,
        soreness=DEFAULT_SORENESS_LEVEL if factors.soreness is None else factors.soreness,
        energy=DEFAULT_ENERGY_LEVEL if factors.energy is None else factors.energy,
    )


def _clamp(value: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, value))


def _round_half_up(x: float) -> int:
    # Halves round up (72.5 → 73, -0.5 → 0); round() would round to even
    return math.floor(x + 0.5)


def raw_recovery_score(factors: RecoveryFactors) -> float:
    """
    The unrounded, unclamped score. May fall outside 0-100.

    Missing sleep/soreness/energy are replaced with the DEFAULT_* constants.
    """
    f = _resolve_defaults(factors)

    score = float(BASE_SCORE)
    score += min(f.sleep * 5, 40)
    score -= min(f.soreness * 5, 50)
    score += min(f.energy * 3, 30)

    if f.workouts_this_week > 4:
        score -= min((f.workouts_this_week - 4) * 3, 15)

    if f.days_since_rest > 2:
        score -= min((f.days_since_rest - 2) * 5, 25)

    score -= min(f.recent_intensity * 0.01, 20)
    return score


def calculate_recovery_score(factors: RecoveryFactors) -> RecoveryScore:
    """
    Score today's recovery on a 0-100 scale and attach a recommendation.

    The returned factors have the defaults filled in and recent_intensity
    rounded to whole calories; the score itself uses the unrounded value.
    """
    score = _clamp(_round_half_up(raw_recovery_score(factors)), MIN_SCORE, MAX_SCORE)

    resolved = _resolve_defaults(factors)
    resolved = replace(resolved, recent_intensity=_round_half_up(resolved.recent_intensity))

    return RecoveryScore(
        score=score,
        factors=resolved,
        recommendation=generate_recommendation(score, resolved),
    )


def generate_recommendation(score: int, factors: RecoveryFactors) -> str:
    """
    Advice text for a recovery score. First matching row wins.

      score >= 80  → intense workout
      score >= 60  → moderate workout
      score >= 40  → soreness > 6, days_since_rest > 5, sleep < 6, else light
      score <  40  → days_since_rest >= 7, soreness >= 8, sleep < 5, else rest
    """
    f = _resolve_defaults(factors)

    if score >= 80:
        return RECOMMEND_INTENSE
    if score >= 60:
        return RECOMMEND_MODERATE
    if score >= 40:
        if f.soreness > 6:
            return RECOMMEND_ACTIVE_RECOVERY_SORENESS
        if f.days_since_rest > 5:
            return RECOMMEND_OVERDUE_REST
        if f.sleep < 6:
            return RECOMMEND_LOW_SLEEP
        return RECOMMEND_LIGHT

    if f.days_since_rest >= 7:
        return RECOMMEND_REST_STREAK
    if f.soreness >= 8:
        return RECOMMEND_REST_SORENESS
    if f.sleep < 5:
        return RECOMMEND_REST_SLEEP
    return RECOMMEND_REST


# ─── Rest-day suggestion ──────────────────────────────────────────────────────

def count_low_recovery_days(
    recent_scores: Sequence[int],
    threshold: int = LOW_RECOVERY_THRESHOLD,
) -> int:
    return sum(1 for s in recent_scores if s < threshold)


def suggest_rest_day(
    recent_scores: Sequence[int],
    days_since_rest: int,
    soreness_level: float,
    rest_days_in_last_14: int,
    recovery_score: int,
) -> RestSuggestion:
    """
    Decide whether the athlete should take a rest day.

    Independent of generate_recommendation(). Rules are checked in order and
    the first match wins:

      1. days_since_rest >= 7                         → rest, high
      2. 2+ of the trailing 14 days' scores below 40  → rest, high
      3. soreness >= 8                                → rest, medium
      4. no rest day in the trailing 14 days          → rest, medium
      5. days_since_rest >= 5 and today's score < 60  → rest, low
      6. otherwise                                    → no rest, low

    Args:
        recent_scores: recovery scores from the trailing 14 days
        days_since_rest: consecutive days since the last rest day
        soreness_level: today's soreness, 0-10
        rest_days_in_last_14: number of logged rest days in the trailing 14 days
        recovery_score: today's score
    """
    if days_since_rest >= 7:
        return RestSuggestion(
            should_rest=True,
            reason=(
                f"You've worked out for {days_since_rest} consecutive days. "
                "Your body needs recovery time."
            ),
            severity="high",
        )

    low_days = count_low_recovery_days(recent_scores)
    if low_days >= 2:
        return RestSuggestion(
            should_rest=True,
            reason=(
                f"Your recovery score has been below {LOW_RECOVERY_THRESHOLD} "
                f"for {low_days} days. Time to prioritize rest."
            ),
            severity="high",
        )

    if soreness_level >= 8:
        return RestSuggestion(
            should_rest=True,
            reason="High soreness level detected. Your muscles need time to recover.",
            severity="medium",
        )

    if rest_days_in_last_14 == 0:
        return RestSuggestion(
            should_rest=True,
            reason="You haven't taken any rest days in the past 2 weeks. Consider scheduling one.",
            severity="medium",
        )

    if days_since_rest >= 5 and recovery_score < 60:
        return RestSuggestion(
            should_rest=True,
            reason=(
                f"{days_since_rest} days without rest and low recovery score. "
                "Consider an active recovery day."
            ),
            severity="low",
        )

    return RestSuggestion(
        should_rest=False,
        reason="You're recovering well. Keep up the good work!",
        severity="low",
    )


# ─── Factor aggregation from logs ─────────────────────────────────────────────

def _in_window(ts: datetime, as_of: datetime, days: int) -> bool:
    return as_of - timedelta(days=days) <= ts <= as_of


def count_recent_workouts(
    workouts: List[WorkoutLog],
    as_of: datetime,
    days: int = RECENT_WINDOW_DAYS,
) -> int:
    """Number of workouts completed in the `days` before as_of (inclusive)."""
    return sum(1 for w in workouts if _in_window(w.completed_at, as_of, days))


def average_recent_intensity(
    workouts: List[WorkoutLog],
    as_of: datetime,
    days: int = RECENT_WINDOW_DAYS,
) -> float:
    """
    Mean calories per workout over the trailing window.
    Workouts without a calorie figure count as 0. Returns 0.0 with no workouts.
    """
    recent = [w for w in workouts if _in_window(w.completed_at, as_of, days)]
    if not recent:
        return 0.0
    return sum(w.calories_burned or 0.0 for w in recent) / len(recent)


def days_since_last_rest(rest_dates: List[date], as_of: date) -> int:
    """
    Whole days between the latest rest day strictly before as_of and as_of.

    Returns NO_REST_RECORDED_DAYS (999) when there is no earlier rest day.
    """
    earlier = [d for d in rest_dates if d < as_of]
    if not earlier:
        return NO_REST_RECORDED_DAYS
    return (as_of - max(earlier)).days


def build_recovery_factors(
    workouts: List[WorkoutLog],
    rest_days: List[RestDayLog],
    as_of: datetime,
) -> RecoveryFactors:
    """
    Assemble today's RecoveryFactors from workout and rest-day history.

    Sleep, soreness and energy come from the rest-day log dated today, if
    any; otherwise they stay None and the scorer's defaults apply.
    """
    today = as_of.date()
    todays_log = next((r for r in rest_days if r.date == today), None)

    return RecoveryFactors(
        sleep=todays_log.sleep_hours if todays_log else None,
        soreness=todays_log.soreness_level if todays_log else None,
        energy=todays_log.energy_level if todays_log else None,
        workouts_this_week=count_recent_workouts(workouts, as_of),
        days_since_rest=days_since_last_rest([r.date for r in rest_days], today),
        recent_intensity=average_recent_intensity(workouts, as_of),
    )
