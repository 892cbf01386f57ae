"""
Command-line entrypoint.

Usage:
    python -m fitcore analyze activity.fit [--weight 72] [--activity running]
    python -m fitcore recovery --sleep 6.5 --soreness 4 --energy 7 \\
        --workouts 5 --days-since-rest 3 --intensity 450
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from fitcore.config import get_settings

logging.basicConfig(
    level=getattr(logging, get_settings().log_level.upper(), logging.INFO),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)
logger = logging.getLogger(__name__)


def _run_analyze(args: argparse.Namespace) -> int:
    from fitcore.analysis.geo import format_distance, format_duration
    from fitcore.analysis.route import (
        analyze_route,
        calculate_moving_time,
        detect_pauses,
        get_fastest_split,
    )
    from fitcore.garmin.fit_parser import FitParseError, parse_fit_file

    settings = get_settings()

    try:
        samples = parse_fit_file(Path(args.path))
    except FitParseError as exc:
        logger.error("%s", exc)
        return 1

    logger.info("Loaded %d samples from %s", len(samples), args.path)

    stats = analyze_route(
        samples,
        samples[0].timestamp,
        samples[-1].timestamp,
        user_weight=args.weight if args.weight is not None else settings.user_weight_kg,
        activity_type=args.activity or settings.activity_type,
        split_distance=args.split_distance or settings.split_distance_m,
    )
    moving = calculate_moving_time(samples, settings.min_moving_speed_ms)
    pauses = detect_pauses(samples, settings.min_moving_speed_ms)

    print(f"Distance:    {format_distance(stats.total_distance)}")
    print(f"Time:        {format_duration(stats.total_time)} (moving {format_duration(moving)})")
    print(f"Avg pace:    {stats.average_pace}/km")
    print(f"Max speed:   {stats.max_speed:.1f} km/h")
    print(f"Elevation:   +{stats.elevation_gain:.0f} m / -{stats.elevation_loss:.0f} m")
    print(f"Calories:    {stats.calories}")
    print(f"Pauses:      {len(pauses)}")

    fastest = get_fastest_split(stats.splits)
    for split in stats.splits:
        marker = " *" if split is fastest else ""
        print(
            f"  {split.km:>3}  {format_distance(split.distance):>9}  "
            f"{split.time:>8}  {split.pace}/km  +{split.elevation_gain:.0f} m{marker}"
        )
    return 0


def _run_recovery(args: argparse.Namespace) -> int:
    from fitcore.analysis.recovery import RecoveryFactors, calculate_recovery_score

    result = calculate_recovery_score(RecoveryFactors(
        sleep=args.sleep,
        soreness=args.soreness,
        energy=args.energy,
        workouts_this_week=args.workouts,
        days_since_rest=args.days_since_rest,
        recent_intensity=args.intensity,
    ))
    print(f"Recovery score: {result.score}/100")
    print(result.recommendation)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fitcore", description="Route and recovery analytics")
    sub = parser.add_subparsers(dest="command", required=True)

    analyze = sub.add_parser("analyze", help="Analyze a GPS route from a .fit file")
    analyze.add_argument("path", help="Path to a Garmin .fit activity file")
    analyze.add_argument("--weight", type=float, help="Body weight in kg")
    analyze.add_argument("--activity", help="walking, running, jogging, cycling or hiking")
    analyze.add_argument("--split-distance", type=float, help="Split length in meters")
    analyze.set_defaults(func=_run_analyze)

    recovery = sub.add_parser("recovery", help="Compute today's recovery score")
    recovery.add_argument("--sleep", type=float, help="Hours slept (default 7)")
    recovery.add_argument("--soreness", type=float, help="Soreness 0-10 (default 5)")
    recovery.add_argument("--energy", type=float, help="Energy 0-10 (default 5)")
    recovery.add_argument("--workouts", type=int, default=0, help="Workouts in the last 7 days")
    recovery.add_argument("--days-since-rest", type=int, default=0)
    recovery.add_argument("--intensity", type=float, default=0.0,
                          help="Average calories per workout, last 7 days")
    recovery.set_defaults(func=_run_recovery)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
