"""
Route analysis: distance, pace, elevation, splits, calories and pauses
from an ordered list of GPSSample.

Every function here is total over well-typed input. Empty and single-sample
routes produce zero/empty results rather than errors. Samples are assumed to
be in time order; out-of-order input yields meaningless numbers but never
raises.

Distance pipeline (order matters):
  1. drop fixes with accuracy worse than 50 m
  2. 3-point centered moving average over lat/lng
  3. sum of haversine distances between consecutive smoothed points

Splits, elevation and max speed use the raw samples, not the smoothed ones.
"""
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Union

from fitcore.analysis.geo import (
    GPSSample,
    elevation_change,
    filter_by_accuracy,
    format_duration,
    haversine_distance,
    meters_to_kilometers,
    pace_to_seconds,
    smooth_samples,
    speed_to_pace,
    total_distance,
)
from fitcore.analysis.polyline import LatLng, decode_polyline, encode_polyline

MAX_ACCURACY_M = 50.0
SMOOTHING_WINDOW = 3
DEFAULT_SPLIT_DISTANCE_M = 1000.0
# Float slack when comparing accumulated distance against the split length.
SPLIT_TOLERANCE_M = 1e-6
DEFAULT_MIN_SPEED_MS = 0.5
DEFAULT_USER_WEIGHT_KG = 70.0
DEFAULT_ACTIVITY_TYPE = "running"

ZERO_PACE = "0:00"

# Metabolic equivalents per activity. Unknown activities fall back to the
# jogging value, not a neutral midpoint.
MET_VALUES: Dict[str, float] = {
    "walking": 3.5,
    "running": 9.8,
    "jogging": 7.0,
    "cycling": 7.5,
    "hiking": 6.0,
}
DEFAULT_MET = 7.0

# Assumed average speed (km/h) used to derive the calorie model's duration.
AVERAGE_SPEED_KMH: Dict[str, float] = {
    "walking": 5.0,
    "running": 10.0,
    "jogging": 8.0,
    "cycling": 20.0,
    "hiking": 4.0,
}
DEFAULT_AVERAGE_SPEED_KMH = 10.0

Timestamp = Union[datetime, int, float]


@dataclass
class ElevationChange:
    gain: float  # meters climbed
    loss: float  # meters descended (positive number)


@dataclass
class Split:
    """One fixed-distance segment of a route (the last one may be partial)."""
    km: int                  # 1-based split number
    distance: float          # meters actually covered in this split
    time: str                # "m:ss" or "h:mm:ss"
    pace: str                # "m:ss" per km
    elevation_gain: float    # meters


@dataclass
class Pause:
    """A stretch of consecutive samples below the moving-speed threshold."""
    start_time: int   # epoch ms of the first stationary sample
    end_time: int     # epoch ms of the last stationary sample
    duration: float   # seconds


@dataclass
class RouteStats:
    total_distance: float = 0.0   # meters
    total_time: float = 0.0       # seconds, wall clock
    average_pace: str = ZERO_PACE
    max_speed: float = 0.0        # km/h
    elevation_gain: float = 0.0   # meters
    elevation_loss: float = 0.0   # meters
    calories: int = 0
    splits: List[Split] = field(default_factory=list)


def calculate_distance(samples: List[GPSSample]) -> float:
    """
    Total route distance in meters after accuracy filtering and smoothing.

    Returns 0.0 for fewer than 2 samples.
    """
    if len(samples) < 2:
        return 0.0

    filtered = filter_by_accuracy(samples, MAX_ACCURACY_M)
    smoothed = smooth_samples(filtered, SMOOTHING_WINDOW)
    return total_distance(smoothed)


def calculate_elevation_gain(samples: List[GPSSample]) -> ElevationChange:
    """
    Climb and descent over the samples that carry altitude.

    Returns zero gain and loss when fewer than 2 samples have altitude.
    """
    with_altitude = [s for s in samples if s.altitude is not None]
    if len(with_altitude) < 2:
        return ElevationChange(gain=0.0, loss=0.0)

    gain, loss = elevation_change(with_altitude)
    return ElevationChange(gain=gain, loss=loss)


def calculate_pace(distance_meters: float, time_seconds: float) -> str:
    """
    Average pace as a "m:ss" string per kilometer.

    Returns "0:00" when either distance or time is zero.
    """
    if distance_meters == 0 or time_seconds == 0:
        return ZERO_PACE

    speed_kmh = (meters_to_kilometers(distance_meters) / time_seconds) * 3600
    return speed_to_pace(speed_kmh, "km")


def _build_split(
    km: int,
    samples: List[GPSSample],
    start: int,
    end: int,
    distance: float,
) -> Split:
    """Split covering samples[start..end] inclusive."""
    elapsed_s = (samples[end].timestamp - samples[start].timestamp) / 1000.0
    elevation = calculate_elevation_gain(samples[start:end + 1])
    return Split(
        km=km,
        distance=distance,
        time=format_duration(elapsed_s),
        pace=calculate_pace(distance, elapsed_s),
        elevation_gain=elevation.gain,
    )


def generate_splits(
    samples: List[GPSSample],
    split_distance: float = DEFAULT_SPLIT_DISTANCE_M,
) -> List[Split]:
    """
    Slice a route into fixed-distance splits using raw (unsmoothed) samples.

    A split closes on the first sample at which the accumulated distance
    reaches split_distance (>=, not >, within SPLIT_TOLERANCE_M of float
    error). That crossing sample is the last
    sample of the split it completes and the first sample of the next one,
    so its timestamp bounds both windows while no distance is counted twice.

    Whatever distance remains after the last full split becomes a final
    partial split.

    Args:
        samples: time-ordered GPS samples
        split_distance: split length in meters (default 1 km)

    Returns:
        Splits in order, numbered from 1. Empty for fewer than 2 samples.
    """
    if len(samples) < 2:
        return []

    splits: List[Split] = []
    split_start = 0
    accumulated = 0.0
    split_number = 1

    for i in range(1, len(samples)):
        accumulated += haversine_distance(samples[i - 1], samples[i])

        if accumulated >= split_distance - SPLIT_TOLERANCE_M:
            splits.append(_build_split(split_number, samples, split_start, i, accumulated))
            split_start = i
            accumulated = 0.0
            split_number += 1

    last = len(samples) - 1
    if accumulated > 0 and split_start < last:
        splits.append(_build_split(split_number, samples, split_start, last, accumulated))

    return splits


def estimate_calories_burned(
    distance_meters: float,
    weight_kg: float,
    activity_type: str,
) -> int:
    """
    Estimate energy expenditure with a MET model.

    calories = MET × weight_kg × hours, where hours is the time the distance
    would take at the activity's typical average speed. The GPS-measured
    duration is deliberately not used, so the estimate depends only on
    distance, weight and activity.

    Args:
        distance_meters: distance covered
        weight_kg: athlete body weight
        activity_type: "walking", "running", "jogging", "cycling", "hiking"
                       (case-insensitive); anything else uses MET 7.0 at 10 km/h

    Returns:
        Calories rounded to the nearest integer.
    """
    key = activity_type.lower()
    met = MET_VALUES.get(key, DEFAULT_MET)
    speed_kmh = AVERAGE_SPEED_KMH.get(key, DEFAULT_AVERAGE_SPEED_KMH)
    hours = meters_to_kilometers(distance_meters) / speed_kmh
    return math.floor(met * weight_kg * hours + 0.5)


def _to_epoch_ms(value: Timestamp) -> float:
    if isinstance(value, datetime):
        return value.timestamp() * 1000.0
    return float(value)


def analyze_route(
    samples: List[GPSSample],
    start_time: Timestamp,
    end_time: Timestamp,
    user_weight: float = DEFAULT_USER_WEIGHT_KG,
    activity_type: str = DEFAULT_ACTIVITY_TYPE,
    split_distance: float = DEFAULT_SPLIT_DISTANCE_M,
) -> RouteStats:
    """
    Compute the full RouteStats for a recorded route.

    total_time is the wall-clock span end_time - start_time (datetimes or
    epoch ms), independent of sample timestamps, and never negative.
    Distance is filtered and smoothed; elevation, splits and max speed come
    from the raw samples.

    Returns an all-zero RouteStats for fewer than 2 samples.
    """
    if len(samples) < 2:
        return RouteStats()

    distance = calculate_distance(samples)
    total_time = max(0.0, (_to_epoch_ms(end_time) - _to_epoch_ms(start_time)) / 1000.0)
    average_pace = calculate_pace(distance, total_time)

    max_speed = 0.0
    for s in samples:
        if s.speed is not None:
            max_speed = max(max_speed, s.speed * 3.6)

    elevation = calculate_elevation_gain(samples)

    return RouteStats(
        total_distance=distance,
        total_time=total_time,
        average_pace=average_pace,
        max_speed=max_speed,
        elevation_gain=elevation.gain,
        elevation_loss=elevation.loss,
        calories=estimate_calories_burned(distance, user_weight, activity_type),
        splits=generate_splits(samples, split_distance),
    )


def calculate_moving_time(
    samples: List[GPSSample],
    min_speed: float = DEFAULT_MIN_SPEED_MS,
) -> float:
    """
    Seconds spent moving.

    An interval between two consecutive samples counts when the later
    sample's speed is at least min_speed. Samples without a speed reading
    count as stationary.
    """
    moving = 0.0
    for prev, cur in zip(samples, samples[1:]):
        speed = cur.speed or 0.0
        if speed >= min_speed:
            moving += (cur.timestamp - prev.timestamp) / 1000.0
    return moving


def detect_pauses(
    samples: List[GPSSample],
    min_speed: float = DEFAULT_MIN_SPEED_MS,
) -> List[Pause]:
    """
    Find maximal runs of samples slower than min_speed.

    Each run becomes one Pause spanning the timestamps of its first and last
    stationary samples. A run still open at the end of the route is closed at
    the final sample. Missing speed counts as stationary.
    """
    pauses: List[Pause] = []
    pause_start: Optional[int] = None

    for i, s in enumerate(samples):
        speed = s.speed or 0.0
        if speed < min_speed:
            if pause_start is None:
                pause_start = s.timestamp
        elif pause_start is not None:
            pause_end = samples[i - 1].timestamp
            pauses.append(Pause(
                start_time=pause_start,
                end_time=pause_end,
                duration=(pause_end - pause_start) / 1000.0,
            ))
            pause_start = None

    if pause_start is not None:
        pause_end = samples[-1].timestamp
        pauses.append(Pause(
            start_time=pause_start,
            end_time=pause_end,
            duration=(pause_end - pause_start) / 1000.0,
        ))

    return pauses


def get_fastest_split(splits: List[Split]) -> Optional[Split]:
    """The split with the lowest pace; the earliest one wins ties. None if empty."""
    fastest: Optional[Split] = None
    for split in splits:
        if fastest is None or pace_to_seconds(split.pace) < pace_to_seconds(fastest.pace):
            fastest = split
    return fastest


def encode_route(samples: List[GPSSample]) -> str:
    """Encode a route's positions as a precision-5 polyline."""
    return encode_polyline([(s.latitude, s.longitude) for s in samples])


def decode_route(encoded: str) -> List[LatLng]:
    """Decode a polyline produced by encode_route into (lat, lng) pairs."""
    return decode_polyline(encoded)
