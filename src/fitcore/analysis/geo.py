"""
GPS sample type and geospatial math used by the route analysis modules.

GPSSample is the universal in-memory representation of one location fix.
Everything here is pure: samples in, numbers out. No I/O, no logging.
"""
import math
from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

EARTH_RADIUS_M = 6371e3

_KM_PER_MILE = 1.60934
_MILES_PER_METER = 0.000621371


@dataclass(frozen=True)
class GPSSample:
    """
    One location fix from a device or a stored track.
    Only position and timestamp are required; phones and watches don't
    always report the rest.
    """

    latitude: float                   # decimal degrees
    longitude: float                  # decimal degrees
    timestamp: int                    # epoch milliseconds
    altitude: Optional[float] = None  # meters above sea level
    speed: Optional[float] = None     # m/s, instantaneous
    accuracy: Optional[float] = None  # horizontal accuracy radius, meters


def haversine_distance(a: GPSSample, b: GPSSample) -> float:
    """Great-circle distance between two samples in meters."""
    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    d_phi = math.radians(b.latitude - a.latitude)
    d_lambda = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_M * c


def calculate_bearing(a: GPSSample, b: GPSSample) -> float:
    """Initial bearing from a to b in degrees, 0-360 (0 = north)."""
    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    d_lambda = math.radians(b.longitude - a.longitude)

    y = math.sin(d_lambda) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(d_lambda)
    return (math.degrees(math.atan2(y, x)) + 360) % 360


def filter_by_accuracy(samples: List[GPSSample], max_accuracy: float = 50.0) -> List[GPSSample]:
    """
    Drop fixes whose reported accuracy radius is worse than max_accuracy.
    Samples without an accuracy reading are kept.
    """
    return [
        s for s in samples
        if s.accuracy is None or s.accuracy <= max_accuracy
    ]


def smooth_samples(samples: List[GPSSample], window_size: int = 3) -> List[GPSSample]:
    """
    Centered moving average over latitude/longitude to damp GPS jitter.

    Altitude is averaged only when every sample in the window carries one;
    otherwise the center sample's altitude is kept as-is. Timestamp, speed
    and accuracy always come from the center sample.

    Sequences shorter than the window are returned unchanged.
    """
    if len(samples) < window_size:
        return list(samples)

    half = window_size // 2
    n = len(samples)
    smoothed: List[GPSSample] = []

    for i, center in enumerate(samples):
        window = samples[max(0, i - half):min(n, i + half + 1)]
        avg_lat = sum(s.latitude for s in window) / len(window)
        avg_lon = sum(s.longitude for s in window) / len(window)
        if all(s.altitude is not None for s in window):
            avg_alt = sum(s.altitude for s in window) / len(window)
        else:
            avg_alt = center.altitude

        smoothed.append(replace(center, latitude=avg_lat, longitude=avg_lon, altitude=avg_alt))

    return smoothed


def total_distance(samples: List[GPSSample]) -> float:
    """Sum of haversine distances between consecutive samples, in meters."""
    return sum(
        haversine_distance(prev, cur)
        for prev, cur in zip(samples, samples[1:])
    )


def elevation_change(samples: List[GPSSample]) -> Tuple[float, float]:
    """
    Total climb and descent between consecutive samples.

    Pairs where either side has no altitude are skipped.

    Returns:
        (gain, loss), both >= 0, in meters.
    """
    gain = 0.0
    loss = 0.0
    for prev, cur in zip(samples, samples[1:]):
        if prev.altitude is None or cur.altitude is None:
            continue
        diff = cur.altitude - prev.altitude
        if diff > 0:
            gain += diff
        else:
            loss += -diff
    return gain, loss


# ─── Unit conversions ─────────────────────────────────────────────────────────

def meters_to_kilometers(meters: float) -> float:
    return meters / 1000.0


def kilometers_to_meters(km: float) -> float:
    return km * 1000.0


def meters_to_miles(meters: float) -> float:
    return meters * _MILES_PER_METER


def miles_to_meters(miles: float) -> float:
    return miles / _MILES_PER_METER


def average_speed(distance_meters: float, time_seconds: float) -> float:
    """Average speed in km/h. Returns 0.0 when no time has elapsed."""
    if time_seconds == 0:
        return 0.0
    return (distance_meters / 1000.0) / (time_seconds / 3600.0)


# ─── Pace and duration formatting ─────────────────────────────────────────────

def speed_to_pace(speed_kmh: float, unit: str = "km") -> str:
    """
    Convert a speed in km/h to a "m:ss" pace string per km (or per mile).

    Seconds are rounded to the nearest whole second; a value that rounds up
    to 60 carries into the minutes ("4:59.6" → "5:00").

    Returns "0:00" for zero speed.
    """
    if speed_kmh == 0:
        return "0:00"

    speed_in_unit = speed_kmh / _KM_PER_MILE if unit == "mi" else speed_kmh
    minutes_per_unit = 60.0 / speed_in_unit
    minutes = math.floor(minutes_per_unit)
    seconds = round((minutes_per_unit - minutes) * 60)
    if seconds == 60:
        minutes += 1
        seconds = 0
    return f"{minutes}:{seconds:02d}"


def pace_to_seconds(pace: str) -> int:
    """Parse a "m:ss" pace string into total seconds."""
    minutes, seconds = pace.split(":")
    return int(minutes) * 60 + int(seconds)


def pace_to_speed(pace: str, unit: str = "km") -> float:
    """Convert a "m:ss" pace string (per km or per mile) to speed in km/h."""
    total_minutes = pace_to_seconds(pace) / 60.0
    if total_minutes == 0:
        return 0.0
    speed_in_unit = 60.0 / total_minutes
    return speed_in_unit * _KM_PER_MILE if unit == "mi" else speed_in_unit


def format_duration(seconds: float) -> str:
    """Format seconds as "m:ss", or "h:mm:ss" once past the hour."""
    total = math.floor(seconds)
    hours = total // 3600
    minutes = (total % 3600) // 60
    secs = total % 60
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_distance(meters: float, unit: str = "km") -> str:
    """Format a distance like "5.00 km" or "3.11 mi"."""
    if unit == "mi":
        return f"{meters_to_miles(meters):.2f} mi"
    return f"{meters_to_kilometers(meters):.2f} km"
