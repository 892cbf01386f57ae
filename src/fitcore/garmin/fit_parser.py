"""
FIT file reader: converts a Garmin .fit activity into a list of GPSSample.

Only 'record' messages that carry both a timestamp and a GPS position are
kept, so indoor/treadmill records are dropped.

Field mapping from FIT to GPSSample:
  FIT field                         → GPSSample field
  timestamp                         → timestamp (epoch ms, UTC)
  position_lat / position_long      → latitude / longitude (semicircles → degrees)
  enhanced_altitude (or altitude)   → altitude (m)
  enhanced_speed (or speed)         → speed (m/s)

FIT records have no accuracy field; accuracy is left as None.
"""
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

import fitparse

from fitcore.analysis.geo import GPSSample

logger = logging.getLogger(__name__)

# Garmin stores lat/lon as 32-bit signed integers in "semicircles"
# Degrees = semicircles * (180 / 2^31)
_SEMICIRCLE_TO_DEGREES = 180.0 / (2**31)


class FitParseError(Exception):
    """Raised when a FIT file cannot be parsed."""


def _to_epoch_ms(timestamp: datetime) -> int:
    # fitparse returns naive datetimes in UTC
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return int(timestamp.timestamp() * 1000)


def _first_present(values: dict, *keys: str) -> Optional[float]:
    for key in keys:
        if values.get(key) is not None:
            return float(values[key])
    return None


def parse_fit_file(path: Path) -> List[GPSSample]:
    """
    Parse a Garmin .fit file into time-ordered GPS samples.

    Args:
        path: Path to the .fit file

    Returns:
        One GPSSample per positioned 'record' message, in file order.

    Raises:
        FitParseError: if the file doesn't exist, can't be parsed, or contains
                       no records with a GPS position
    """
    if not path.exists():
        raise FitParseError(f"FIT file not found: {path}")

    try:
        fit = fitparse.FitFile(str(path))
        records = list(fit.get_messages("record"))
    except Exception as exc:
        raise FitParseError(f"Failed to parse FIT file {path}: {exc}") from exc

    samples: List[GPSSample] = []

    for record in records:
        values = record.get_values()
        timestamp = values.get("timestamp")
        raw_lat = values.get("position_lat")
        raw_lon = values.get("position_long")
        if timestamp is None or raw_lat is None or raw_lon is None:
            continue

        samples.append(GPSSample(
            latitude=raw_lat * _SEMICIRCLE_TO_DEGREES,
            longitude=raw_lon * _SEMICIRCLE_TO_DEGREES,
            timestamp=_to_epoch_ms(timestamp),
            altitude=_first_present(values, "enhanced_altitude", "altitude"),
            speed=_first_present(values, "enhanced_speed", "speed"),
        ))

    logger.debug("Read %d positioned samples from %d records in %s", len(samples), len(records), path)

    if not samples:
        raise FitParseError(f"No positioned 'record' messages found in FIT file: {path}")

    return samples
