"""Shared test fixtures."""
import math
from typing import Callable, List, Optional

import pytest

import fitcore.config
from fitcore.analysis.geo import GPSSample

# Along the equator one degree of longitude is exactly this many meters
# on the haversine sphere.
METERS_PER_DEGREE = 6371e3 * math.pi / 180


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Each test sees Settings built from its own environment."""
    fitcore.config._settings = None
    yield
    fitcore.config._settings = None


@pytest.fixture(name="straight_route")
def straight_route_fixture() -> Callable[..., List[GPSSample]]:
    """Factory for an eastbound route along the equator at constant speed."""

    def build(
        distance_m: float,
        step_m: float = 10.0,
        speed_ms: float = 5.0,
        start_ms: int = 0,
        altitude: Optional[float] = None,
    ) -> List[GPSSample]:
        steps = int(round(distance_m / step_m))
        step_deg = step_m / METERS_PER_DEGREE
        step_ms = int(round(step_m / speed_ms * 1000))
        return [
            GPSSample(
                latitude=0.0,
                longitude=i * step_deg,
                timestamp=start_ms + i * step_ms,
                altitude=altitude,
                speed=speed_ms,
                accuracy=5.0,
            )
            for i in range(steps + 1)
        ]

    return build
