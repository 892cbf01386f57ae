"""
Encoded polyline codec and route geometry helpers.

Implements the Google encoded polyline algorithm: each coordinate is scaled
to an integer (precision 5 → ~1 m), delta-encoded against the previous point,
zig-zag signed and emitted as 5-bit chunks offset by 63 into printable ASCII.

Round-trips are lossy beyond the chosen precision.
"""
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

LatLng = Tuple[float, float]


@dataclass
class BoundingBox:
    north: float
    south: float
    east: float
    west: float


def _encode_value(value: int) -> str:
    num = ~(value << 1) if value < 0 else value << 1
    chunks = []
    while num >= 0x20:
        chunks.append(chr((0x20 | (num & 0x1F)) + 63))
        num >>= 5
    chunks.append(chr(num + 63))
    return "".join(chunks)


def _decode_value(encoded: str, index: int) -> Optional[Tuple[int, int]]:
    """Decode one varint starting at index. Returns (value, next_index), or None if truncated."""
    result = 0
    shift = 0
    while True:
        if index >= len(encoded):
            return None
        byte = ord(encoded[index]) - 63
        index += 1
        result |= (byte & 0x1F) << shift
        shift += 5
        if byte < 0x20:
            break
    value = ~(result >> 1) if result & 1 else result >> 1
    return value, index


def _round_half_up(x: float) -> int:
    # Halves round toward +inf; round() would round them to even
    return math.floor(x + 0.5)


def encode_polyline(coords: List[LatLng], precision: int = 5) -> str:
    """
    Encode (lat, lng) pairs into a polyline string.

    Args:
        coords: ordered (latitude, longitude) pairs in decimal degrees
        precision: number of decimal digits kept (5 is the Google default)

    Returns:
        Encoded string; "" for an empty input.
    """
    if not coords:
        return ""

    factor = 10 ** precision
    output = []
    prev_lat = 0
    prev_lng = 0

    for lat, lng in coords:
        ilat = _round_half_up(lat * factor)
        ilng = _round_half_up(lng * factor)
        output.append(_encode_value(ilat - prev_lat))
        output.append(_encode_value(ilng - prev_lng))
        prev_lat, prev_lng = ilat, ilng

    return "".join(output)


def decode_polyline(encoded: str, precision: int = 5) -> List[LatLng]:
    """
    Decode a polyline string back into (lat, lng) pairs.

    A truncated string yields the pairs decoded before the cut; the
    incomplete trailing pair is dropped.
    """
    if not encoded:
        return []

    factor = 10 ** precision
    coords: List[LatLng] = []
    index = 0
    lat = 0
    lng = 0

    while index < len(encoded):
        lat_part = _decode_value(encoded, index)
        if lat_part is None:
            break
        d_lat, next_index = lat_part
        lng_part = _decode_value(encoded, next_index)
        if lng_part is None:
            break
        d_lng, index = lng_part
        lat += d_lat
        lng += d_lng
        coords.append((lat / factor, lng / factor))

    return coords


def _perpendicular_distance(point: LatLng, start: LatLng, end: LatLng) -> float:
    """Distance from point to the segment start→end, in degree space."""
    dx = end[1] - start[1]
    dy = end[0] - start[0]

    if dx == 0 and dy == 0:
        return math.hypot(point[1] - start[1], point[0] - start[0])

    t = ((point[1] - start[1]) * dx + (point[0] - start[0]) * dy) / (dx * dx + dy * dy)

    if t < 0:
        return math.hypot(point[1] - start[1], point[0] - start[0])
    if t > 1:
        return math.hypot(point[1] - end[1], point[0] - end[0])

    proj_lng = start[1] + t * dx
    proj_lat = start[0] + t * dy
    return math.hypot(point[1] - proj_lng, point[0] - proj_lat)


def _ramer_douglas_peucker(points: List[LatLng], epsilon: float) -> List[LatLng]:
    if len(points) <= 2:
        return list(points)

    first, last = points[0], points[-1]
    max_distance = 0.0
    max_index = 0
    for i in range(1, len(points) - 1):
        d = _perpendicular_distance(points[i], first, last)
        if d > max_distance:
            max_distance = d
            max_index = i

    if max_distance > epsilon:
        left = _ramer_douglas_peucker(points[:max_index + 1], epsilon)
        right = _ramer_douglas_peucker(points[max_index:], epsilon)
        # max_index point is the last of left and the first of right
        return left[:-1] + right

    return [first, last]


def simplify_polyline(coords: List[LatLng], tolerance: float = 0.00001) -> List[LatLng]:
    """
    Reduce the number of points with Ramer-Douglas-Peucker.

    Args:
        coords: ordered (lat, lng) pairs
        tolerance: max allowed deviation in degrees (higher = more aggressive)

    Returns:
        Simplified list; always keeps the first and last points.
    """
    if len(coords) <= 2:
        return list(coords)
    return _ramer_douglas_peucker(list(coords), tolerance)


def bounding_box(coords: List[LatLng]) -> BoundingBox:
    """Smallest lat/lng box containing every point. All zeros when empty."""
    if not coords:
        return BoundingBox(north=0.0, south=0.0, east=0.0, west=0.0)

    lats = [c[0] for c in coords]
    lngs = [c[1] for c in coords]
    return BoundingBox(north=max(lats), south=min(lats), east=max(lngs), west=min(lngs))
