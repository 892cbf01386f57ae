"""Tests for the FIT file reader.

Most tests stub fitparse.FitFile with fake 'record' messages. The fixture-backed
class runs only when tests/fixtures/sample_activity.fit exists. To create one,
export a run from Garmin Connect: Activity → ⚙️ → Export Original (.fit).
"""
from datetime import datetime
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from fitcore.garmin.fit_parser import FitParseError, parse_fit_file

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"
SAMPLE_FIT = FIXTURES_DIR / "sample_activity.fit"

SEMICIRCLES_PER_DEGREE = 2**31 / 180.0


def fake_record(**values):
    record = MagicMock()
    record.get_values.return_value = values
    return record


def positioned(ts: datetime, lat: float, lon: float, **extra):
    return fake_record(
        timestamp=ts,
        position_lat=int(lat * SEMICIRCLES_PER_DEGREE),
        position_long=int(lon * SEMICIRCLES_PER_DEGREE),
        **extra,
    )


@pytest.fixture
def fit_path(tmp_path):
    path = tmp_path / "activity.fit"
    path.write_bytes(b"stub")
    return path


def parse_with_records(path, records):
    with patch("fitcore.garmin.fit_parser.fitparse.FitFile") as mock_fit:
        mock_fit.return_value.get_messages.return_value = iter(records)
        return parse_fit_file(path)


class TestFitParserMapping:
    def test_semicircles_converted_to_degrees(self, fit_path):
        samples = parse_with_records(fit_path, [
            positioned(datetime(2025, 1, 15, 7, 30), 47.6062, -122.3321),
        ])
        assert samples[0].latitude == pytest.approx(47.6062, abs=1e-6)
        assert samples[0].longitude == pytest.approx(-122.3321, abs=1e-6)

    def test_naive_timestamp_treated_as_utc(self, fit_path):
        samples = parse_with_records(fit_path, [
            positioned(datetime(2025, 1, 15, 7, 30), 0.0, 0.0),
        ])
        assert samples[0].timestamp == 1736926200000

    def test_prefers_enhanced_fields(self, fit_path):
        samples = parse_with_records(fit_path, [
            positioned(
                datetime(2025, 1, 15, 7, 30), 0.0, 0.0,
                altitude=100.0, enhanced_altitude=101.5,
                speed=3.0, enhanced_speed=3.25,
            ),
            positioned(datetime(2025, 1, 15, 7, 30, 1), 0.0, 0.0, altitude=102.0, speed=3.1),
        ])
        assert (samples[0].altitude, samples[0].speed) == (101.5, 3.25)
        assert (samples[1].altitude, samples[1].speed) == (102.0, 3.1)

    def test_missing_optional_fields_are_none(self, fit_path):
        samples = parse_with_records(fit_path, [
            positioned(datetime(2025, 1, 15, 7, 30), 0.0, 0.0),
        ])
        assert samples[0].altitude is None
        assert samples[0].speed is None
        assert samples[0].accuracy is None

    def test_records_without_position_skipped(self, fit_path):
        samples = parse_with_records(fit_path, [
            fake_record(timestamp=datetime(2025, 1, 15, 7, 30), heart_rate=120),
            positioned(datetime(2025, 1, 15, 7, 30, 1), 0.0, 0.001),
            fake_record(position_lat=0, position_long=0),
        ])
        assert len(samples) == 1
        assert samples[0].timestamp == 1736926201000


class TestFitParserErrors:
    def test_invalid_path_raises_fit_parse_error(self):
        with pytest.raises(FitParseError):
            parse_fit_file(Path("/nonexistent/file.fit"))

    def test_non_fit_file_raises_fit_parse_error(self, tmp_path):
        bad_file = tmp_path / "not_a_fit.fit"
        bad_file.write_bytes(b"this is not a valid FIT file")
        with pytest.raises(FitParseError):
            parse_fit_file(bad_file)

    def test_no_positioned_records(self, fit_path):
        with pytest.raises(FitParseError, match="No positioned"):
            parse_with_records(fit_path, [
                fake_record(timestamp=datetime(2025, 1, 15, 7, 30), heart_rate=120),
            ])


class TestFitParserSampleFile:
    @pytest.fixture(scope="class")
    def samples(self):
        if not SAMPLE_FIT.exists():
            pytest.skip(f"No FIT fixture found at {SAMPLE_FIT}")
        return parse_fit_file(SAMPLE_FIT)

    def test_coordinates_in_degree_range(self, samples):
        for s in samples:
            assert -90 <= s.latitude <= 90
            assert -180 <= s.longitude <= 180

    def test_timestamps_non_decreasing(self, samples):
        ts = [s.timestamp for s in samples]
        assert ts == sorted(ts)
