"""Tests for the command-line entrypoint."""
from unittest.mock import patch

import pytest

from fitcore.__main__ import build_parser, main
from fitcore.analysis.geo import GPSSample

TWO_POINT_ROUTE = [
    GPSSample(latitude=0.0, longitude=0.0, timestamp=0, altitude=100.0, speed=3.5),
    GPSSample(latitude=0.0, longitude=0.01, timestamp=300_000, altitude=104.0, speed=4.0),
]


class TestRecoveryCommand:
    def test_prints_score_and_recommendation(self, capsys):
        code = main(["recovery", "--sleep", "8", "--soreness", "1", "--energy", "9"])
        out = capsys.readouterr().out
        assert code == 0
        assert "Recovery score: 100/100" in out
        assert "ready for intense workout" in out

    def test_defaults_without_daily_log(self, capsys):
        main(["recovery"])
        assert "Recovery score: 75/100" in capsys.readouterr().out

    def test_training_load_arguments(self, capsys):
        main(["recovery", "--workouts", "9", "--days-since-rest", "4", "--intensity", "2000"])
        assert "Recovery score: 30/100" in capsys.readouterr().out


class TestAnalyzeCommand:
    def test_prints_route_summary(self, capsys, tmp_path):
        with patch("fitcore.garmin.fit_parser.parse_fit_file", return_value=TWO_POINT_ROUTE):
            code = main(["analyze", str(tmp_path / "run.fit")])
        out = capsys.readouterr().out
        assert code == 0
        assert "Distance:    1.11 km" in out
        assert "Avg pace:    4:30/km" in out
        assert "Calories:    76" in out
        assert "+4 m / -0 m" in out
        # The only split is also the fastest
        assert out.rstrip().endswith("*")

    def test_weight_and_activity_override(self, capsys, tmp_path):
        with patch("fitcore.garmin.fit_parser.parse_fit_file", return_value=TWO_POINT_ROUTE):
            main(["analyze", str(tmp_path / "run.fit"), "--weight", "90", "--activity", "walking"])
        assert "Calories:    70" in capsys.readouterr().out

    def test_missing_file_returns_error_code(self, tmp_path, caplog):
        code = main(["analyze", str(tmp_path / "missing.fit")])
        assert code == 1
        assert "not found" in caplog.text


class TestParser:
    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_analyze_options(self):
        args = build_parser().parse_args(
            ["analyze", "run.fit", "--split-distance", "1609.34", "--weight", "65"]
        )
        assert args.path == "run.fit"
        assert args.split_distance == pytest.approx(1609.34)
        assert args.weight == 65.0
        assert args.activity is None
