"""Tests for environment-driven settings."""
from fitcore.config import Settings, get_settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        for var in ("USER_WEIGHT_KG", "ACTIVITY_TYPE", "SPLIT_DISTANCE_M"):
            monkeypatch.delenv(var, raising=False)
        settings = Settings(_env_file=None)
        assert settings.user_weight_kg == 70.0
        assert settings.activity_type == "running"
        assert settings.split_distance_m == 1000.0
        assert settings.min_moving_speed_ms == 0.5
        assert settings.waypoint_max_accuracy_m == 100.0
        assert settings.log_level == "INFO"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("USER_WEIGHT_KG", "80")
        monkeypatch.setenv("ACTIVITY_TYPE", "cycling")
        settings = Settings(_env_file=None)
        assert settings.user_weight_kg == 80.0
        assert settings.activity_type == "cycling"

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()
