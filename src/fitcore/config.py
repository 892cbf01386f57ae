from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    user_weight_kg: float = 70.0
    activity_type: str = "running"
    split_distance_m: float = 1000.0
    min_moving_speed_ms: float = 0.5
    waypoint_max_accuracy_m: float = 100.0  # live tracking drops fixes worse than this
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
