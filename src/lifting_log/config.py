"""Configuration settings for the lifting log compiler."""
import os
from typing import Literal, Optional


EnvironmentType = Literal["development", "staging", "production"]

DEFAULT_CLASSIFY_THRESHOLD = 0.85


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


def _int_env(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


class Settings:
    """Application settings."""

    # Environment
    ENVIRONMENT: EnvironmentType = "development"
    LOG_LEVEL: str = "INFO"

    # Set classification
    CLASSIFY_THRESHOLD: float = DEFAULT_CLASSIFY_THRESHOLD
    CLASSIFY_MAX_WORKERS: Optional[int] = None

    # TrainHeroic duration clamping (minutes)
    MAX_WORKOUT_MINUTES: int = 200
    DEFAULT_WORKOUT_MINUTES: int = 100

    def __init__(self):
        # Environment
        env = os.getenv("ENVIRONMENT", "development").lower()
        if env in ("development", "staging", "production"):
            self.ENVIRONMENT = env  # type: ignore
        else:
            self.ENVIRONMENT = "development"

        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

        # Set classification
        self.CLASSIFY_THRESHOLD = _float_env("CLASSIFY_THRESHOLD", DEFAULT_CLASSIFY_THRESHOLD)
        self.CLASSIFY_MAX_WORKERS = _int_env("CLASSIFY_MAX_WORKERS", None)

        # Duration clamping
        self.MAX_WORKOUT_MINUTES = _int_env("MAX_WORKOUT_MINUTES", 200)
        self.DEFAULT_WORKOUT_MINUTES = _int_env("DEFAULT_WORKOUT_MINUTES", 100)


settings = Settings()
