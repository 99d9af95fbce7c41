"""
Test fixtures for the lifting log compiler.

Provides sample raw sessions, TrainHeroic payloads and set sequences so the
parser, aggregator and classifier can be exercised offline and
deterministically.
"""

import sys
from pathlib import Path
from typing import Any, Dict, List

import pytest
from fastapi.testclient import TestClient

# Repo root: .../lifting-log-compiler
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Make src/ importable so tests can do `import lifting_log...`
for p in {ROOT, SRC}:
    p_str = str(p)
    if p_str not in sys.path:
        sys.path.insert(0, p_str)

from lifting_log.main import app
from lifting_log.models import SetEntry


# ---------------------------------------------------------------------------
# Core Test Client
# ---------------------------------------------------------------------------


@pytest.fixture
def client() -> TestClient:
    """Per-test FastAPI TestClient."""
    return TestClient(app)


# ---------------------------------------------------------------------------
# Sample Data Fixtures
# ---------------------------------------------------------------------------


def build_sets(pairs) -> List[SetEntry]:
    """Build rep sets from (reps, weight) pairs; a str in the reps slot is a duration."""
    sets = []
    for i, (reps, weight) in enumerate(pairs):
        if isinstance(reps, str):
            sets.append(SetEntry(order=i, duration_label=reps, weight=weight))
        else:
            sets.append(SetEntry(order=i, reps=reps, weight=weight))
    return sets


@pytest.fixture
def make_sets():
    """Factory fixture: make_sets([(5, 100), ("1:00", 20)])."""
    return build_sets


@pytest.fixture
def ramp_sets() -> List[SetEntry]:
    """Classic ascending ramp: one warm-up, three work sets at 85%."""
    return build_sets([(5, 95), (5, 135), (5, 155), (5, 155)])


@pytest.fixture
def sample_session_dict() -> Dict[str, Any]:
    """Raw session with a superset repeated across two rounds."""
    return {
        "date": "2023-01-05",
        "title": "2023-01-05",
        "duration": 75,
        "rpe": 8,
        "blocks": [
            {
                "order": 0,
                "exercises": [
                    {"exerciseId": 101, "notation": "4 x 5 @ 95,135,155,155"},
                ],
            },
            {
                "order": 1,
                "exercises": [
                    {"exerciseId": 202, "notation": "3 x 5 @ 100"},
                    {"exerciseId": 303, "notation": "3 x 10 @ 50"},
                ],
            },
            {
                "order": 2,
                "exercises": [
                    {"exerciseId": 202, "notation": "2 x 3 @ 120"},
                    {"exerciseId": 303, "notation": "10,8 @ 60"},
                ],
            },
            {
                "order": 3,
                "exercises": [
                    {"exerciseId": 404, "notation": "1 x 11:00 @ 135"},
                ],
            },
        ],
    }


@pytest.fixture
def trainheroic_payload() -> Dict[str, Any]:
    """TrainHeroic saved-workout export for one session."""
    return {
        "date": "2023-02-10",
        "saved_workout": {
            "title": "2023-02-10",
            "timestamp_started": 1676030400,
            "timestamp_completed": 1676030400 + 65 * 60,
            "rpe": 7,
            "workoutSets": [
                {
                    "order": 1,
                    "workoutSetExercises": [
                        {
                            "exercise_id": 11,
                            "abr": "5,5,3,3,5,5 @ 135,185,225,255,275,275",
                            "exercise_title": "Back Squat",
                            "video_url": "https://example.com/squat",
                        },
                    ],
                },
                {
                    "order": 2,
                    "workoutSetExercises": [
                        {"exercise_id": 22, "abr": "3 x 10 @ 182", "exercise_title": "DB Bench Press"},
                        {"exercise_id": 33, "abr": "3 x 1:00", "exercise_title": "Front Plank (Weighted)"},
                    ],
                },
            ],
        },
    }


# ---------------------------------------------------------------------------
# Environment Variables
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def mock_env_vars(monkeypatch):
    """Pin environment-driven settings for tests."""
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.setenv("LOG_LEVEL", "INFO")


@pytest.fixture
def malformed_session_dict() -> Dict[str, Any]:
    """Session whose notation has an unreadable weight and an unreadable rep count."""
    return {
        "date": "2023-01-06",
        "title": "2023-01-06",
        "duration": 50,
        "blocks": [
            {"order": 0, "exercises": [{"exerciseId": 501, "notation": "4 x 5 @ abc"}]},
            {"order": 1, "exercises": [{"exerciseId": 502, "notation": "5,a,5 @ 100"}]},
            {"order": 2, "exercises": [{"exerciseId": 503, "notation": "2 x 0:30 @ heavy"}]},
        ],
    }
