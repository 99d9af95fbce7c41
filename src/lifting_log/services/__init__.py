"""Services package for the lifting log compiler."""

from .aggregator import ExerciseAggregator
from .set_classifier import SetClassifier, InvalidThresholdError, classify_sets, validate_threshold
from .workout_assembler import WorkoutAssembler
from .ingestion import (
    IngestionState,
    SchemaViolationError,
    session_from_trainheroic,
    sessions_from_trainheroic,
    validate_session,
)

__all__ = [
    "ExerciseAggregator",
    "SetClassifier",
    "InvalidThresholdError",
    "classify_sets",
    "validate_threshold",
    "WorkoutAssembler",
    "IngestionState",
    "SchemaViolationError",
    "session_from_trainheroic",
    "sessions_from_trainheroic",
    "validate_session",
]
