"""
Ingestion boundary.

Validates raw session records and maps TrainHeroic saved-workout payloads
onto RawSession. Run-scoped bookkeeping (exercise catalog, seen dates and
titles) lives in an IngestionState owned by the caller, one per run.
"""

import datetime as dt
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple, Union

from pydantic import BaseModel, Field, ValidationError

from lifting_log.config import settings
from lifting_log.models import (
    CompileError,
    ExerciseMetadata,
    RawBlock,
    RawBlockExercise,
    RawSession,
)
from lifting_log.utils import slugify

logger = logging.getLogger(__name__)

# Title formats seen in exported logs, tried in order after ISO dates
TITLE_DATE_FORMATS = [
    "%m/%d/%Y",
    "%m/%d/%y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%d %b %Y",
    "%d %B %Y",
    "%a %b %d %Y",
    "%A, %B %d, %Y",
]


class SchemaViolationError(RuntimeError):
    """A raw record is missing required fields or has the wrong shape."""


def _describe(exc: ValidationError) -> str:
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()))
        problems.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return "; ".join(problems)


def validate_session(record: Union[RawSession, Dict[str, Any]]) -> RawSession:
    """Validate one raw session record, raising SchemaViolationError on bad shape."""
    if isinstance(record, RawSession):
        return record
    try:
        return RawSession.model_validate(record)
    except ValidationError as exc:
        raise SchemaViolationError(f"Invalid session record: {_describe(exc)}") from exc


# ---------------------------------------------------------------------------
# Caller-owned run state
# ---------------------------------------------------------------------------


@dataclass
class IngestionState:
    """Bookkeeping for one ingestion run."""
    exercises: Dict[int, ExerciseMetadata] = field(default_factory=dict)
    seen_dates: Set[str] = field(default_factory=set)
    seen_titles: Set[str] = field(default_factory=set)

    def register_exercise(self, exercise_id: int, name: str, video_url: Optional[str] = None) -> ExerciseMetadata:
        """Record catalog metadata the first time an exercise id is seen."""
        existing = self.exercises.get(exercise_id)
        if existing is not None:
            return existing
        metadata = ExerciseMetadata(
            id=exercise_id,
            name=name,
            slug=slugify(name),
            video_url=video_url,
        )
        self.exercises[exercise_id] = metadata
        return metadata

    def is_duplicate(self, raw_date: str, title: str) -> bool:
        return raw_date in self.seen_dates or title in self.seen_titles

    def remember(self, raw_date: str, title: str):
        self.seen_dates.add(raw_date)
        self.seen_titles.add(title)


# ---------------------------------------------------------------------------
# TrainHeroic saved-workout payloads
# ---------------------------------------------------------------------------


class TrainHeroicSetExercise(BaseModel):
    exercise_id: int
    abr: str
    exercise_title: str
    video_url: Optional[str] = None

    class Config:
        extra = "ignore"


class TrainHeroicWorkoutSet(BaseModel):
    order: int
    workout_set_exercises: List[TrainHeroicSetExercise] = Field(..., alias="workoutSetExercises")

    class Config:
        extra = "ignore"
        populate_by_name = True


class TrainHeroicSavedWorkout(BaseModel):
    title: str
    timestamp_started: float
    timestamp_completed: float
    rpe: Optional[float]
    workout_sets: List[TrainHeroicWorkoutSet] = Field(..., alias="workoutSets")

    class Config:
        extra = "ignore"
        populate_by_name = True


class TrainHeroicPayload(BaseModel):
    saved_workout: TrainHeroicSavedWorkout
    date: str

    class Config:
        extra = "ignore"


def parse_title_date(title: str) -> dt.date:
    """Read the session date from a saved-workout title."""
    text = title.strip()
    try:
        return dt.date.fromisoformat(text[:10])
    except ValueError:
        pass
    for fmt in TITLE_DATE_FORMATS:
        try:
            return dt.datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise SchemaViolationError(f"Invalid date format in workout title: {title}")


def session_duration(started: float, completed: float) -> int:
    """Minutes between two second timestamps, clamped for runaway or empty timers."""
    minutes = math.floor((completed - started) / 60 + 0.5)
    if minutes > settings.MAX_WORKOUT_MINUTES:
        logger.warning(f"Very long duration: {minutes} minutes, using {settings.DEFAULT_WORKOUT_MINUTES}")
        return settings.DEFAULT_WORKOUT_MINUTES
    if minutes == 0:
        return settings.DEFAULT_WORKOUT_MINUTES
    return minutes


def _validate_trainheroic(payload: Dict[str, Any]) -> TrainHeroicPayload:
    try:
        return TrainHeroicPayload.model_validate(payload)
    except ValidationError as exc:
        raise SchemaViolationError(f"Invalid TrainHeroic workout: {_describe(exc)}") from exc


def session_from_trainheroic(payload: Dict[str, Any], state: Optional[IngestionState] = None) -> RawSession:
    """Map one TrainHeroic saved-workout payload onto a RawSession."""
    raw = _validate_trainheroic(payload)
    saved = raw.saved_workout

    blocks = []
    for workout_set in saved.workout_sets:
        exercises = []
        for ex in workout_set.workout_set_exercises:
            if state is not None:
                state.register_exercise(ex.exercise_id, ex.exercise_title, ex.video_url)
            exercises.append(RawBlockExercise(exercise_id=ex.exercise_id, notation=ex.abr))
        blocks.append(RawBlock(order=workout_set.order, exercises=exercises))

    try:
        return RawSession(
            date=parse_title_date(saved.title),
            title=saved.title,
            duration=session_duration(saved.timestamp_started, saved.timestamp_completed),
            rpe=saved.rpe,
            blocks=blocks,
        )
    except ValidationError as exc:
        raise SchemaViolationError(f"Invalid TrainHeroic workout {saved.title!r}: {_describe(exc)}") from exc


def sessions_from_trainheroic(
    payloads: Iterable[Dict[str, Any]],
    state: Optional[IngestionState] = None,
    skip_duplicates: bool = False,
) -> Tuple[List[RawSession], List[CompileError]]:
    """
    Map a batch of TrainHeroic payloads, skipping (not aborting on) bad ones.

    Returns the sessions plus one CompileError per skipped payload. With
    skip_duplicates, a payload whose raw date or title was already seen in
    this run is skipped as well.
    """
    state = state if state is not None else IngestionState()
    sessions: List[RawSession] = []
    errors: List[CompileError] = []

    for index, payload in enumerate(payloads):
        try:
            session = session_from_trainheroic(payload, state)
        except SchemaViolationError as exc:
            logger.warning(f"Skipping TrainHeroic payload {index}: {exc}")
            errors.append(CompileError(index=index, message=str(exc)))
            continue

        if not any(block.exercises for block in session.blocks):
            logger.warning(f"No exercises found in TrainHeroic payload {index}")
            continue

        raw_date = str(payload.get("date"))
        if skip_duplicates:
            if state.is_duplicate(raw_date, session.title):
                logger.warning(f"Duplicate workout {session.title!r} ({raw_date}), skipping")
                continue
            state.remember(raw_date, session.title)

        sessions.append(session)

    return sessions, errors
