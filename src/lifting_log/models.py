"""Data models for compiled lifting workouts.

Field names are snake_case in Python and serialize to the camelCase names of
the record-oriented interchange format (``model_dump(by_alias=True)``).
Both spellings are accepted on input.
"""
import datetime as dt
from typing import Dict, Iterable, List, Optional, Union

from pydantic import BaseModel, Field, computed_field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from lifting_log.utils import NAN, reps_or_zero

Reps = Union[int, float]


def null_to_nan(value):
    """NaN is written out as null in JSON; read it back as NaN."""
    return NAN if value is None else value


class _Record(BaseModel):
    """Frozen base for every record in the workout tree."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        frozen = True


class SetEntry(_Record):
    """A single set: either rep-based or duration-based, never both."""
    order: int = Field(..., ge=0)
    reps: Optional[Reps] = None
    duration_label: Optional[str] = None  # "MM:SS"
    weight: float = 0.0

    @field_validator("weight", mode="before")
    @classmethod
    def _null_weight_is_nan(cls, value):
        return null_to_nan(value)

    @model_validator(mode="before")
    @classmethod
    def _null_reps_is_nan(cls, data):
        # A NaN rep count is written out as null; only a missing duration makes it a rep set
        if isinstance(data, dict) and "reps" in data and data["reps"] is None:
            if data.get("duration_label") is None and data.get("durationLabel") is None:
                data = {**data, "reps": NAN}
        return data

    @model_validator(mode="after")
    def _reps_xor_duration(self):
        if (self.reps is None) == (self.duration_label is None):
            raise ValueError("a set needs exactly one of reps or duration_label")
        return self

    @property
    def is_timed(self) -> bool:
        return self.duration_label is not None

    @property
    def volume(self) -> float:
        if self.is_timed:
            return 0.0
        return reps_or_zero(self.reps) * self.weight


class ClassifiedSetEntry(SetEntry):
    """SetEntry annotated with its warm-up / work-set label."""
    is_work_set: bool


def sets_volume(sets: Iterable[SetEntry]) -> float:
    """Σ reps × weight; duration sets and NaN reps contribute 0 reps."""
    return sum((s.volume for s in sets), 0)


class ExerciseBlock(_Record):
    """All sets of one exercise within one workout."""
    exercise_id: int
    order: int
    sets: List[SetEntry] = Field(default_factory=list)
    volume: float = 0.0

    @field_validator("volume", mode="before")
    @classmethod
    def _null_volume_is_nan(cls, value):
        return null_to_nan(value)


class ClassifiedExerciseBlock(ExerciseBlock):
    sets: List[ClassifiedSetEntry] = Field(default_factory=list)
    work_volume: float = 0.0

    @field_validator("work_volume", mode="before")
    @classmethod
    def _null_work_volume_is_nan(cls, value):
        return null_to_nan(value)


class Workout(_Record):
    """A compiled lifting session."""
    uuid: str
    date: dt.date
    title: str
    duration: int = Field(..., description="Minutes")
    rpe: Optional[float] = None
    exercises: List[ExerciseBlock] = Field(default_factory=list)
    volume: float = 0.0

    @field_validator("volume", mode="before")
    @classmethod
    def _null_volume_is_nan(cls, value):
        return null_to_nan(value)


class ClassifiedWorkout(Workout):
    exercises: List[ClassifiedExerciseBlock] = Field(default_factory=list)
    work_volume: float = 0.0

    @field_validator("work_volume", mode="before")
    @classmethod
    def _null_work_volume_is_nan(cls, value):
        return null_to_nan(value)


class ExerciseMetadata(_Record):
    """Catalog entry collected during ingestion; opaque to the core."""
    id: int
    name: str
    slug: str
    video_url: Optional[str] = None
    category: str = ""
    primary_muscle_group: str = ""
    equipment: List[str] = Field(default_factory=list)


class SetClassificationStats(_Record):
    """Set counts across a batch of classified workouts."""
    total_sets: int = 0
    warmup_sets: int = 0
    work_sets: int = 0

    @computed_field(alias="warmupPct")
    @property
    def warmup_pct(self) -> float:
        return 100.0 * self.warmup_sets / self.total_sets if self.total_sets else 0.0

    @computed_field(alias="workPct")
    @property
    def work_pct(self) -> float:
        return 100.0 * self.work_sets / self.total_sets if self.total_sets else 0.0


# ---------------------------------------------------------------------------
# Input boundary
# ---------------------------------------------------------------------------


class RawBlockExercise(_Record):
    """One exercise of a source block: an id plus its notation string."""
    exercise_id: int
    notation: str


class RawBlock(_Record):
    """A source block; more than one exercise means a superset / tri-set."""
    order: int
    exercises: List[RawBlockExercise] = Field(default_factory=list)


class RawSession(_Record):
    """A raw session record handed over by an ingestion collaborator."""
    date: dt.date
    title: str
    duration: int = Field(..., ge=0, description="Minutes")
    rpe: Optional[float] = None
    uuid: Optional[str] = None
    blocks: List[RawBlock] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# File / response envelopes
# ---------------------------------------------------------------------------


class SessionBatch(_Record):
    sessions: List[RawSession] = Field(default_factory=list)


class WorkoutBatch(_Record):
    workouts: List[Workout] = Field(default_factory=list)


class ClassifiedWorkoutBatch(_Record):
    workouts: List[ClassifiedWorkout] = Field(default_factory=list)
    stats: Optional[SetClassificationStats] = None


class CompileError(_Record):
    """A raw record that was skipped during compilation."""
    index: int
    message: str


class CompileResult(_Record):
    workouts: List[Workout] = Field(default_factory=list)
    errors: List[CompileError] = Field(default_factory=list)


class ExerciseCatalog(_Record):
    exercises: List[ExerciseMetadata] = Field(default_factory=list)

    @classmethod
    def from_mapping(cls, exercises: Dict[int, ExerciseMetadata]) -> "ExerciseCatalog":
        return cls(exercises=sorted(exercises.values(), key=lambda e: e.id))
