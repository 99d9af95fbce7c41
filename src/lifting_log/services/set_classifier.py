"""
SetClassifier: warm-up vs work-set labelling.

Classification is a pure projection: it never mutates the Workout tree it is
given, it returns a parallel ClassifiedWorkout tree instead, so the same
compiled workouts can be re-classified with a different threshold.
"""

import logging
from typing import List, Sequence

from lifting_log.config import DEFAULT_CLASSIFY_THRESHOLD
from lifting_log.models import (
    ClassifiedExerciseBlock,
    ClassifiedSetEntry,
    ClassifiedWorkout,
    ExerciseBlock,
    SetEntry,
    Workout,
    sets_volume,
)
from lifting_log.utils import is_nan

logger = logging.getLogger(__name__)


class InvalidThresholdError(ValueError):
    """Raised when a classification threshold is outside (0, 1]."""


def validate_threshold(threshold: float) -> float:
    """Return the threshold if it lies in (0, 1], raise InvalidThresholdError otherwise."""
    try:
        value = float(threshold)
    except (TypeError, ValueError) as exc:
        raise InvalidThresholdError(f"Threshold must be a number, got {threshold!r}") from exc
    if not 0 < value <= 1:
        raise InvalidThresholdError(
            f"Threshold must be in (0, 1] (e.g. 0.85 for 85%), got {threshold!r}"
        )
    return value


def _label(sets: Sequence[SetEntry], boundary: int) -> List[ClassifiedSetEntry]:
    return [
        ClassifiedSetEntry(**s.model_dump(exclude={"is_work_set"}), is_work_set=i >= boundary)
        for i, s in enumerate(sets)
    ]


class SetClassifier:
    """
    Labels each set of an exercise as a warm-up or a work set.

    Rules (first match wins):
    1. Zero or one set: everything is work.
    2. All weights equal: everything is work, no ramp to detect.
    3. Heaviest weight is 0 (bodyweight): everything is work.
    4. The boundary is the first set at or above max_weight * threshold that
       is not followed by a set with both more weight and more reps.
    5. Sets before the boundary are warm-ups, the rest are work.
    6. No boundary found: everything is work.
    """

    def __init__(self, threshold: float = DEFAULT_CLASSIFY_THRESHOLD):
        self.threshold = validate_threshold(threshold)

    @staticmethod
    def is_still_warming_up(sets: Sequence[SetEntry], index: int) -> bool:
        """True if a later set has both a higher weight and more reps."""
        current = sets[index]
        current_reps = current.reps if current.reps is not None else 0

        for later in sets[index + 1:]:
            later_reps = later.reps if later.reps is not None else 0
            if later.weight > current.weight and later_reps > current_reps:
                return True

        return False

    def find_boundary(self, sets: Sequence[SetEntry]) -> int:
        """Index of the first work set; 0 means every set is work."""
        if len(sets) <= 1:
            return 0

        weights = [s.weight for s in sets]
        if any(is_nan(w) for w in weights):
            logger.debug("NaN weight in set sequence, labelling every set as work")
            return 0

        max_weight = max(weights)
        min_weight = min(weights)

        if max_weight == min_weight:
            return 0

        if max_weight == 0:
            return 0

        target = max_weight * self.threshold
        for i, s in enumerate(sets):
            if s.weight >= target and not self.is_still_warming_up(sets, i):
                return i

        logger.debug(f"No work-set boundary at target {target}, labelling every set as work")
        return 0

    def classify_sets(self, sets: Sequence[SetEntry]) -> List[ClassifiedSetEntry]:
        """Label sets in order; output has the same length and order as the input."""
        return _label(sets, self.find_boundary(sets))

    def classify_exercise(self, exercise: ExerciseBlock) -> ClassifiedExerciseBlock:
        sets = self.classify_sets(exercise.sets)
        return ClassifiedExerciseBlock(
            exercise_id=exercise.exercise_id,
            order=exercise.order,
            sets=sets,
            volume=exercise.volume,
            work_volume=sets_volume(s for s in sets if s.is_work_set),
        )

    def classify_workout(self, workout: Workout) -> ClassifiedWorkout:
        exercises = [self.classify_exercise(e) for e in workout.exercises]
        return ClassifiedWorkout(
            uuid=workout.uuid,
            date=workout.date,
            title=workout.title,
            duration=workout.duration,
            rpe=workout.rpe,
            exercises=exercises,
            volume=workout.volume,
            work_volume=sum((e.work_volume for e in exercises), 0),
        )


def classify_sets(
    sets: Sequence[SetEntry], threshold: float = DEFAULT_CLASSIFY_THRESHOLD
) -> List[ClassifiedSetEntry]:
    """Functional form of SetClassifier.classify_sets."""
    return SetClassifier(threshold).classify_sets(sets)
