"""WorkoutAssembler: batch fan-out over the aggregator and the classifier."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Iterable, List, Optional, Union

from lifting_log.config import DEFAULT_CLASSIFY_THRESHOLD
from lifting_log.models import (
    ClassifiedWorkout,
    CompileError,
    CompileResult,
    RawSession,
    SetClassificationStats,
    Workout,
)
from lifting_log.services.aggregator import ExerciseAggregator
from lifting_log.services.ingestion import SchemaViolationError, validate_session
from lifting_log.services.set_classifier import SetClassifier

logger = logging.getLogger(__name__)


class WorkoutAssembler:
    """Runs aggregation during ingestion and classification on demand."""

    def __init__(self, aggregator: Optional[ExerciseAggregator] = None):
        self.aggregator = aggregator or ExerciseAggregator()

    def compile_workouts(
        self,
        sessions: Iterable[Union[RawSession, Dict[str, Any]]],
    ) -> CompileResult:
        """
        Build a Workout for every raw session record.

        A record that fails validation is logged, reported in
        CompileResult.errors and skipped; the rest of the batch continues.

        Args:
            sessions: Raw session records (dicts or RawSession models).

        Returns:
            CompileResult with workouts in input order.
        """
        workouts: List[Workout] = []
        errors: List[CompileError] = []

        for index, record in enumerate(sessions):
            try:
                session = validate_session(record)
            except SchemaViolationError as exc:
                logger.warning(f"Skipping session record {index}: {exc}")
                errors.append(CompileError(index=index, message=str(exc)))
                continue
            workouts.append(self.aggregator.build_workout(session))

        logger.info(f"Compiled {len(workouts)} workouts ({len(errors)} records skipped)")
        return CompileResult(workouts=workouts, errors=errors)

    def classify_workouts(
        self,
        workouts: Iterable[Workout],
        threshold: float = DEFAULT_CLASSIFY_THRESHOLD,
        max_workers: Optional[int] = None,
    ) -> List[ClassifiedWorkout]:
        """
        Classify every set of every workout.

        The threshold is validated before any work is done. With max_workers
        the workouts are classified on a thread pool; output order always
        matches input order.
        """
        classifier = SetClassifier(threshold)
        workouts = list(workouts)

        if max_workers and max_workers > 1 and len(workouts) > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                return list(executor.map(classifier.classify_workout, workouts))

        return [classifier.classify_workout(w) for w in workouts]

    @staticmethod
    def summarize(workouts: Iterable[ClassifiedWorkout]) -> SetClassificationStats:
        """Count total, warm-up and work sets across a classified batch."""
        total_sets = 0
        work_sets = 0

        for workout in workouts:
            for exercise in workout.exercises:
                for s in exercise.sets:
                    total_sets += 1
                    if s.is_work_set:
                        work_sets += 1

        stats = SetClassificationStats(
            total_sets=total_sets,
            warmup_sets=total_sets - work_sets,
            work_sets=work_sets,
        )
        logger.info(f"Total sets: {stats.total_sets}")
        logger.info(f"Warmup sets: {stats.warmup_sets} ({stats.warmup_pct:.1f}%)")
        logger.info(f"Work sets: {stats.work_sets} ({stats.work_pct:.1f}%)")
        return stats
