"""ExerciseAggregator: builds a Workout from one raw session.

Each notation string is parsed, exercises that appear more than once in the
session (superset rounds) are merged into a single block, and volumes are
computed.
"""

import logging
import uuid
from typing import Dict, Iterable, List, Optional

from lifting_log.models import ExerciseBlock, RawBlock, RawSession, SetEntry, Workout, sets_volume
from lifting_log.parsers.notation import NotationParser

logger = logging.getLogger(__name__)

WORKOUT_UUID_NAMESPACE = uuid.UUID("6f1c3c8e-4f1e-5b7a-9d2e-6c1f0a7e4b21")


def workout_uuid(session: RawSession) -> str:
    """The session's own uuid, or one derived from its date and title."""
    if session.uuid:
        return session.uuid
    return str(uuid.uuid5(WORKOUT_UUID_NAMESPACE, f"{session.date.isoformat()}|{session.title}"))


def renumber(sets: Iterable[SetEntry]) -> List[SetEntry]:
    """Copy sets with order reassigned 0..n-1."""
    return [s.model_copy(update={"order": i}) for i, s in enumerate(sets)]


class ExerciseAggregator:
    """
    Merges a session's notation blocks into one ExerciseBlock per exercise.

    Ordering rules:
    1. Blocks are visited by ascending block order, then exercise position.
    2. The first exercise of a block takes the block's order.
    3. Further exercises of the same block (superset / tri-set members) take
       the next value of a workout-wide counter that restarts from the
       block's order at every block.
    4. A repeated exercise id keeps its first order; its sets are appended
       and renumbered, and its volume recomputed.
    """

    def __init__(self, parser: Optional[NotationParser] = None):
        self.parser = parser or NotationParser()

    def aggregate_exercises(self, blocks: Iterable[RawBlock]) -> List[ExerciseBlock]:
        merged: Dict[int, ExerciseBlock] = {}
        next_order = 0

        for block in sorted(blocks, key=lambda b: b.order):
            for position, raw in enumerate(block.exercises):
                sets = self.parser.parse(raw.notation)

                if position == 0:
                    order = block.order
                    next_order = block.order
                else:
                    next_order += 1
                    order = next_order

                existing = merged.get(raw.exercise_id)
                if existing is None:
                    merged[raw.exercise_id] = ExerciseBlock(
                        exercise_id=raw.exercise_id,
                        order=order,
                        sets=sets,
                        volume=sets_volume(sets),
                    )
                    continue

                combined = renumber([*existing.sets, *sets])
                logger.debug(
                    f"Merged repeat of exercise {raw.exercise_id} "
                    f"({len(existing.sets)} + {len(sets)} sets)"
                )
                merged[raw.exercise_id] = existing.model_copy(
                    update={"sets": combined, "volume": sets_volume(combined)}
                )

        return list(merged.values())

    def build_workout(self, session: RawSession) -> Workout:
        """Parse and merge every block of a session into a Workout."""
        exercises = self.aggregate_exercises(session.blocks)
        return Workout(
            uuid=workout_uuid(session),
            date=session.date,
            title=session.title,
            duration=session.duration,
            rpe=session.rpe,
            exercises=exercises,
            volume=sum((e.volume for e in exercises), 0),
        )
