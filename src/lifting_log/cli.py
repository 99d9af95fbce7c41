"""Command line entry point: compile, classify and parse lifting logs."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, TypeAdapter, ValidationError

from lifting_log.config import settings
from lifting_log.models import (
    ClassifiedWorkoutBatch,
    CompileResult,
    ExerciseCatalog,
    SetEntry,
    WorkoutBatch,
)
from lifting_log.parsers.notation import parse_notation
from lifting_log.services.ingestion import IngestionState, sessions_from_trainheroic
from lifting_log.services.set_classifier import InvalidThresholdError, validate_threshold
from lifting_log.services.workout_assembler import WorkoutAssembler

logger = logging.getLogger("lifting_log.cli")


def _read_json(path: Path) -> dict:
    with open(path, encoding="utf-8") as fh:
        return json.load(fh)


def _write_model(path: Path, model: BaseModel):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(model.model_dump_json(by_alias=True, indent=2), encoding="utf-8")


def cmd_compile(args: argparse.Namespace) -> int:
    data = _read_json(args.input)
    if not isinstance(data, dict):
        logger.error(f"{args.input}: expected a JSON object with \"sessions\" or \"trainheroic\"")
        return 1

    assembler = WorkoutAssembler()
    state = IngestionState()

    if "trainheroic" in data:
        sessions, adapter_errors = sessions_from_trainheroic(
            data["trainheroic"], state, skip_duplicates=args.skip_duplicates
        )
        result = assembler.compile_workouts(sessions)
        result = CompileResult(workouts=result.workouts, errors=[*adapter_errors, *result.errors])
    else:
        result = assembler.compile_workouts(data.get("sessions", []))

    # Chronological, stable for equal dates
    workouts = sorted(result.workouts, key=lambda w: w.date)
    _write_model(args.output, WorkoutBatch(workouts=workouts))
    logger.info(f"Lifting log written to {args.output} ({len(workouts)} workouts)")

    for error in result.errors:
        logger.warning(f"Record {error.index} skipped: {error.message}")

    if args.catalog:
        _write_model(args.catalog, ExerciseCatalog.from_mapping(state.exercises))
        logger.info(f"Exercise catalog written to {args.catalog} ({len(state.exercises)} exercises)")

    return 0


def cmd_classify(args: argparse.Namespace) -> int:
    try:
        threshold = validate_threshold(args.threshold)
    except InvalidThresholdError as exc:
        logger.error(str(exc))
        return 1

    logger.info(f"Using threshold: {threshold * 100:.0f}%")
    batch = WorkoutBatch.model_validate(_read_json(args.input))
    logger.info(f"Processing {len(batch.workouts)} workouts...")

    assembler = WorkoutAssembler()
    classified = assembler.classify_workouts(batch.workouts, threshold=threshold, max_workers=args.workers)
    stats = assembler.summarize(classified)

    _write_model(args.output, ClassifiedWorkoutBatch(workouts=classified, stats=stats))
    logger.info(f"Classified lifting log saved to {args.output}")
    return 0


def cmd_parse(args: argparse.Namespace) -> int:
    sets = parse_notation(args.notation)
    print(TypeAdapter(List[SetEntry]).dump_json(sets, by_alias=True, indent=2).decode())
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lifting-log", description=__doc__)
    sub = parser.add_subparsers(dest="command", required=True)

    compile_p = sub.add_parser("compile", help="Compile raw sessions into workouts")
    compile_p.add_argument("input", type=Path, help='JSON with "sessions" or "trainheroic" records')
    compile_p.add_argument("output", type=Path, help='Output JSON ({"workouts": [...]})')
    compile_p.add_argument("--skip-duplicates", action="store_true",
                           help="Skip TrainHeroic workouts whose date or title was already seen")
    compile_p.add_argument("--catalog", type=Path, default=None,
                           help="Write collected exercise metadata to this file")
    compile_p.set_defaults(func=cmd_compile)

    classify_p = sub.add_parser("classify", help="Label warm-up and work sets")
    classify_p.add_argument("input", type=Path, help='Compiled workouts ({"workouts": [...]})')
    classify_p.add_argument("output", type=Path, help="Output JSON for classified workouts")
    classify_p.add_argument("--threshold", type=float, default=settings.CLASSIFY_THRESHOLD,
                            help="Fraction of max weight for work sets, in (0, 1] (default %(default)s)")
    classify_p.add_argument("--workers", type=int, default=settings.CLASSIFY_MAX_WORKERS,
                            help="Classify workouts on a thread pool of this size")
    classify_p.set_defaults(func=cmd_classify)

    parse_p = sub.add_parser("parse", help="Parse one notation string")
    parse_p.add_argument("notation")
    parse_p.set_defaults(func=cmd_parse)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=settings.LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        logger.error(f"Could not process {getattr(args, 'input', args.command)}: {exc}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
