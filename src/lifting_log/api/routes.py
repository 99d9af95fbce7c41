"""
API routes for notation parsing, workout compilation and set classification.

Responses are written with model_dump_json(by_alias=True) so field names
follow the camelCase interchange format and NaN sentinels become null.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel, Field

from lifting_log import __version__
from lifting_log.config import settings
from lifting_log.models import (
    ClassifiedWorkoutBatch,
    SetEntry,
    Workout,
)
from lifting_log.parsers.notation import NotationParser, RepsScheme
from lifting_log.services.set_classifier import InvalidThresholdError
from lifting_log.services.workout_assembler import WorkoutAssembler

logger = logging.getLogger(__name__)

router = APIRouter()

parser = NotationParser()
assembler = WorkoutAssembler()


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------


class ParseNotationRequest(BaseModel):
    """Request model for POST /notation/parse"""
    notation: str = Field(..., max_length=2000, description="Set notation, e.g. '4 x 5 @ 95,135,155,155'")


class ParseNotationResponse(BaseModel):
    """Response model for POST /notation/parse"""
    notation: str
    scheme: RepsScheme
    sets: List[SetEntry]


class CompileRequest(BaseModel):
    """Request model for POST /workouts/compile; records are validated one by one."""
    sessions: List[Dict[str, Any]] = Field(default_factory=list)


class ClassifyRequest(BaseModel):
    """Request model for POST /workouts/classify"""
    workouts: List[Workout] = Field(default_factory=list)
    threshold: Optional[float] = Field(default=None, description="Fraction of max weight, in (0, 1]")


def _json(model: BaseModel) -> Response:
    return Response(content=model.model_dump_json(by_alias=True), media_type="application/json")


# ---------------------------------------------------------------------------
# Health / version
# ---------------------------------------------------------------------------


@router.get("/health")
def health():
    """Health check endpoint."""
    return {"ok": True}


@router.get("/version")
def get_version():
    """Get API version information."""
    return {
        "service": "lifting-log-compiler",
        "version": __version__,
        "environment": settings.ENVIRONMENT,
    }


# ---------------------------------------------------------------------------
# Parse / compile / classify
# ---------------------------------------------------------------------------


@router.post("/notation/parse")
def parse_notation(payload: ParseNotationRequest):
    """Parse a single notation string into sets."""
    reps_spec, weight_spec = parser.split_notation(payload.notation)
    scheme = parser.parse_scheme(reps_spec)
    sets = parser.expand(scheme, parser.parse_weights(weight_spec))
    return _json(ParseNotationResponse(notation=payload.notation, scheme=scheme, sets=sets))


@router.post("/workouts/compile")
def compile_workouts(payload: CompileRequest):
    """Compile raw session records into workouts; bad records are reported, not fatal."""
    result = assembler.compile_workouts(payload.sessions)
    return _json(result)


@router.post("/workouts/classify")
def classify_workouts(payload: ClassifyRequest):
    """Classify every set of the given workouts as warm-up or work."""
    threshold = payload.threshold if payload.threshold is not None else settings.CLASSIFY_THRESHOLD
    try:
        classified = assembler.classify_workouts(
            payload.workouts,
            threshold=threshold,
            max_workers=settings.CLASSIFY_MAX_WORKERS,
        )
    except InvalidThresholdError as e:
        raise HTTPException(status_code=400, detail=str(e))

    stats = assembler.summarize(classified)
    return _json(ClassifiedWorkoutBatch(workouts=classified, stats=stats))
