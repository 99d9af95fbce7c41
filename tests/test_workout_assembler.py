"""Tests for WorkoutAssembler batch compilation and classification."""

import logging

import pytest

from lifting_log.models import RawSession
from lifting_log.services.set_classifier import InvalidThresholdError
from lifting_log.services.workout_assembler import WorkoutAssembler


@pytest.fixture
def assembler():
    return WorkoutAssembler()


class TestCompileWorkouts:
    def test_compiles_dict_records(self, assembler, sample_session_dict):
        result = assembler.compile_workouts([sample_session_dict])

        assert result.errors == []
        assert len(result.workouts) == 1
        assert [e.exercise_id for e in result.workouts[0].exercises] == [101, 202, 303, 404]

    def test_accepts_models(self, assembler, sample_session_dict):
        session = RawSession.model_validate(sample_session_dict)
        result = assembler.compile_workouts([session])
        assert len(result.workouts) == 1

    def test_bad_record_is_skipped_not_fatal(self, assembler, sample_session_dict, caplog):
        bad = {"title": "no date", "duration": 10}

        with caplog.at_level(logging.WARNING):
            result = assembler.compile_workouts([bad, sample_session_dict])

        assert len(result.workouts) == 1
        assert len(result.errors) == 1
        assert result.errors[0].index == 0
        assert "date" in result.errors[0].message
        assert "Skipping session record 0" in caplog.text

    def test_negative_duration_rejected(self, assembler, sample_session_dict):
        result = assembler.compile_workouts([{**sample_session_dict, "duration": -5}])
        assert result.workouts == []
        assert result.errors[0].index == 0

    def test_preserves_input_order(self, assembler, sample_session_dict):
        later = {**sample_session_dict, "date": "2023-03-01", "title": "2023-03-01"}
        result = assembler.compile_workouts([later, sample_session_dict])
        assert [w.date.isoformat() for w in result.workouts] == ["2023-03-01", "2023-01-05"]

    def test_empty_batch(self, assembler):
        result = assembler.compile_workouts([])
        assert result.workouts == []
        assert result.errors == []


class TestClassifyWorkouts:
    def test_classifies_every_exercise(self, assembler, sample_session_dict):
        workouts = assembler.compile_workouts([sample_session_dict]).workouts
        classified = assembler.classify_workouts(workouts, threshold=0.85)

        squat = classified[0].exercises[0]
        assert [s.is_work_set for s in squat.sets] == [False, True, True, True]
        assert squat.work_volume == 2225

    def test_invalid_threshold_raises_before_work(self, assembler):
        with pytest.raises(InvalidThresholdError):
            assembler.classify_workouts([], threshold=1.2)

    def test_thread_pool_keeps_order(self, assembler, sample_session_dict):
        records = [
            {**sample_session_dict, "date": f"2023-01-{day:02d}", "title": f"2023-01-{day:02d}"}
            for day in range(1, 11)
        ]
        workouts = assembler.compile_workouts(records).workouts

        serial = assembler.classify_workouts(workouts)
        pooled = assembler.classify_workouts(workouts, max_workers=4)

        assert [w.uuid for w in pooled] == [w.uuid for w in workouts]
        assert [w.model_dump() for w in pooled] == [w.model_dump() for w in serial]

    def test_reclassify_with_new_threshold(self, assembler, sample_session_dict):
        workouts = assembler.compile_workouts([sample_session_dict]).workouts

        strict = assembler.classify_workouts(workouts, threshold=1.0)
        loose = assembler.classify_workouts(workouts, threshold=0.85)

        assert [s.is_work_set for s in strict[0].exercises[0].sets] == [False, False, True, True]
        assert [s.is_work_set for s in loose[0].exercises[0].sets] == [False, True, True, True]


class TestSummarize:
    def test_counts_and_percentages(self, assembler, sample_session_dict):
        workouts = assembler.compile_workouts([sample_session_dict]).workouts
        stats = assembler.summarize(assembler.classify_workouts(workouts))

        # 4 squat + 5 bench + 5 row + 1 carry
        assert stats.total_sets == 15
        assert stats.warmup_sets + stats.work_sets == 15
        assert stats.warmup_pct + stats.work_pct == pytest.approx(100.0)

    def test_empty_batch(self, assembler):
        stats = assembler.summarize([])
        assert stats.total_sets == 0
        assert stats.warmup_pct == 0.0
        assert stats.work_pct == 0.0
