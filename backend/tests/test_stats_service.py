"""Tests for the progress statistics aggregator."""

from datetime import date

import pytest

from app.models.exercise import Exercise, ExerciseCategory
from app.models.progress import PersonalRecord, ProgressEntry, RecordUnit
from app.models.user import WeightUnit
from app.services.stats_service import ProgressStatsService

BENCH = Exercise(id=1, name="Bench Press", category=ExerciseCategory.STRENGTH)
SQUAT = Exercise(id=2, name="Back Squat", category=ExerciseCategory.STRENGTH)


def make_entry(entry_date, weight=None, body_fat=None, records=(), **measurements):
    entry = ProgressEntry(
        date=entry_date,
        weight_value=weight,
        weight_unit=WeightUnit.KG,
        body_fat=body_fat,
        **measurements,
    )
    entry.personal_records = [
        PersonalRecord(exercise_id=exercise.id if exercise else None, exercise=exercise,
                       value=value, unit=RecordUnit.KG, date=record_date)
        for exercise, value, record_date in records
    ]
    return entry


@pytest.fixture
def service():
    return ProgressStatsService()


class TestResolveDateRange:
    def test_defaults_to_last_thirty_days(self, service):
        start, end = service.resolve_date_range(None, None, today=date(2024, 3, 31))
        assert (start, end) == (date(2024, 3, 1), date(2024, 3, 31))

    def test_start_defaults_relative_to_end(self, service):
        start, end = service.resolve_date_range(None, date(2024, 2, 10))
        assert start == date(2024, 1, 11)
        assert end == date(2024, 2, 10)

    def test_explicit_range_kept(self, service):
        assert service.resolve_date_range(date(2024, 1, 1), date(2024, 1, 1)) == (
            date(2024, 1, 1),
            date(2024, 1, 1),
        )

    def test_inverted_range_rejected(self, service):
        with pytest.raises(ValueError):
            service.resolve_date_range(date(2024, 2, 1), date(2024, 1, 1))

    def test_window_start_stops_at_earliest_date(self, service):
        start, end = service.resolve_date_range(None, date(1, 1, 5))
        assert start == date.min
        assert end == date(1, 1, 5)


class TestBuildStats:
    def test_series_only_contain_present_values(self, service):
        entries = [
            make_entry(date(2024, 1, 1), weight=80.0, body_fat=18.0, waist=84.0),
            make_entry(date(2024, 1, 8), weight=79.5, chest=101.0),
            make_entry(date(2024, 1, 15)),
        ]

        stats = service.build_stats(entries, date(2024, 1, 1), date(2024, 1, 31))

        assert [(p.date, p.weight) for p in stats.weight_progress] == [
            (date(2024, 1, 1), 80.0),
            (date(2024, 1, 8), 79.5),
        ]
        assert [(p.date, p.body_fat) for p in stats.body_fat_progress] == [(date(2024, 1, 1), 18.0)]
        assert [p.value for p in stats.measurements_progress.waist] == [84.0]
        assert [p.value for p in stats.measurements_progress.chest] == [101.0]
        assert stats.measurements_progress.hips == []
        assert stats.start_date == date(2024, 1, 1)
        assert stats.end_date == date(2024, 1, 31)

    def test_keeps_best_record_per_exercise(self, service):
        entries = [
            make_entry(date(2024, 1, 1), records=[(BENCH, 100.0, None), (SQUAT, 140.0, None)]),
            make_entry(date(2024, 1, 20), records=[(BENCH, 120.0, None)]),
        ]

        stats = service.build_stats(entries, date(2024, 1, 1), date(2024, 1, 31))

        assert [(r.exercise, r.exercise_name, r.value, r.date) for r in stats.personal_records] == [
            (1, "Bench Press", 120.0, date(2024, 1, 20)),
            (2, "Back Squat", 140.0, date(2024, 1, 1)),
        ]

    def test_first_maximum_wins_on_ties(self, service):
        entries = [
            make_entry(date(2024, 1, 1), records=[(BENCH, 100.0, None)]),
            make_entry(date(2024, 1, 2), records=[(BENCH, 100.0, None)]),
        ]

        stats = service.build_stats(entries, date(2024, 1, 1), date(2024, 1, 31))

        assert len(stats.personal_records) == 1
        assert stats.personal_records[0].date == date(2024, 1, 1)

    def test_record_date_overrides_entry_date(self, service):
        entries = [make_entry(date(2024, 1, 10), records=[(BENCH, 90.0, date(2024, 1, 9))])]

        stats = service.build_stats(entries, date(2024, 1, 1), date(2024, 1, 31))

        assert stats.personal_records[0].date == date(2024, 1, 9)

    def test_records_without_exercise_skipped(self, service):
        entries = [make_entry(date(2024, 1, 1), records=[(None, 200.0, None)])]

        stats = service.build_stats(entries, date(2024, 1, 1), date(2024, 1, 31))

        assert stats.personal_records == []

    def test_no_entries(self, service):
        stats = service.build_stats([], date(2024, 1, 1), date(2024, 1, 31))

        assert stats.weight_progress == []
        assert stats.body_fat_progress == []
        assert stats.personal_records == []
