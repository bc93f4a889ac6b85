"""Progress statistics service.

Builds time series and best personal records from a user's progress
entries over a date window:
- Weight progression
- Body fat progression
- One series per body measurement
- Best value per exercise across all personal records
"""

import logging
from datetime import date, timedelta
from typing import Iterable, Optional, Tuple

from sqlalchemy.orm import Session, selectinload

from app.models.progress import MEASUREMENT_FIELDS, PersonalRecord, ProgressEntry
from app.schemas.progress import (
    BodyFatPoint,
    MeasurementPoint,
    MeasurementsProgress,
    PersonalRecordStat,
    ProgressStats,
    WeightPoint,
)

logger = logging.getLogger(__name__)


class ProgressStatsService:
    """Aggregate progress entries into chartable statistics."""

    DEFAULT_WINDOW_DAYS = 30

    def resolve_date_range(
        self,
        start_date: Optional[date],
        end_date: Optional[date],
        today: Optional[date] = None,
    ) -> Tuple[date, date]:
        """
        Fill in missing window bounds.

        Args:
            start_date: Requested first day, defaults to end_date - 30 days
            end_date: Requested last day, defaults to today
            today: Override for the current date

        Returns:
            Tuple of (start_date, end_date), both inclusive

        Raises:
            ValueError: If start_date is after end_date
        """
        end = end_date or today or date.today()
        if start_date is not None:
            start = start_date
        elif end.toordinal() > self.DEFAULT_WINDOW_DAYS:
            start = end - timedelta(days=self.DEFAULT_WINDOW_DAYS)
        else:
            start = date.min
        if start > end:
            raise ValueError("startDate must be on or before endDate")
        return start, end

    def build_stats(
        self,
        entries: Iterable[ProgressEntry],
        start_date: date,
        end_date: date,
    ) -> ProgressStats:
        """
        Aggregate entries that are already filtered and sorted by date.

        Personal records keep the highest value per exercise. A later record
        only replaces the current best when strictly greater, so the first
        maximum wins on ties. Records whose exercise was deleted are skipped.
        """
        stats = ProgressStats(start_date=start_date, end_date=end_date)
        measurements = MeasurementsProgress()
        best = {}

        for entry in entries:
            if entry.weight_value is not None:
                stats.weight_progress.append(WeightPoint(
                    date=entry.date,
                    weight=entry.weight_value,
                    unit=entry.weight_unit,
                ))

            if entry.body_fat is not None:
                stats.body_fat_progress.append(BodyFatPoint(date=entry.date, body_fat=entry.body_fat))

            for name in MEASUREMENT_FIELDS:
                value = getattr(entry, name)
                if value is not None:
                    getattr(measurements, name).append(MeasurementPoint(date=entry.date, value=value))

            for record in entry.personal_records:
                if record.exercise_id is None:
                    continue
                current = best.get(record.exercise_id)
                if current is None or record.value > current.value:
                    best[record.exercise_id] = self._record_stat(record, entry)

        stats.measurements_progress = measurements
        stats.personal_records = list(best.values())
        return stats

    @staticmethod
    def _record_stat(record: PersonalRecord, entry: ProgressEntry) -> PersonalRecordStat:
        return PersonalRecordStat(
            exercise=record.exercise_id,
            exercise_name=record.exercise.name if record.exercise is not None else None,
            value=record.value,
            unit=record.unit,
            date=record.date or entry.date,
        )

    def get_stats(
        self,
        db: Session,
        user_id: int,
        start_date: date,
        end_date: date,
    ) -> ProgressStats:
        """
        Compute statistics for one user's entries between two dates inclusive.

        Args:
            db: Database session
            user_id: Owner of the entries
            start_date: First day of the window
            end_date: Last day of the window

        Returns:
            ProgressStats for the window
        """
        entries = (
            db.query(ProgressEntry)
            .options(selectinload(ProgressEntry.personal_records).selectinload(PersonalRecord.exercise))
            .filter(
                ProgressEntry.user_id == user_id,
                ProgressEntry.date >= start_date,
                ProgressEntry.date <= end_date,
            )
            .order_by(ProgressEntry.date.asc(), ProgressEntry.id.asc())
            .all()
        )

        logger.info(f"Computing progress stats for user {user_id} over {len(entries)} entries")
        return self.build_stats(entries, start_date, end_date)


# Singleton instance for use across the application
progress_stats_service = ProgressStatsService()
