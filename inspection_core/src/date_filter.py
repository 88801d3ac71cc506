"""
Date-Range Filter

Selects the inspections whose calendar day lies within an inclusive range.
The time of day of an inspection is ignored: two inspections on the same
day pass or fail the same bounds together.
"""

import re
from datetime import date, datetime, timezone
from typing import Iterable, Optional, Union

from .errors import InvalidDateBound
from .models import InspectionRecord

DateBound = Union[date, str, None]

_ISO_DAY = re.compile(r"\d{4}-\d{2}-\d{2}")


def parse_date_bound(value: DateBound) -> Optional[date]:
    """Parse a filter bound. `None` or an empty string means no constraint."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if not _ISO_DAY.fullmatch(text):
            raise InvalidDateBound(value)
        try:
            return date.fromisoformat(text)
        except ValueError:
            raise InvalidDateBound(value) from None
    raise InvalidDateBound(value)


def inspection_day(record: InspectionRecord) -> date:
    """Calendar day of an inspection, in the timestamp's own offset."""
    return record.date.date()


def filter_by_range(
    records: Iterable[InspectionRecord],
    start: DateBound = None,
    end: DateBound = None,
) -> list[InspectionRecord]:
    """
    Keep records with start <= day <= end. Both bounds are inclusive and optional.

    Raises:
        InvalidDateBound: a non-empty bound is not a YYYY-MM-DD date
    """
    start_day = parse_date_bound(start)
    end_day = parse_date_bound(end)

    if start_day is None and end_day is None:
        return list(records)

    return [
        record
        for record in records
        if (start_day is None or inspection_day(record) >= start_day)
        and (end_day is None or inspection_day(record) <= end_day)
    ]


def newest_first(records: Iterable[InspectionRecord]) -> list[InspectionRecord]:
    """Order inspections by timestamp, most recent first. Ties keep input order."""
    return sorted(records, key=_instant, reverse=True)


def _instant(record: InspectionRecord) -> datetime:
    # Naive timestamps are read as UTC, never as server-local time
    if record.date.tzinfo is None:
        return record.date.replace(tzinfo=timezone.utc)
    return record.date
