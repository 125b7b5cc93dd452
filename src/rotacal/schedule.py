# src/rotacal/schedule.py
"""Gespeicherter Dienstplan: Eingaben + erzeugter Kalender als JSON-fähiger Datensatz.

Dates travel as ISO strings (YYYY-MM-DD), timestamps as ISO datetimes.
"""
import json
import logging
import uuid
from calendar import month_name, monthrange
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Dict, List, Optional

from .calendar_logic import generate_rotation_calendar, resolve_pattern, to_calendar_date
from .errors import ScheduleFormatError
from .models import CalendarDay, CustomPattern, MonthData

SCHEMA_VERSION = 'v1'


def _now() -> datetime:
    return datetime.now(timezone.utc)


def generate_schedule_id() -> str:
    return uuid.uuid4().hex[:12]


def default_schedule_name(start_date, pattern, custom_days=None) -> str:
    """z.B. '14/14 Rotation (Jan 2, 2024)' – mit dem gewünschten, nicht normalisierten Start."""
    rotation = resolve_pattern(pattern, custom_days)
    start = to_calendar_date(start_date)
    return f"{rotation.config.label} ({start.strftime('%b')} {start.day}, {start.year})"


@dataclass
class ScheduleMetadata:
    name: str
    rotation_pattern: str
    start_date: date
    custom_rotation: Optional[CustomPattern] = None
    id: str = field(default_factory=generate_schedule_id)
    created_at: datetime = field(default_factory=_now)
    updated_at: Optional[datetime] = None
    schema_version: str = SCHEMA_VERSION

    def __post_init__(self):
        if self.updated_at is None:
            self.updated_at = self.created_at


@dataclass
class SavedSchedule:
    metadata: ScheduleMetadata
    calendar: List[MonthData] = field(default_factory=list)

    def touch(self):
        self.metadata.updated_at = _now()


def create_schedule(start_date, pattern, months: int = 12, custom_days=None,
                    name: Optional[str] = None) -> SavedSchedule:
    """Kalender erzeugen und mit Metadaten verpacken."""
    rotation = resolve_pattern(pattern, custom_days)
    start = to_calendar_date(start_date)
    calendar = generate_rotation_calendar(start, rotation, months)
    meta = ScheduleMetadata(
        name=name or default_schedule_name(start, rotation),
        rotation_pattern=rotation.tag.value,
        start_date=start,
        custom_rotation=rotation if isinstance(rotation, CustomPattern) else None,
    )
    return SavedSchedule(meta, calendar)


# Export/Import
def month_to_dict(month: MonthData) -> Dict:
    return {
        'month': month.month,
        'year': month.year,
        'firstDayOfWeek': month.first_day_of_week,
        'days': [
            {
                'date': d.date.isoformat(),
                'isWorkDay': d.is_work_day,
                'isInRotation': d.is_in_rotation,
                'isTransitionDay': d.is_transition_day,
            }
            for d in month.days
        ],
    }


def _flag(d: Dict, key: str) -> bool:
    value = d[key]
    if not isinstance(value, bool):
        raise ScheduleFormatError(f"{key} on {d.get('date')} must be true or false, got {value!r}")
    return value


def month_from_dict(raw: Dict) -> MonthData:
    days = tuple(
        CalendarDay(
            date.fromisoformat(d['date']),
            _flag(d, 'isWorkDay'),
            _flag(d, 'isInRotation'),
            _flag(d, 'isTransitionDay'),
        )
        for d in raw['days']
    )
    year = int(raw['year'])
    if not days or days[0].date.day != 1 or days[0].date.year != year:
        raise ScheduleFormatError(f"{raw['month']} {year} must start on the first of the month")
    first = days[0].date
    _, length = monthrange(first.year, first.month)
    if raw['month'] != month_name[first.month]:
        raise ScheduleFormatError(f"month name {raw['month']!r} does not match {first.isoformat()}")
    if len(days) != length:
        raise ScheduleFormatError(f"{raw['month']} {year} has {len(days)} days, expected {length}")
    for i, day in enumerate(days):
        if day.date != first + timedelta(days=i):
            raise ScheduleFormatError(f"{raw['month']} {year} is not contiguous at {day.date.isoformat()}")
        if (day.is_work_day or day.is_transition_day) and not day.is_in_rotation:
            raise ScheduleFormatError(f"{day.date.isoformat()} is marked work or transition outside the rotation")
    first_day_of_week = raw['firstDayOfWeek']
    if first_day_of_week != first.isoweekday():
        raise ScheduleFormatError(f"firstDayOfWeek {first_day_of_week!r} does not match {first.isoformat()}")
    return MonthData(raw['month'], year, days, first_day_of_week)


def schedule_to_dict(schedule: SavedSchedule) -> Dict:
    meta = schedule.metadata
    custom = meta.custom_rotation
    return {
        'metadata': {
            'id': meta.id,
            'name': meta.name,
            'rotationPattern': meta.rotation_pattern,
            'startDate': meta.start_date.isoformat(),
            'customRotation': (
                {'workDays': custom.work_days, 'offDays': custom.off_days} if custom else None
            ),
            'createdAt': meta.created_at.isoformat(),
            'updatedAt': meta.updated_at.isoformat(),
            'schemaVersion': meta.schema_version,
        },
        'calendar': [month_to_dict(m) for m in schedule.calendar],
    }


def schedule_from_dict(raw: Dict) -> SavedSchedule:
    try:
        m = raw['metadata']
        rotation = resolve_pattern(m['rotationPattern'], m.get('customRotation'))
        meta = ScheduleMetadata(
            name=m['name'],
            rotation_pattern=rotation.tag.value,
            start_date=date.fromisoformat(m['startDate']),
            custom_rotation=rotation if isinstance(rotation, CustomPattern) else None,
            id=m['id'],
            created_at=datetime.fromisoformat(m['createdAt']),
            updated_at=datetime.fromisoformat(m['updatedAt']),
            schema_version=m.get('schemaVersion', SCHEMA_VERSION),
        )
        calendar = [month_from_dict(month) for month in raw['calendar']]
        for prev, cur in zip(calendar, calendar[1:]):
            if cur.days[0].date != prev.days[-1].date + timedelta(days=1):
                raise ScheduleFormatError(f"{cur.month} {cur.year} does not follow {prev.month} {prev.year}")
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise ScheduleFormatError(f"invalid schedule record: {e}") from e
    if meta.schema_version != SCHEMA_VERSION:
        logging.warning(f"Schedule {meta.id} has schema {meta.schema_version}, expected {SCHEMA_VERSION}")
    return SavedSchedule(meta, calendar)


def dumps_schedule(schedule: SavedSchedule) -> str:
    return json.dumps(schedule_to_dict(schedule), ensure_ascii=False, indent=2)


def loads_schedule(text: str) -> SavedSchedule:
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise ScheduleFormatError(f"schedule is not valid JSON: {e}") from e
    return schedule_from_dict(raw)
