import calendar
import logging
from collections.abc import Mapping
from datetime import date, datetime, timedelta
from typing import List, Optional, Union

from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta

from .errors import RotationConfigError, StartDateError
from .models import (
    CalendarDay, CustomPattern, MonthData, NamedPattern, Rotation,
    RotationPattern, WeekdayAdjustment, WorkPeriod,
)

# Ankerwochentag aller Rotationen: Dienstag (0=Montag … 6=Sonntag)
ANCHOR_WEEKDAY = 1

CUSTOM_TAGS = {"custom", "other"}

DateLike = Union[date, datetime, str]
CustomDays = Union[CustomPattern, Mapping, tuple, list]


def to_calendar_date(value: DateLike) -> date:
    """Reduziere Datum, Datetime oder ISO-String auf das reine Kalenderdatum.

    Uhrzeit und Zeitzone werden verworfen; es zählen nur Jahr, Monat und Tag,
    wie sie im Wert selbst stehen.
    """
    # datetime ist eine date-Unterklasse, daher zuerst prüfen
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return isoparse(value.strip()).date()
        except (ValueError, OverflowError) as e:
            raise StartDateError(f"cannot parse start date {value!r}") from e
    raise StartDateError(f"start date must be a date, datetime or ISO string, got {type(value).__name__}")


def normalize_start_date(requested: DateLike) -> date:
    """Letzter Dienstag am oder vor dem gewünschten Datum."""
    day = to_calendar_date(requested)
    offset = (day.weekday() - ANCHOR_WEEKDAY) % 7
    try:
        return day - timedelta(days=offset)
    except OverflowError as e:
        raise StartDateError(f"{day.isoformat()} has no preceding Tuesday in the supported range") from e


def calculate_weekday_adjustment(start_date: DateLike, work_days: int, off_days: int) -> WeekdayAdjustment:
    """
    Verschiebe bei wochenbasierten Zyklen (Arbeit + frei ist ein Vielfaches von 7)
    einen Tag zwischen Arbeit und frei, damit der letzte Arbeitstag auf denselben
    Wochentag fällt wie der erste. Die Zykluslänge bleibt gleich.

    Für die Standardrotationen ist das immer +1 Arbeitstag / -1 freier Tag.
    Lässt sich der Wochentag nur über mehrere Tage treffen, wird die kürzere
    Richtung genommen, solange keine Seite negativ wird.
    """
    total = work_days + off_days
    if total == 0 or total % 7:
        return WeekdayAdjustment(work_days, off_days)

    start_weekday = to_calendar_date(start_date).weekday()
    nominal_end_weekday = (start_weekday + work_days - 1) % 7
    shift = (start_weekday - nominal_end_weekday) % 7
    if shift == 0:
        return WeekdayAdjustment(work_days, off_days)

    if shift > 3:
        shift -= 7
    if off_days - shift < 0:
        shift -= 7
    elif work_days + shift < 0:
        shift += 7
    return WeekdayAdjustment(work_days + shift, off_days - shift)


def _custom_from(custom_days: Optional[CustomDays]) -> CustomPattern:
    if custom_days is None:
        raise RotationConfigError("custom rotation requires work_days and off_days")
    if isinstance(custom_days, CustomPattern):
        return custom_days
    if isinstance(custom_days, Mapping):
        work = custom_days.get("work_days", custom_days.get("workDays"))
        off = custom_days.get("off_days", custom_days.get("offDays"))
        if work is None or off is None:
            raise RotationConfigError(f"custom rotation is missing day counts: {dict(custom_days)!r}")
        return CustomPattern(work, off)
    if isinstance(custom_days, (tuple, list)) and len(custom_days) == 2:
        return CustomPattern(custom_days[0], custom_days[1])
    raise RotationConfigError(f"cannot read custom day counts from {custom_days!r}")


def resolve_pattern(pattern: Union[Rotation, RotationPattern, str],
                    custom_days: Optional[CustomDays] = None) -> Rotation:
    """Mache aus Enum, Tag-String oder Variante die passende Rotation.

    Tageszahlen sind nur bei Custom erlaubt; bei Standardrotationen ist das ein Fehler.
    """
    if isinstance(pattern, NamedPattern):
        if custom_days is not None:
            raise RotationConfigError(f"custom day counts given for standard rotation {pattern.tag.value!r}")
        return pattern
    if isinstance(pattern, CustomPattern):
        if custom_days is not None and _custom_from(custom_days) != pattern:
            raise RotationConfigError(f"custom day counts {custom_days!r} conflict with {pattern!r}")
        return pattern
    if isinstance(pattern, RotationPattern):
        tag = pattern.value
    elif isinstance(pattern, str):
        tag = pattern.strip()
    else:
        raise RotationConfigError(f"unsupported rotation pattern {pattern!r}")

    if tag.lower() in CUSTOM_TAGS:
        return _custom_from(custom_days)
    if custom_days is not None:
        raise RotationConfigError(f"custom day counts given for standard rotation {tag!r}")
    return NamedPattern(tag)


def effective_day_counts(rotation: Rotation, rotation_start: date) -> WeekdayAdjustment:
    """Tageszahlen, mit denen jede Periode gebaut wird. Custom bleibt unverändert."""
    config = rotation.config
    if isinstance(rotation, CustomPattern):
        return WeekdayAdjustment(config.work_days, config.off_days)
    return calculate_weekday_adjustment(rotation_start, config.work_days, config.off_days)


def generate_work_periods(rotation_start: date, work_days: int, off_days: int, until: date) -> List[WorkPeriod]:
    """Alle Arbeitsblöcke, die am oder vor `until` beginnen.

    Ohne Arbeitstage gibt es keine Blöcke (und damit keine Wechseltage).
    """
    cycle = work_days + off_days
    if cycle <= 0:
        raise RotationConfigError("rotation cycle must be at least one day long")
    periods: List[WorkPeriod] = []
    if work_days == 0:
        return periods

    period_start = rotation_start
    while period_start <= until:
        try:
            period_end = period_start + timedelta(days=work_days - 1)
        except OverflowError:
            period_end = date.max
        periods.append(WorkPeriod(period_start, period_end))
        try:
            period_start += timedelta(days=cycle)
        except OverflowError:
            break
    return periods


def _check_month_count(months) -> int:
    if isinstance(months, bool) or not isinstance(months, int):
        raise RotationConfigError(f"month count must be an integer, got {months!r}")
    if months < 1:
        raise RotationConfigError(f"month count must be positive, got {months}")
    return months


def generate_rotation_calendar(
    start_date: DateLike,
    pattern: Union[Rotation, RotationPattern, str],
    months: int = 12,
    custom_days: Optional[CustomDays] = None,
) -> List[MonthData]:
    """
    Erzeuge `months` aufeinanderfolgende Kalendermonate ab dem Monat des
    gewünschten Startdatums. Die Rotation selbst beginnt am normalisierten
    Startdatum (Dienstag); alle Tage davor liegen außerhalb der Rotation.
    """
    months = _check_month_count(months)
    requested = to_calendar_date(start_date)
    rotation_start = normalize_start_date(requested)
    rotation = resolve_pattern(pattern, custom_days)
    work_days, off_days = effective_day_counts(rotation, rotation_start)

    first_month = requested.replace(day=1)
    try:
        range_end = first_month + relativedelta(months=months) - timedelta(days=1)
    except (ValueError, OverflowError) as e:
        raise StartDateError(f"{months} months from {requested.isoformat()} exceed the supported date range") from e

    logging.debug(
        "Rotation %s: start %s (requested %s), %d/%d days, %d months",
        rotation.tag.value, rotation_start, requested, work_days, off_days, months,
    )

    periods = generate_work_periods(rotation_start, work_days, off_days, range_end)
    work_dates = set()
    transition_dates = set()
    for period in periods:
        transition_dates.add(period.start)
        transition_dates.add(period.end)
        covered_end = min(period.end, range_end)
        for n in range((covered_end - period.start).days + 1):
            work_dates.add(period.start + timedelta(days=n))

    result: List[MonthData] = []
    for offset in range(months):
        month_start = first_month + relativedelta(months=offset)
        _, last = calendar.monthrange(month_start.year, month_start.month)
        days = []
        for d in range(1, last + 1):
            current = month_start.replace(day=d)
            if current < rotation_start:
                days.append(CalendarDay(current))
            else:
                days.append(CalendarDay(
                    current,
                    is_work_day=current in work_dates,
                    is_in_rotation=True,
                    is_transition_day=current in transition_dates,
                ))
        result.append(MonthData(
            month=calendar.month_name[month_start.month],
            year=month_start.year,
            days=tuple(days),
            first_day_of_week=month_start.isoweekday(),
        ))
    return result
