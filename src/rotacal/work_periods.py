from datetime import date
from typing import Dict, List, Optional, Sequence

from .calendar_logic import DateLike, to_calendar_date
from .models import MonthData, WorkPeriod


def extract_work_periods(month: MonthData) -> List[WorkPeriod]:
    """Zusammenhängende Arbeitsblöcke innerhalb eines Monats (am Monatsrand abgeschnitten)."""
    periods: List[WorkPeriod] = []
    current_start: Optional[date] = None
    previous: Optional[date] = None

    for day in month.days:
        if day.is_work_day and day.is_in_rotation:
            if current_start is None:
                current_start = day.date
        elif current_start is not None:
            periods.append(WorkPeriod(current_start, previous))
            current_start = None
        previous = day.date

    if current_start is not None:
        periods.append(WorkPeriod(current_start, previous))
    return periods


def _short(d: date) -> str:
    return f"{d.strftime('%b')} {d.day}"


def format_work_period(period: WorkPeriod) -> str:
    """'Jan 2 -> 16' im selben Monat, 'Jan 30 -> Feb 12' über den Monatswechsel."""
    if period.start == period.end:
        return _short(period.start)
    if (period.start.year, period.start.month) == (period.end.year, period.end.month):
        return f"{_short(period.start)} -> {period.end.day}"
    return f"{_short(period.start)} -> {_short(period.end)}"


def format_work_pattern_display(periods: Sequence[WorkPeriod]) -> str:
    if not periods:
        return "🏖️ Off this month"
    return "🛠️ " + ", ".join(format_work_period(p) for p in periods)


def period_status_on(calendar: Sequence[MonthData], on_date: Optional[DateLike] = None) -> Optional[Dict]:
    """
    Status eines Tages im erzeugten Kalender (Standard: heute).
    Liefert None, wenn der Tag nicht im Kalender liegt.
    """
    target = to_calendar_date(on_date) if on_date is not None else date.today()
    for month in calendar:
        for day in month.days:
            if day.date != target:
                continue
            return {
                "is_work": day.is_work_day,
                "is_off": day.is_in_rotation and not day.is_work_day and not day.is_transition_day,
                "is_transition": day.is_transition_day,
                "month": month.month,
                "year": month.year,
            }
    return None
