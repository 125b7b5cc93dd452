from typing import Dict, Iterable, List, Sequence

from .models import CalendarDay, MonthData


def _count(days: Iterable[CalendarDay]) -> Dict[str, float]:
    days = list(days)
    in_rotation = [d for d in days if d.is_in_rotation]
    work = sum(1 for d in in_rotation if d.is_work_day)
    transition = sum(1 for d in in_rotation if d.is_transition_day)
    work_pct = round(work / len(in_rotation) * 100, 1) if in_rotation else 0.0
    return {
        'total_days': len(days),
        'pre_rotation': len(days) - len(in_rotation),
        'in_rotation': len(in_rotation),
        'work_days': work,
        'off_days': len(in_rotation) - work,
        'transition_days': transition,
        'work_pct': work_pct,
    }


def summarize_calendar(calendar: Sequence[MonthData]) -> Dict[str, float]:
    """
    Gesamt-Zusammenfassung über alle Monate:
      total_days      : alle angezeigten Tage
      pre_rotation    : Tage vor Rotationsbeginn
      in_rotation     : Tage ab Rotationsbeginn
      work_days       : davon Arbeitstage (inkl. Wechseltage)
      off_days        : davon freie Tage
      transition_days : An-/Abreisetage
      work_pct        : Anteil Arbeitstage an in_rotation in Prozent
    """
    return _count(day for month in calendar for day in month.days)


def summarize_by_month(calendar: Sequence[MonthData]) -> List[Dict]:
    """Wie summarize_calendar, aber je Monat, ergänzt um 'month' und 'year'."""
    out = []
    for month in calendar:
        row = {'month': month.month, 'year': month.year}
        row.update(_count(month.days))
        out.append(row)
    return out
