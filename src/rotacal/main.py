# src/rotacal/main.py

import logging
from datetime import date
from typing import List

from .calendar_logic import CUSTOM_TAGS, normalize_start_date, to_calendar_date
from .config import load_config
from .errors import RotationError
from .models import CustomPattern, MonthData, RotationPattern
from .schedule import create_schedule, dumps_schedule
from .statistics import summarize_calendar
from .work_periods import extract_work_periods, format_work_pattern_display

SCHEDULE_FILE = "rotacal_schedule.json"

# Zellmarker: Wechseltag, Arbeit, frei, außerhalb der Rotation
MARKERS = {"transition": "T", "work": "W", "off": ".", "outside": " "}

PATTERN_CHOICES: List[RotationPattern] = list(RotationPattern)


def render_month_text(month: MonthData) -> str:
    """Monatsraster als Text, Woche beginnt am Montag."""
    lines = [f"{month.month} {month.year}", " Mo  Di  Mi  Do  Fr  Sa  So"]
    cells = ["   "] * month.leading_blanks
    for day in month.days:
        cells.append(f"{day.date.day:>2}{MARKERS[day.kind]}")
    for i in range(0, len(cells), 7):
        lines.append(" ".join(cells[i:i + 7]).rstrip())
    lines.append(format_work_pattern_display(extract_work_periods(month)))
    return "\n".join(lines)


def input_pattern(default: str):
    print("\n🔁  Rotation:")
    for i, p in enumerate(PATTERN_CHOICES, start=1):
        print(f"  [{i}] {p.value}")
    choice = input(f"  Auswahl [leer={default}]: ").strip() or str(default)
    pattern = PATTERN_CHOICES[int(choice) - 1] if choice.isdigit() and 0 < int(choice) <= len(PATTERN_CHOICES) else choice
    tag = pattern.value if isinstance(pattern, RotationPattern) else pattern
    # "custom", "Other" usw. fragen wie Auswahl [5] nach den Tageszahlen
    if tag.lower() in CUSTOM_TAGS:
        work = int(input("  Arbeitstage: "))
        off = int(input("  Freie Tage: "))
        return RotationPattern.CUSTOM, CustomPattern(work, off)
    return pattern, None


def run_wizard():
    cfg = load_config()
    logging.basicConfig(level=getattr(logging, str(cfg.get('log_level', 'WARNING')).upper(), logging.WARNING))

    print("🎯 Willkommen zum Rotationskalender 🎯")
    try:
        start_str = input("Startdatum (YYYY-MM-DD) [leer=heute]: ").strip()
        start = date.today() if not start_str else to_calendar_date(start_str)
        pattern, custom = input_pattern(cfg['default_pattern'])
        months_str = input(f"Anzahl Monate [leer={cfg['default_months']}]: ").strip()
        months = int(months_str) if months_str else int(cfg['default_months'])
        schedule = create_schedule(start, pattern, months, custom)
    except (RotationError, ValueError) as e:
        logging.error(f"Eingabe ungültig: {e}")
        print(f"❌ Fehler: {e}")
        return None

    rotation_start = normalize_start_date(start)
    print(f"\n✅ {schedule.metadata.name}")
    if rotation_start != start:
        print(f"   Rotationsbeginn auf Dienstag {rotation_start.isoformat()} gelegt.")
    for month in schedule.calendar:
        print()
        print(render_month_text(month))

    stats = summarize_calendar(schedule.calendar)
    print(f"\nArbeitstage: {stats['work_days']}, frei: {stats['off_days']}, "
          f"Wechseltage: {stats['transition_days']} ({stats['work_pct']}% Arbeit)")

    if input("\nDienstplan speichern? (j/n) ").lower() == "j":
        fn = input(f"  Datei [leer={SCHEDULE_FILE}]: ").strip() or SCHEDULE_FILE
        with open(fn, "w", encoding="utf-8") as f:
            f.write(dumps_schedule(schedule))
        print(f"Dienstplan in {fn} gespeichert.")
    return schedule


if __name__ == "__main__":
    run_wizard()
