from datetime import date, timedelta
import pytest

from rotacal.calendar_logic import generate_rotation_calendar, resolve_pattern
from rotacal.errors import RotationConfigError, RotationError
from rotacal.models import ROTATION_CONFIGS, CustomPattern, NamedPattern, RotationPattern


def test_leap_year_february():
    cal = generate_rotation_calendar(date(2024, 2, 27), "14/14", 1)
    feb = cal[0]
    assert feb.month == "February"
    assert len(feb.days) == 29
    feb29 = feb.days[-1]
    assert feb29.date == date(2024, 2, 29)
    assert feb29.is_in_rotation and feb29.is_work_day
    assert not feb.days[25].is_in_rotation  # 26. Februar, vor Rotationsbeginn


def test_non_leap_year_february():
    cal = generate_rotation_calendar(date(2023, 2, 27), "14/14", 1)
    feb = cal[0]
    assert len(feb.days) == 28
    assert all(d.date.month == 2 for d in feb.days)
    # 27.2.2023 ist ein Montag -> Beginn am 21.2.
    assert not feb.days[19].is_in_rotation
    assert feb.days[20].is_in_rotation and feb.days[20].is_transition_day


def test_year_boundary():
    cal = generate_rotation_calendar(date(2023, 12, 5), "14/14", 2)
    assert [(m.month, m.year) for m in cal] == [("December", 2023), ("January", 2024)]
    assert cal[0].days[-1].date + timedelta(days=1) == cal[1].days[0].date


def test_month_lengths_and_first_weekday_2024():
    cal = generate_rotation_calendar(date(2024, 1, 2), "14/14", 12)
    assert [len(m.days) for m in cal] == [31, 29, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31]
    assert cal[1].first_day_of_week == 4   # 1.2.2024 Donnerstag
    assert cal[8].first_day_of_week == 7   # 1.9.2024 Sonntag
    assert cal[8].leading_blanks == 6
    assert [m.month_number for m in cal] == list(range(1, 13))


@pytest.mark.parametrize("months", [1, 6, 12, 30])
def test_requested_month_count(months):
    assert len(generate_rotation_calendar(date(2024, 11, 20), "14/21", months)) == months


@pytest.mark.parametrize("start,pattern,custom", [
    (date(2024, 1, 5), "14/14", None),
    (date(2023, 11, 30), "28/28", None),
    (date(2024, 2, 29), "21/21", None),
    (date(2024, 7, 1), "Custom", {"work_days": 9, "off_days": 5}),
    (date(2024, 7, 1), "Custom", {"work_days": 0, "off_days": 3}),
])
def test_calendar_invariants(start, pattern, custom):
    cal = generate_rotation_calendar(start, pattern, 14, custom)
    all_days = [d for m in cal for d in m.days]

    assert all_days[0].date == start.replace(day=1)
    for prev, cur in zip(all_days, all_days[1:]):
        assert cur.date - prev.date == timedelta(days=1)

    rotation_start = min(d.date for d in all_days if d.is_in_rotation)
    for d in all_days:
        if d.date < rotation_start:
            assert not d.is_in_rotation
        if d.is_transition_day or d.is_work_day:
            assert d.is_in_rotation
    for m in cal:
        assert m.first_day_of_week == m.days[0].date.isoweekday()


def test_generation_is_deterministic():
    a = generate_rotation_calendar(date(2024, 5, 17), "28/28", 6)
    b = generate_rotation_calendar(date(2024, 5, 17), "28/28", 6)
    assert a == b


def test_custom_without_days_fails_fast():
    with pytest.raises(RotationConfigError):
        generate_rotation_calendar(date(2024, 1, 2), "Custom", 1)
    with pytest.raises(RotationConfigError):
        generate_rotation_calendar(date(2024, 1, 2), RotationPattern.CUSTOM, 1, {"work_days": 10})


@pytest.mark.parametrize("custom", [
    {"work_days": -1, "off_days": 10},
    {"work_days": 1.5, "off_days": 10},
    {"work_days": True, "off_days": 10},
    {"work_days": 0, "off_days": 0},
    (1, 2, 3),
    "10/10",
])
def test_invalid_custom_counts(custom):
    with pytest.raises(RotationConfigError):
        generate_rotation_calendar(date(2024, 1, 2), "Custom", 1, custom)


@pytest.mark.parametrize("pattern", ["15/15", "", "14-14", 14, None])
def test_unknown_pattern(pattern):
    with pytest.raises(RotationConfigError):
        generate_rotation_calendar(date(2024, 1, 2), pattern, 1)


@pytest.mark.parametrize("months", [0, -3, 1.5, True, "12"])
def test_invalid_month_count(months):
    with pytest.raises(RotationError):
        generate_rotation_calendar(date(2024, 1, 2), "14/14", months)


def test_named_pattern_cannot_be_custom():
    with pytest.raises(RotationConfigError):
        NamedPattern(RotationPattern.CUSTOM)


def test_resolve_pattern_variants():
    assert resolve_pattern("14/21") == NamedPattern(RotationPattern.R14_21)
    assert resolve_pattern(RotationPattern.R28_28).config.work_days == 28
    assert resolve_pattern("Other", (5, 2)) == CustomPattern(5, 2)
    custom = CustomPattern(3, 4)
    assert resolve_pattern(custom) is custom


def test_rotation_table_is_read_only():
    assert ROTATION_CONFIGS[RotationPattern.R14_21].off_days == 21
    assert ROTATION_CONFIGS[RotationPattern.R14_14].label == "14/14 Rotation"
    with pytest.raises(TypeError):
        ROTATION_CONFIGS[RotationPattern.R14_14] = None


# Tageszahlen gehören nur zu Custom; sonst würden sie stillschweigend verworfen
@pytest.mark.parametrize("pattern", ["14/14", RotationPattern.R21_21, NamedPattern(RotationPattern.R28_28)])
def test_custom_days_with_standard_pattern_fail(pattern):
    with pytest.raises(RotationConfigError):
        generate_rotation_calendar(date(2024, 1, 2), pattern, 1, (10, 10))


def test_custom_pattern_with_conflicting_days_fails():
    with pytest.raises(RotationConfigError):
        resolve_pattern(CustomPattern(10, 10), {"work_days": 7, "off_days": 7})
    same = CustomPattern(10, 10)
    assert resolve_pattern(same, (10, 10)) is same
