from datetime import date
import pytest

from rotacal import main
from rotacal.calendar_logic import generate_rotation_calendar
from rotacal.schedule import loads_schedule


@pytest.fixture
def answers(monkeypatch, tmp_path):
    monkeypatch.setenv('HOME', str(tmp_path))

    def feed(*values):
        it = iter(values)
        monkeypatch.setattr('builtins.input', lambda prompt='': next(it))
    return feed


def test_render_month_text():
    month = generate_rotation_calendar(date(2024, 1, 2), "14/14", 1)[0]
    text = main.render_month_text(month)
    lines = text.splitlines()
    assert lines[0] == "January 2024"
    assert lines[2].startswith(" 1   2T  3W")
    assert "16T" in text and "17." in text
    assert lines[-1] == "🛠️ Jan 2 -> 16, Jan 30 -> 31"


def test_wizard_standard_pattern(answers, capsys):
    answers("2024-01-05", "1", "1", "n")
    schedule = main.run_wizard()
    out = capsys.readouterr().out
    assert schedule.metadata.rotation_pattern == "14/14"
    assert len(schedule.calendar) == 1
    assert "January 2024" in out
    assert "2024-01-02" in out


def test_wizard_custom_pattern_saves_json(answers, tmp_path):
    target = tmp_path / "plan.json"
    answers("2024-01-02", "5", "10", "10", "2", "j", str(target))
    schedule = main.run_wizard()
    assert target.exists()
    loaded = loads_schedule(target.read_text(encoding="utf-8"))
    assert loaded == schedule
    assert loaded.metadata.custom_rotation.work_days == 10


def test_wizard_defaults_from_config(answers):
    answers("2024-03-12", "", "", "n")
    schedule = main.run_wizard()
    assert schedule.metadata.rotation_pattern == "14/14"
    assert len(schedule.calendar) == 12


def test_wizard_rejects_bad_date(answers, capsys):
    answers("kein datum")
    assert main.run_wizard() is None
    assert "Fehler" in capsys.readouterr().out


@pytest.mark.parametrize("typed", ["custom", "Other", " CUSTOM "])
def test_wizard_custom_by_name_asks_for_days(answers, typed):
    answers("2024-01-02", typed, "9", "5", "1", "n")
    schedule = main.run_wizard()
    assert schedule.metadata.rotation_pattern == "Custom"
    assert schedule.metadata.custom_rotation.work_days == 9
    assert schedule.metadata.custom_rotation.off_days == 5
