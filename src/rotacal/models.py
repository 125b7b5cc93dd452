# src/rotacal/models.py
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from types import MappingProxyType
from typing import NamedTuple, Tuple, Union

from .errors import RotationConfigError


class RotationPattern(str, Enum):
    """Benannte Rotationen (Arbeitstage/freie Tage) plus freie Eingabe."""
    R14_14 = "14/14"
    R14_21 = "14/21"
    R21_21 = "21/21"
    R28_28 = "28/28"
    CUSTOM = "Custom"


@dataclass(frozen=True)
class RotationConfig:
    """Aufgelöstes Paar aus Arbeits- und freien Tagen."""
    work_days: int
    off_days: int
    label: str = ""
    description: str = ""


def _standard(work_days: int, off_days: int) -> RotationConfig:
    return RotationConfig(
        work_days=work_days,
        off_days=off_days,
        label=f"{work_days}/{off_days} Rotation",
        description=f"{work_days} days on, {off_days} days off",
    )


# Standardtabelle, einmal beim Import aufgebaut und danach schreibgeschützt
ROTATION_CONFIGS = MappingProxyType({
    RotationPattern.R14_14: _standard(14, 14),
    RotationPattern.R14_21: _standard(14, 21),
    RotationPattern.R21_21: _standard(21, 21),
    RotationPattern.R28_28: _standard(28, 28),
})


@dataclass(frozen=True)
class NamedPattern:
    """Eine der Standard-Rotationen aus ROTATION_CONFIGS."""
    tag: RotationPattern

    def __post_init__(self):
        try:
            tag = RotationPattern(self.tag)
        except ValueError as e:
            raise RotationConfigError(f"unknown rotation pattern {self.tag!r}") from e
        if tag not in ROTATION_CONFIGS:
            raise RotationConfigError(f"{tag.value!r} is not a standard rotation pattern")
        object.__setattr__(self, "tag", tag)

    @property
    def config(self) -> RotationConfig:
        return ROTATION_CONFIGS[self.tag]


@dataclass(frozen=True)
class CustomPattern:
    """Frei gewählte Rotation; die Tageszahlen werden ohne Wochentagsausgleich genutzt."""
    work_days: int
    off_days: int

    def __post_init__(self):
        for name in ("work_days", "off_days"):
            value = getattr(self, name)
            # bool ist eine int-Unterklasse, zählt hier aber nicht
            if isinstance(value, bool) or not isinstance(value, int):
                raise RotationConfigError(f"{name} must be an integer, got {value!r}")
            if value < 0:
                raise RotationConfigError(f"{name} must not be negative, got {value}")
        if self.work_days + self.off_days == 0:
            raise RotationConfigError("custom rotation needs at least one work or off day")

    @property
    def tag(self) -> RotationPattern:
        return RotationPattern.CUSTOM

    @property
    def config(self) -> RotationConfig:
        return RotationConfig(
            work_days=self.work_days,
            off_days=self.off_days,
            label=f"{self.work_days}/{self.off_days} Rotation",
            description=f"{self.work_days} days on, {self.off_days} days off",
        )


Rotation = Union[NamedPattern, CustomPattern]


class WeekdayAdjustment(NamedTuple):
    adjusted_work_days: int
    adjusted_off_days: int


@dataclass(frozen=True)
class WorkPeriod:
    """Zusammenhängender Arbeitsblock, beide Grenzen inklusive."""
    start: date
    end: date


@dataclass(frozen=True)
class CalendarDay:
    """Klassifizierung eines einzelnen Kalendertags."""
    date: date
    is_work_day: bool = False
    is_in_rotation: bool = False
    is_transition_day: bool = False

    @property
    def kind(self) -> str:
        if not self.is_in_rotation:
            return "outside"
        if self.is_transition_day:
            return "transition"
        return "work" if self.is_work_day else "off"


@dataclass(frozen=True)
class MonthData:
    """Ein Kalendermonat mit allen Tagen und Rasterinfo (Montag=1 … Sonntag=7)."""
    month: str
    year: int
    days: Tuple[CalendarDay, ...] = field(default_factory=tuple)
    first_day_of_week: int = 1

    @property
    def month_number(self) -> int:
        return self.days[0].date.month

    @property
    def leading_blanks(self) -> int:
        """Leere Zellen vor dem 1. in einem Raster, das am Montag beginnt."""
        return self.first_day_of_week - 1
