from .calendar_logic import (
    calculate_weekday_adjustment,
    generate_rotation_calendar,
    normalize_start_date,
    resolve_pattern,
)
from .errors import RotationConfigError, RotationError, ScheduleFormatError, StartDateError
from .models import (
    ROTATION_CONFIGS,
    CalendarDay,
    CustomPattern,
    MonthData,
    NamedPattern,
    RotationConfig,
    RotationPattern,
)

__version__ = "0.1.0"
