"""
Reporting week resolution.

The business week runs Monday 00:00 to Saturday 23:59:59.999. Sunday is
left out on purpose: commission is paid out before Sunday. Day-of-week
breakdowns elsewhere still list all seven days.

offset counts weeks back from the current one (0 = this week,
1 = last week, ...). The clock is passed in so callers and tests control
"now"; the Flask app keeps it in app.config["CLOCK"].
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from src.services.dates import format_day_month

BUSINESS_DAYS = 6  # Monday..Saturday


@dataclass(frozen=True)
class WeekWindow:
    start: datetime
    end: datetime
    start_label: str
    end_label: str

    @property
    def start_date(self) -> str:
        """Local calendar date of the Monday, YYYY-MM-DD."""
        return self.start.date().isoformat()

    @property
    def end_date(self) -> str:
        """Local calendar date of the Saturday, YYYY-MM-DD."""
        return self.end.date().isoformat()

    def to_dict(self) -> dict:
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "start_date": self.start_date,
            "end_date": self.end_date,
            "start_label": self.start_label,
            "end_label": self.end_label,
        }


def _sunday_first_index(moment: datetime) -> int:
    # datetime.weekday() is Mon=0..Sun=6; the week math uses Sun=0..Sat=6
    return (moment.weekday() + 1) % 7


def resolve_week(offset: int = 0, now: datetime | None = None) -> WeekWindow:
    """Return the Monday-Saturday window `offset` weeks before the one containing now.

    Raises:
        ValueError: offset is negative.
    """
    if offset < 0:
        raise ValueError(f"Week offset must be >= 0, got {offset}")

    now = now or datetime.now()
    day = _sunday_first_index(now)
    diff = -6 if day == 0 else 1 - day

    monday = (now + timedelta(days=diff - offset * 7)).replace(
        hour=0, minute=0, second=0, microsecond=0
    )
    saturday = (monday + timedelta(days=BUSINESS_DAYS - 1)).replace(
        hour=23, minute=59, second=59, microsecond=999000
    )

    return WeekWindow(
        start=monday,
        end=saturday,
        start_label=format_day_month(monday),
        end_label=format_day_month(saturday),
    )


def parse_offset(raw) -> int:
    """Week offset from a query-string value; junk and negatives become 0."""
    try:
        offset = int(raw)
    except (TypeError, ValueError):
        return 0
    return max(offset, 0)
