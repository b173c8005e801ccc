"""
Month labels.

Payments are keyed by a human label such as "October 2025". Internally the
label is parsed into a MonthKey so storage and sorting follow the calendar,
and only formatted back to text at the edges.
"""
import calendar
import datetime
import re
from typing import NamedTuple, Optional

from errors import ValidationError

MONTH_LOOKUP = {}
for _idx in range(1, 13):
    MONTH_LOOKUP[calendar.month_name[_idx].lower()] = _idx
    MONTH_LOOKUP[calendar.month_abbr[_idx].lower()] = _idx
MONTH_LOOKUP["sept"] = 9

_NAMED = re.compile(r"^([A-Za-z]+)\.?[\s,]+(\d{4})$")
_ISO = re.compile(r"^(\d{4})-(\d{1,2})$")


class MonthKey(NamedTuple):
    year: int
    month: int

    @property
    def label(self) -> str:
        return f"{calendar.month_name[self.month]} {self.year}"

    @property
    def period(self) -> datetime.date:
        """First day of the month, used as the storage key."""
        return datetime.date(self.year, self.month, 1)

    @classmethod
    def from_period(cls, period: datetime.date) -> "MonthKey":
        return cls(period.year, period.month)


def parse_month(label: Optional[str]) -> MonthKey:
    """Parse "October 2025", "Oct 2025" or "2025-10" into a MonthKey."""
    if label is None:
        raise ValidationError("Month is required")

    text = label.strip()
    named = _NAMED.match(text)
    if named:
        month = MONTH_LOOKUP.get(named.group(1).lower())
        if month is None:
            raise ValidationError(f"Unknown month name in '{label}'")
        return _checked(int(named.group(2)), month, label)

    iso = _ISO.match(text)
    if iso:
        return _checked(int(iso.group(1)), int(iso.group(2)), label)

    raise ValidationError(f"Malformed month label '{label}', expected e.g. 'October 2025'")


def _checked(year: int, month: int, label: str) -> MonthKey:
    if not 1 <= month <= 12 or year < 1900:
        raise ValidationError(f"Month out of range in '{label}'")
    return MonthKey(year, month)
