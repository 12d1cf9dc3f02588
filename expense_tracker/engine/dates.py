"""Calendar-day helpers.

Expense dates are local calendar days. Servers backed by a ``DATE`` column
often serialise them as midnight UTC instants (``2024-03-01T00:00:00.000Z``);
converting such an instant to local time moves the day backwards west of
Greenwich, so the calendar part is always taken as written and every
comparison happens between naive local datetimes.
"""

from __future__ import annotations

from datetime import date, datetime, time

from .errors import ValidationFailure

END_OF_DAY = time(23, 59, 59, 999000)


def parse_local_date(value: object) -> date:
    """Normalise ``value`` to the calendar day it names.

    Args:
        value: ``date``, ``datetime`` or an ISO string, either ``YYYY-MM-DD`` or
            a full timestamp whose first ten characters are the date.

    Returns:
        The calendar date, never shifted through a timezone conversion.

    Raises:
        ValidationFailure: If ``value`` does not name a valid date.
    """

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationFailure(["date must be a YYYY-MM-DD string"])
    text = value.strip()
    if len(text) > 10 and text[10] not in "Tt ":
        raise ValidationFailure([f"invalid date {text!r}"])
    try:
        return date.fromisoformat(text[:10])
    except ValueError as exc:
        raise ValidationFailure([f"invalid date {text!r}"]) from exc


def start_of_day(day: date) -> datetime:
    """Return local midnight of ``day``."""

    return datetime.combine(day, time.min)


def end_of_day(day: date) -> datetime:
    """Return the last representable millisecond of ``day``."""

    return datetime.combine(day, END_OF_DAY)


def today() -> date:
    """Current local calendar day."""

    return date.today()


def same_month(day: date, reference: date) -> bool:
    return day.year == reference.year and day.month == reference.month


__all__ = ["END_OF_DAY", "end_of_day", "parse_local_date", "same_month", "start_of_day", "today"]
