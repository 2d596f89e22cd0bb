"""Date-time helpers shared by the campus services."""

from datetime import date, datetime, timezone
from typing import Union

from ..core.errors import ValidationFailed


def utcnow() -> datetime:
    """Return the current UTC time as a naive timestamp for storage."""

    return datetime.now(timezone.utc).replace(tzinfo=None)


def as_naive_utc(value: datetime | None) -> datetime:
    """Normalise an aware or naive timestamp to naive UTC, defaulting to now."""

    if value is None:
        return utcnow()
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def calendar_date(value: Union[date, datetime, str]) -> date:
    """Reduce a timestamp, date or ISO string to its calendar date."""

    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError as exc:
            raise ValidationFailed("date must be an ISO date") from exc
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if not isinstance(value, date):
        raise ValidationFailed("date must be an ISO date")
    return value


def two_digit_year(year: int) -> str:
    """Return the last two digits of a calendar year."""

    return str(year)[-2:]
