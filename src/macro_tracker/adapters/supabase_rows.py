"""Helpers for turning PostgREST rows into domain values."""

from datetime import UTC, date, datetime

from macro_tracker.domain.nutrition import Nutrients

ISO_DATE_LENGTH = 10


def parse_timestamp(raw: object) -> datetime:
    """Parse an ISO timestamp, treating naive values as UTC."""
    if isinstance(raw, datetime):
        value = raw
    elif isinstance(raw, str) and raw:
        value = datetime.fromisoformat(raw)
    else:
        return datetime.min.replace(tzinfo=UTC)
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value


def parse_date(raw: object) -> date:
    """Parse a date column; timestamps are reduced to their UTC calendar day."""
    if isinstance(raw, datetime):
        return parse_timestamp(raw).astimezone(UTC).date()
    if isinstance(raw, date):
        return raw
    text = str(raw)
    if len(text) == ISO_DATE_LENGTH:
        return date.fromisoformat(text)
    return parse_timestamp(text).astimezone(UTC).date()


def parse_nutrients(row: dict[str, object]) -> Nutrients:
    return Nutrients(
        calories=float(row.get("calories") or 0.0),
        protein=float(row.get("protein") or 0.0),
        fat=float(row.get("fat") or 0.0),
        carbohydrate=float(row.get("carbohydrate") or 0.0),
    )
