"""Daily and monthly summary endpoints."""

from fastapi import APIRouter, Depends, Query

from macro_tracker.api.deps import get_container, get_current_user
from macro_tracker.api.payloads import (
    format_daily_summary,
    format_monthly_summary,
    success,
)
from macro_tracker.api.schemas import parse_iso_date
from macro_tracker.containers import AppContainer
from macro_tracker.domain.models import UserRecord
from macro_tracker.errors import ValidationFailed

router = APIRouter(prefix="/summary", tags=["summary"])


@router.get("/daily")
async def daily_summary(
    day: str = Query(alias="date"),
    user: UserRecord = Depends(get_current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Totals, achievement and per-meal-type breakdown for one day."""
    try:
        parsed = parse_iso_date(day)
    except ValueError as exc:
        raise ValidationFailed(str(exc)) from exc
    summary = container.summary_service.daily(user.id, parsed)
    return success(format_daily_summary(summary))


@router.get("/monthly")
async def monthly_summary(
    year: str = Query(pattern=r"^\d{4}$"),
    month: str = Query(pattern=r"^([1-9]|1[0-2])$"),
    user: UserRecord = Depends(get_current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Per-day totals for a month and the average over logged days."""
    summary = container.summary_service.monthly(user.id, int(year), int(month))
    return success(format_monthly_summary(summary))
