from datetime import date, timedelta

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.auth.dependencies import require_admin
from backend.core.config import BOOKING_WINDOW_DAYS, MAX_REASON_LENGTH, MAX_SUMMARY_RANGE_DAYS
from backend.database import get_db
from backend.models.user import User
from backend.routes.common import database_unavailable, ensure_database_ready
from backend.services import availability, blackouts, booking_window
from backend.services.availability import DayAvailability
from backend.services.exceptions import ValidationFailed

router = APIRouter(tags=['availability'])


class DayAvailabilityResponse(BaseModel):
    date: date
    slots: dict[str, bool]
    blocked_by_admin: bool
    fully_booked: bool
    reason: str | None = None


class AvailabilitySummaryResponse(BaseModel):
    start: date
    end: date
    days: list[DayAvailabilityResponse]


class BlockDateRequest(BaseModel):
    date: date
    reason: str | None = None

    @field_validator('reason')
    @classmethod
    def validate_reason(cls, value: str | None) -> str | None:
        if value is None:
            return None

        normalized = value.strip()
        if len(normalized) > MAX_REASON_LENGTH:
            raise ValueError(f'Reason must be {MAX_REASON_LENGTH} characters or fewer.')

        return normalized or None


class BlockedDateResponse(BaseModel):
    date: date
    reason: str | None = None

    class Config:
        from_attributes = True


class BlockedDatesResponse(BaseModel):
    blocked_dates: list[BlockedDateResponse]


def to_day_response(day: DayAvailability) -> DayAvailabilityResponse:
    return DayAvailabilityResponse(
        date=day.date,
        slots={slot.value: is_open for slot, is_open in day.slot_open.items()},
        blocked_by_admin=day.blocked_by_admin,
        fully_booked=day.fully_booked,
        reason=day.reason,
    )


def resolve_summary_range(start: date | None, end: date | None) -> tuple[date, date]:
    range_start = start or booking_window.current_date()
    range_end = end or range_start + timedelta(days=BOOKING_WINDOW_DAYS)

    if range_end < range_start:
        raise ValidationFailed('End date must not be before start date.', field='end')

    if (range_end - range_start).days + 1 > MAX_SUMMARY_RANGE_DAYS:
        raise ValidationFailed(
            f'Availability can be requested for at most {MAX_SUMMARY_RANGE_DAYS} days at a time.',
            field='end',
        )

    return range_start, range_end


@router.get('/summary', response_model=AvailabilitySummaryResponse)
def get_availability_summary(
    start: date | None = Query(default=None),
    end: date | None = Query(default=None),
    db: Session = Depends(get_db),
):
    range_start, range_end = resolve_summary_range(start, end)

    ensure_database_ready()

    try:
        days = availability.summarize(db, range_start, range_end)
    except SQLAlchemyError as exc:
        raise database_unavailable(exc) from exc

    return AvailabilitySummaryResponse(
        start=range_start,
        end=range_end,
        days=[to_day_response(day) for day in days],
    )


@router.get('/blocked-dates', response_model=BlockedDatesResponse)
def list_blocked_dates(
    include_past: bool = Query(default=False),
    db: Session = Depends(get_db),
    _admin: User = Depends(require_admin),
):
    ensure_database_ready()

    try:
        start = None if include_past else booking_window.current_date()
        entries = blackouts.list_blocked(db, start=start)
    except SQLAlchemyError as exc:
        raise database_unavailable(exc) from exc

    return BlockedDatesResponse(
        blocked_dates=[BlockedDateResponse(date=entry.date, reason=entry.reason) for entry in entries],
    )


@router.post('/block-day', response_model=BlockedDateResponse, status_code=status.HTTP_201_CREATED)
def block_day(
    data: BlockDateRequest,
    db: Session = Depends(get_db),
    _admin: User = Depends(require_admin),
):
    ensure_database_ready()

    try:
        return blackouts.block(db, data.date, data.reason)
    except SQLAlchemyError as exc:
        raise database_unavailable(exc, db) from exc


@router.delete('/block-day/{blocked_date}', status_code=status.HTTP_204_NO_CONTENT)
def unblock_day(
    blocked_date: date,
    db: Session = Depends(get_db),
    _admin: User = Depends(require_admin),
):
    ensure_database_ready()

    try:
        blackouts.unblock(db, blocked_date)
    except SQLAlchemyError as exc:
        raise database_unavailable(exc, db) from exc
