import logging
from datetime import date

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.core.config import DEFAULT_BLACKOUT_REASON
from backend.models.blackout import BlackoutEntry
from backend.services import booking_window
from backend.services.exceptions import InvalidDate, NotBlocked

logger = logging.getLogger(__name__)


def normalize_reason(reason: str | None) -> str:
    if reason is None:
        return DEFAULT_BLACKOUT_REASON
    normalized = reason.strip()
    return normalized or DEFAULT_BLACKOUT_REASON


def block(db: Session, blocked_date: date, reason: str | None = None, today: date | None = None) -> BlackoutEntry:
    """Close ``blocked_date`` to new bookings.

    Blocking an already blocked date replaces its reason. Appointments that
    already hold a slot on that date are left untouched.
    """
    reference = today or booking_window.current_date()
    if blocked_date < reference:
        raise InvalidDate(blocked_date, reference)

    normalized_reason = normalize_reason(reason)
    entry = db.get(BlackoutEntry, blocked_date)
    if entry is None:
        entry = BlackoutEntry(date=blocked_date, reason=normalized_reason)
        db.add(entry)
    else:
        entry.reason = normalized_reason

    try:
        db.commit()
    except IntegrityError:
        # Another writer created the entry first; keep the latest reason.
        db.rollback()
        entry = db.get(BlackoutEntry, blocked_date)
        entry.reason = normalized_reason
        db.commit()
    db.refresh(entry)

    logger.info('Blocked %s for bookings (%s)', blocked_date.isoformat(), normalized_reason)
    return entry


def unblock(db: Session, blocked_date: date) -> None:
    entry = db.get(BlackoutEntry, blocked_date)
    if entry is None:
        raise NotBlocked(blocked_date)

    db.delete(entry)
    db.commit()

    logger.info('Unblocked %s', blocked_date.isoformat())


def list_blocked(db: Session, start: date | None = None, end: date | None = None) -> list[BlackoutEntry]:
    query = db.query(BlackoutEntry)
    if start is not None:
        query = query.filter(BlackoutEntry.date >= start)
    if end is not None:
        query = query.filter(BlackoutEntry.date <= end)
    return query.order_by(BlackoutEntry.date.asc()).all()


def is_blocked(db: Session, blocked_date: date) -> bool:
    return db.query(BlackoutEntry.date).filter(BlackoutEntry.date == blocked_date).first() is not None
