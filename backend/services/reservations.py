import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.models.appointment import Appointment, AppointmentStatus
from backend.services import availability, blackouts
from backend.services.exceptions import SlotUnavailable

logger = logging.getLogger(__name__)


def reserve(db: Session, draft: Appointment) -> Appointment:
    """Claim ``draft.date``/``draft.slot`` and persist ``draft`` as Pending.

    The open-slot read is advisory. The partial unique index on
    (date, slot) for non-Declined rows decides the winner when two requests
    race, and the blackout check is repeated inside the write transaction.
    """
    day = availability.get_day(db, draft.date)
    if not day.is_open(draft.slot):
        raise SlotUnavailable(draft.date, draft.slot.value, blocked_by_admin=day.blocked_by_admin)

    draft.status = AppointmentStatus.PENDING
    draft.decline_reason = None

    try:
        db.add(draft)
        db.flush()

        if blackouts.is_blocked(db, draft.date):
            db.rollback()
            raise SlotUnavailable(draft.date, draft.slot.value, blocked_by_admin=True)

        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning(
            'Lost reservation race for %s %s',
            draft.date.isoformat(),
            draft.slot.value,
        )
        raise SlotUnavailable(draft.date, draft.slot.value) from exc

    db.refresh(draft)
    return draft
