"""Appointment lifecycle: booking submission and administrator status changes.

Statuses move only along ``TRANSITIONS``. Each change is written with a
compare-and-set on the status the caller read, so an appointment cannot be
approved and declined at the same time by two operators.
"""

import enum
import logging
import re
from dataclasses import dataclass, field
from datetime import date

from sqlalchemy.orm import Session

from backend.core import config
from backend.core.config import Slot
from backend.models.appointment import Appointment, AppointmentStatus, VehicleCondition
from backend.services import booking_window, pricing, reservations
from backend.services.exceptions import (
    AppointmentNotFound,
    InvalidTransition,
    ValidationFailed,
)

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')


class AppointmentAction(str, enum.Enum):
    APPROVE = "approve"
    DECLINE = "decline"
    COMPLETE = "complete"


TRANSITIONS: dict[tuple[AppointmentStatus, AppointmentAction], AppointmentStatus] = {
    (AppointmentStatus.PENDING, AppointmentAction.APPROVE): AppointmentStatus.APPROVED,
    (AppointmentStatus.PENDING, AppointmentAction.DECLINE): AppointmentStatus.DECLINED,
    (AppointmentStatus.APPROVED, AppointmentAction.COMPLETE): AppointmentStatus.COMPLETED,
    (AppointmentStatus.APPROVED, AppointmentAction.DECLINE): AppointmentStatus.DECLINED,
}

TERMINAL_STATUSES = frozenset({AppointmentStatus.COMPLETED, AppointmentStatus.DECLINED})


@dataclass(frozen=True)
class BookingRequest:
    """What a client has picked on the booking form, ready to submit."""

    name: str
    email: str
    vehicle: str
    condition: str
    package: str
    date: date
    slot: Slot
    addons: tuple[str, ...] = field(default_factory=tuple)


@dataclass
class AppointmentFilter:
    status: AppointmentStatus | None = None
    start: date | None = None
    end: date | None = None
    account_id: int | None = None


def next_status(appointment_id: str, current: AppointmentStatus, action: AppointmentAction) -> AppointmentStatus:
    target = TRANSITIONS.get((current, action))
    if target is None:
        raise InvalidTransition(appointment_id, current.value, action.value)
    return target


def normalize_decline_reason(reason: str | None) -> str:
    if reason is None:
        return config.DEFAULT_DECLINE_REASON
    normalized = reason.strip()
    if not normalized:
        return config.DEFAULT_DECLINE_REASON
    if len(normalized) > config.MAX_REASON_LENGTH:
        raise ValidationFailed(
            f'Reason must be {config.MAX_REASON_LENGTH} characters or fewer.',
            field='reason',
        )
    return normalized


def _require_text(value: str, field_name: str, label: str, max_length: int) -> str:
    normalized = (value or '').strip()
    if not normalized:
        raise ValidationFailed(f'{label} is required.', field=field_name)
    if len(normalized) > max_length:
        raise ValidationFailed(f'{label} must be {max_length} characters or fewer.', field=field_name)
    return normalized


def validate_booking_request(request: BookingRequest) -> BookingRequest:
    name = _require_text(request.name, 'name', 'Name', config.MAX_NAME_LENGTH)
    vehicle = _require_text(request.vehicle, 'vehicle', 'Vehicle', config.MAX_VEHICLE_LENGTH)

    email = (request.email or '').strip().lower()
    if not EMAIL_PATTERN.match(email):
        raise ValidationFailed('A valid email address is required.', field='email')

    try:
        condition = VehicleCondition(request.condition)
    except ValueError as exc:
        raise ValidationFailed('Invalid vehicle condition.', field='condition') from exc

    try:
        slot = Slot(request.slot)
    except ValueError as exc:
        raise ValidationFailed('Invalid time slot.', field='slot') from exc

    if not (request.package or '').strip():
        raise ValidationFailed('A service package is required.', field='package')

    return BookingRequest(
        name=name,
        email=email,
        vehicle=vehicle,
        condition=condition.value,
        package=request.package.strip(),
        date=request.date,
        slot=slot,
        addons=tuple(request.addons),
    )


def create_appointment(
    db: Session,
    request: BookingRequest,
    account_id: int | None = None,
    today: date | None = None,
) -> Appointment:
    request = validate_booking_request(request)
    booking_window.validate_booking_date(request.date, today)

    package, addons = pricing.resolve_selection(request.package, request.addons)

    draft = Appointment(
        client_name=request.name,
        email=request.email,
        vehicle=request.vehicle,
        condition=VehicleCondition(request.condition),
        package_id=package.id,
        addon_ids=[addon.id for addon in addons],
        date=request.date,
        slot=request.slot,
        total_price=pricing.total(package, addons),
        account_id=account_id,
    )
    appointment = reservations.reserve(db, draft)

    logger.info(
        'Appointment %s booked for %s %s (total %s)',
        appointment.id,
        appointment.date.isoformat(),
        appointment.slot.value,
        appointment.total_price,
    )
    return appointment


def get_appointment(db: Session, appointment_id: str) -> Appointment:
    appointment = db.get(Appointment, appointment_id)
    if appointment is None:
        raise AppointmentNotFound(appointment_id)
    return appointment


def list_appointments(db: Session, filters: AppointmentFilter | None = None) -> list[Appointment]:
    filters = filters or AppointmentFilter()
    query = db.query(Appointment)

    if filters.status is not None:
        query = query.filter(Appointment.status == filters.status)
    if filters.start is not None:
        query = query.filter(Appointment.date >= filters.start)
    if filters.end is not None:
        query = query.filter(Appointment.date <= filters.end)
    if filters.account_id is not None:
        query = query.filter(Appointment.account_id == filters.account_id)

    # Morning sorts after Afternoon by name
    return query.order_by(Appointment.date.asc(), Appointment.slot.desc(), Appointment.created_at.asc()).all()


def apply_action(
    db: Session,
    appointment_id: str,
    action: AppointmentAction,
    reason: str | None = None,
) -> Appointment:
    decline_reason = normalize_decline_reason(reason) if action is AppointmentAction.DECLINE else None
    current = None

    for _ in range(config.STATUS_UPDATE_MAX_ATTEMPTS):
        current = db.query(Appointment.status).filter(Appointment.id == appointment_id).scalar()
        if current is None:
            raise AppointmentNotFound(appointment_id)

        current = AppointmentStatus(current)
        target = next_status(appointment_id, current, action)

        values = {Appointment.status: target}
        if target is AppointmentStatus.DECLINED:
            values[Appointment.decline_reason] = decline_reason

        updated = db.query(Appointment).filter(
            Appointment.id == appointment_id,
            Appointment.status == current,
        ).update(values, synchronize_session=False)

        if updated == 1:
            db.commit()
            appointment = get_appointment(db, appointment_id)
            db.refresh(appointment)
            logger.info(
                'Appointment %s moved from %s to %s',
                appointment_id,
                current.value,
                target.value,
            )
            return appointment

        db.rollback()
        logger.warning('Status of appointment %s changed concurrently; retrying %s', appointment_id, action.value)

    raise InvalidTransition(appointment_id, current.value, action.value)


def approve(db: Session, appointment_id: str) -> Appointment:
    return apply_action(db, appointment_id, AppointmentAction.APPROVE)


def decline(db: Session, appointment_id: str, reason: str | None = None) -> Appointment:
    return apply_action(db, appointment_id, AppointmentAction.DECLINE, reason)


def complete(db: Session, appointment_id: str) -> Appointment:
    return apply_action(db, appointment_id, AppointmentAction.COMPLETE)
