from datetime import date, datetime

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from pydantic import AliasChoices, BaseModel, Field, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.auth.dependencies import ADMIN_ROLE, get_current_user, get_optional_user, require_admin
from backend.core.config import MAX_REASON_LENGTH, Slot
from backend.database import get_db
from backend.models.appointment import Appointment, AppointmentStatus, VehicleCondition
from backend.models.user import User
from backend.routes.common import database_unavailable, ensure_database_ready
from backend.services import appointments, notifications
from backend.services.appointments import AppointmentFilter, BookingRequest

router = APIRouter(tags=['appointments'])


class CreateAppointmentRequest(BaseModel):
    name: str
    email: str
    vehicle: str
    condition: VehicleCondition = VehicleCondition.DAILY_DRIVER
    package: str = Field(validation_alias=AliasChoices('package', 'service'))
    date: date
    slot: Slot
    addons: list[str] = Field(default_factory=list)

    @field_validator('email')
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator('name', 'vehicle', 'package')
    @classmethod
    def strip_text(cls, value: str) -> str:
        return value.strip()

    def to_booking_request(self) -> BookingRequest:
        return BookingRequest(
            name=self.name,
            email=self.email,
            vehicle=self.vehicle,
            condition=self.condition.value,
            package=self.package,
            date=self.date,
            slot=self.slot,
            addons=tuple(self.addons),
        )


class DeclineAppointmentRequest(BaseModel):
    reason: str | None = Field(default=None, max_length=MAX_REASON_LENGTH)


class AppointmentResponse(BaseModel):
    id: str
    name: str
    email: str
    vehicle: str
    condition: str
    package: str
    addons: list[str]
    date: date
    slot: str
    total: int
    status: str
    decline_reason: str | None = None
    created_at: datetime
    account_id: int | None = None


def to_appointment_response(appointment: Appointment) -> AppointmentResponse:
    return AppointmentResponse(
        id=appointment.id,
        name=appointment.client_name,
        email=appointment.email,
        vehicle=appointment.vehicle,
        condition=appointment.condition.value,
        package=appointment.package_id,
        addons=list(appointment.addon_ids or []),
        date=appointment.date,
        slot=appointment.slot.value,
        total=appointment.total_price,
        status=appointment.status.value,
        decline_reason=appointment.decline_reason,
        created_at=appointment.created_at,
        account_id=appointment.account_id,
    )


@router.post('', response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
def create_appointment(
    data: CreateAppointmentRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User | None = Depends(get_optional_user),
):
    ensure_database_ready()

    try:
        appointment = appointments.create_appointment(
            db,
            data.to_booking_request(),
            account_id=current_user.id if current_user else None,
        )
    except SQLAlchemyError as exc:
        raise database_unavailable(exc, db) from exc

    background_tasks.add_task(
        notifications.send_booking_received,
        notifications.AppointmentNotice.from_appointment(appointment),
    )
    return to_appointment_response(appointment)


@router.get('', response_model=list[AppointmentResponse])
def list_appointments(
    appointment_status: AppointmentStatus | None = Query(default=None, alias='status'),
    start: date | None = Query(default=None),
    end: date | None = Query(default=None),
    db: Session = Depends(get_db),
    _admin: User = Depends(require_admin),
):
    ensure_database_ready()

    try:
        results = appointments.list_appointments(
            db,
            AppointmentFilter(status=appointment_status, start=start, end=end),
        )
    except SQLAlchemyError as exc:
        raise database_unavailable(exc) from exc

    return [to_appointment_response(appointment) for appointment in results]


@router.get('/{appointment_id}', response_model=AppointmentResponse)
def get_appointment(
    appointment_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_database_ready()

    try:
        appointment = appointments.get_appointment(db, appointment_id)
    except SQLAlchemyError as exc:
        raise database_unavailable(exc) from exc

    if current_user.role != ADMIN_ROLE and appointment.account_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail='Only the account that booked this appointment can view it.',
        )

    return to_appointment_response(appointment)


def _notify_status_change(background_tasks: BackgroundTasks, appointment: Appointment) -> None:
    background_tasks.add_task(
        notifications.send_status_changed,
        notifications.AppointmentNotice.from_appointment(appointment),
    )


@router.patch('/{appointment_id}/approve', response_model=AppointmentResponse)
def approve_appointment(
    appointment_id: str,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    _admin: User = Depends(require_admin),
):
    ensure_database_ready()

    try:
        appointment = appointments.approve(db, appointment_id)
    except SQLAlchemyError as exc:
        raise database_unavailable(exc, db) from exc

    _notify_status_change(background_tasks, appointment)
    return to_appointment_response(appointment)


@router.patch('/{appointment_id}/decline', response_model=AppointmentResponse)
def decline_appointment(
    appointment_id: str,
    background_tasks: BackgroundTasks,
    data: DeclineAppointmentRequest | None = None,
    db: Session = Depends(get_db),
    _admin: User = Depends(require_admin),
):
    ensure_database_ready()

    try:
        appointment = appointments.decline(db, appointment_id, data.reason if data else None)
    except SQLAlchemyError as exc:
        raise database_unavailable(exc, db) from exc

    _notify_status_change(background_tasks, appointment)
    return to_appointment_response(appointment)


@router.patch('/{appointment_id}/complete', response_model=AppointmentResponse)
def complete_appointment(
    appointment_id: str,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    _admin: User = Depends(require_admin),
):
    ensure_database_ready()

    try:
        appointment = appointments.complete(db, appointment_id)
    except SQLAlchemyError as exc:
        raise database_unavailable(exc, db) from exc

    _notify_status_change(background_tasks, appointment)
    return to_appointment_response(appointment)
