from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.auth.dependencies import get_current_user
from backend.core.config import MAX_SAVED_VEHICLES, MAX_VEHICLE_LENGTH
from backend.database import get_db
from backend.models.appointment import VehicleCondition
from backend.models.user import User
from backend.models.vehicle import Vehicle
from backend.routes.appointment_routes import AppointmentResponse, to_appointment_response
from backend.routes.common import database_unavailable, ensure_database_ready
from backend.services import appointments
from backend.services.appointments import AppointmentFilter

router = APIRouter(tags=['account'])


class AccountResponse(BaseModel):
    id: int
    email: str
    role: str


class CreateVehicleRequest(BaseModel):
    description: str
    condition: VehicleCondition = VehicleCondition.DAILY_DRIVER

    @field_validator('description')
    @classmethod
    def validate_description(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Vehicle description is required.')
        if len(normalized) > MAX_VEHICLE_LENGTH:
            raise ValueError(f'Vehicle description must be {MAX_VEHICLE_LENGTH} characters or fewer.')
        return normalized


class ReplaceVehiclesRequest(BaseModel):
    vehicles: list[CreateVehicleRequest] = Field(default_factory=list, max_length=MAX_SAVED_VEHICLES)


class VehicleResponse(BaseModel):
    id: int
    description: str
    condition: str
    created_at: datetime

    class Config:
        from_attributes = True


@router.get('/me', response_model=AccountResponse)
def me(current_user: User = Depends(get_current_user)):
    return AccountResponse(id=current_user.id, email=current_user.email, role=current_user.role)


@router.get('/me/appointments', response_model=list[AppointmentResponse])
def my_appointments(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_database_ready()

    try:
        results = appointments.list_appointments(db, AppointmentFilter(account_id=current_user.id))
    except SQLAlchemyError as exc:
        raise database_unavailable(exc) from exc

    return [to_appointment_response(appointment) for appointment in results]


def _account_vehicles(db: Session, account_id: int) -> list[Vehicle]:
    return db.query(Vehicle).filter(
        Vehicle.account_id == account_id,
    ).order_by(Vehicle.created_at.asc(), Vehicle.id.asc()).all()


@router.get('/me/vehicles', response_model=list[VehicleResponse])
def my_vehicles(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_database_ready()

    try:
        return _account_vehicles(db, current_user.id)
    except SQLAlchemyError as exc:
        raise database_unavailable(exc) from exc


@router.post('/me/vehicles', response_model=VehicleResponse, status_code=status.HTTP_201_CREATED)
def add_vehicle(
    data: CreateVehicleRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_database_ready()

    try:
        vehicle = Vehicle(
            account_id=current_user.id,
            description=data.description,
            condition=data.condition.value,
        )
        db.add(vehicle)
        db.commit()
        db.refresh(vehicle)

        return vehicle
    except SQLAlchemyError as exc:
        raise database_unavailable(exc, db) from exc


@router.put('/me/vehicles', response_model=list[VehicleResponse])
def replace_vehicles(
    data: ReplaceVehiclesRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_database_ready()

    try:
        db.query(Vehicle).filter(Vehicle.account_id == current_user.id).delete(synchronize_session=False)
        for entry in data.vehicles:
            db.add(Vehicle(
                account_id=current_user.id,
                description=entry.description,
                condition=entry.condition.value,
            ))
        db.commit()

        return _account_vehicles(db, current_user.id)
    except SQLAlchemyError as exc:
        raise database_unavailable(exc, db) from exc


@router.delete('/me/vehicles/{vehicle_id}', status_code=status.HTTP_204_NO_CONTENT)
def remove_vehicle(
    vehicle_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_database_ready()

    try:
        removed = db.query(Vehicle).filter(
            Vehicle.id == vehicle_id,
            Vehicle.account_id == current_user.id,
        ).delete(synchronize_session=False)

        if removed == 0:
            db.rollback()
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Vehicle not found.')

        db.commit()
    except SQLAlchemyError as exc:
        raise database_unavailable(exc, db) from exc
