"""Appointment model definitions."""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, Date, DateTime, Enum, ForeignKey, Index, Integer, String, text

from backend.core.config import Slot
from backend.database import ACTIVE_SLOT_INDEX_NAME, Base


class AppointmentStatus(str, enum.Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    COMPLETED = "Completed"
    DECLINED = "Declined"


class VehicleCondition(str, enum.Enum):
    DAILY_DRIVER = "Daily Driver"
    WELL_MAINTAINED = "Well Maintained"
    NEEDS_EXTRA_LOVE = "Needs Extra Love"


def _enum_values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


def _new_appointment_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Appointment(Base):
    """Represents a booked detailing appointment."""
    __tablename__ = "appointments"
    __table_args__ = (
        Index(
            ACTIVE_SLOT_INDEX_NAME,
            "date",
            "slot",
            unique=True,
            sqlite_where=text("status != 'Declined'"),
            postgresql_where=text("status != 'Declined'"),
        ),
        Index("idx_appointments_account", "account_id"),
    )

    id = Column(String(32), primary_key=True, default=_new_appointment_id)
    client_name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    vehicle = Column(String, nullable=False)
    condition = Column(
        Enum(VehicleCondition, native_enum=False, values_callable=_enum_values, length=32),
        nullable=False,
    )
    package_id = Column(String, nullable=False)
    addon_ids = Column(JSON, nullable=False, default=list)
    date = Column(Date, nullable=False)
    slot = Column(Enum(Slot, native_enum=False, values_callable=_enum_values, length=16), nullable=False)
    total_price = Column(Integer, nullable=False)
    status = Column(
        Enum(AppointmentStatus, native_enum=False, values_callable=_enum_values, length=16),
        nullable=False,
        default=AppointmentStatus.PENDING,
    )
    decline_reason = Column(String)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    account_id = Column(Integer, ForeignKey("users.id"), nullable=True)
