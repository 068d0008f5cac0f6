"""Per-day slot availability derived from blackout dates and booked appointments.

Nothing here is stored. Every call reads the current blackout entries and
slot-occupying appointments for the requested range and rebuilds the view,
so a summary is only as fresh as the moment it was read. Reservations check
again at write time.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta

from sqlalchemy.orm import Session

from backend.core.config import Slot
from backend.models.appointment import Appointment, AppointmentStatus
from backend.models.blackout import BlackoutEntry


@dataclass(frozen=True)
class DayAvailability:
    date: date
    slot_open: dict[Slot, bool] = field(default_factory=lambda: {slot: True for slot in Slot})
    blocked_by_admin: bool = False
    reason: str | None = None

    @property
    def fully_booked(self) -> bool:
        """Both slots are taken by appointments and no blackout is in effect."""
        return not self.blocked_by_admin and not any(self.slot_open.values())

    @property
    def bookable(self) -> bool:
        return any(self.slot_open.values())

    def is_open(self, slot: Slot) -> bool:
        return self.slot_open[slot]


def iterate_dates(start: date, end: date):
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def get_blackouts(db: Session, start: date, end: date) -> dict[date, str | None]:
    rows = db.query(BlackoutEntry.date, BlackoutEntry.reason).filter(
        BlackoutEntry.date >= start,
        BlackoutEntry.date <= end,
    ).all()
    return {blocked_date: reason for blocked_date, reason in rows}


def get_occupied_slots(db: Session, start: date, end: date) -> set[tuple[date, Slot]]:
    rows = db.query(Appointment.date, Appointment.slot).filter(
        Appointment.date >= start,
        Appointment.date <= end,
        Appointment.status != AppointmentStatus.DECLINED,
    ).all()
    return {(booked_date, Slot(booked_slot)) for booked_date, booked_slot in rows}


def build_day(
    day: date,
    blackouts: dict[date, str | None],
    occupied: set[tuple[date, Slot]],
) -> DayAvailability:
    if day in blackouts:
        return DayAvailability(
            date=day,
            slot_open={slot: False for slot in Slot},
            blocked_by_admin=True,
            reason=blackouts[day],
        )

    return DayAvailability(
        date=day,
        slot_open={slot: (day, slot) not in occupied for slot in Slot},
    )


def summarize(db: Session, start: date, end: date) -> list[DayAvailability]:
    """One entry per date in ``[start, end]``, ascending. Empty when ``end < start``."""
    if end < start:
        return []

    blackouts = get_blackouts(db, start, end)
    occupied = get_occupied_slots(db, start, end)

    return [build_day(day, blackouts, occupied) for day in iterate_dates(start, end)]


def get_day(db: Session, day: date) -> DayAvailability:
    return summarize(db, day, day)[0]
