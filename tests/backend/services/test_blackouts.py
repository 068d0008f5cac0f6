from datetime import date

import pytest

from backend.core.config import DEFAULT_BLACKOUT_REASON
from backend.models.appointment import AppointmentStatus
from backend.models.blackout import BlackoutEntry
from backend.services import appointments, blackouts
from backend.services.exceptions import InvalidDate, NotBlocked


def test_block_creates_entry_with_reason(db, today) -> None:
    entry = blackouts.block(db, date(2024, 6, 10), 'vacation')

    assert entry.date == date(2024, 6, 10)
    assert entry.reason == 'vacation'
    assert blackouts.is_blocked(db, date(2024, 6, 10))


def test_block_defaults_blank_reason(db, today) -> None:
    entry = blackouts.block(db, date(2024, 6, 10), '   ')

    assert entry.reason == DEFAULT_BLACKOUT_REASON


def test_block_twice_keeps_single_entry_with_latest_reason(db, today) -> None:
    blackouts.block(db, date(2024, 6, 10), 'vacation')
    blackouts.block(db, date(2024, 6, 10), 'equipment repair')

    entries = db.query(BlackoutEntry).all()
    assert len(entries) == 1
    assert entries[0].reason == 'equipment repair'


def test_block_accepts_today(db, today) -> None:
    blackouts.block(db, today, None)

    assert blackouts.is_blocked(db, today)


def test_block_rejects_past_dates(db, today) -> None:
    with pytest.raises(InvalidDate) as exception_info:
        blackouts.block(db, date(2024, 5, 31), 'too late')

    assert exception_info.value.code == 'INVALID_DATE'
    assert db.query(BlackoutEntry).count() == 0


def test_unblock_removes_entry(db, today) -> None:
    blackouts.block(db, date(2024, 6, 10), 'vacation')

    blackouts.unblock(db, date(2024, 6, 10))

    assert not blackouts.is_blocked(db, date(2024, 6, 10))


def test_unblock_missing_entry_raises_not_blocked(db) -> None:
    with pytest.raises(NotBlocked):
        blackouts.unblock(db, date(2024, 6, 10))


def test_list_blocked_is_sorted_and_filtered(db, today) -> None:
    for blocked_date in (date(2024, 6, 20), date(2024, 6, 5), date(2024, 6, 12)):
        blackouts.block(db, blocked_date, None)

    assert [entry.date for entry in blackouts.list_blocked(db)] == [
        date(2024, 6, 5),
        date(2024, 6, 12),
        date(2024, 6, 20),
    ]
    assert [entry.date for entry in blackouts.list_blocked(db, start=date(2024, 6, 6), end=date(2024, 6, 15))] == [
        date(2024, 6, 12),
    ]


def test_block_leaves_existing_appointments_untouched(db, today, make_booking) -> None:
    booked = appointments.create_appointment(db, make_booking(date=date(2024, 6, 10)))
    appointments.approve(db, booked.id)

    blackouts.block(db, date(2024, 6, 10), 'vacation')

    db.expire_all()
    assert appointments.get_appointment(db, booked.id).status is AppointmentStatus.APPROVED
