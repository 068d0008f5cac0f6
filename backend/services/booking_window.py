from datetime import date, timedelta

from backend.core.config import BOOKING_WINDOW_DAYS
from backend.services.exceptions import OutOfWindow


def current_date() -> date:
    return date.today()


def booking_window(today: date | None = None) -> tuple[date, date]:
    """Return the inclusive (first, last) bookable dates as of ``today``."""
    reference = today or current_date()
    return reference, reference + timedelta(days=BOOKING_WINDOW_DAYS)


def validate_booking_date(requested: date, today: date | None = None) -> date:
    earliest, latest = booking_window(today)
    if requested < earliest or requested > latest:
        raise OutOfWindow(requested, earliest, latest)
    return requested
