"""
Booking Service Exceptions

Errors raised by the availability and appointment engine. Each one maps to a
single request-scoped failure and carries the HTTP status it is reported with.
"""

from datetime import date
from typing import Any

from fastapi import status


class BookingServiceError(Exception):
    """Base exception for booking engine errors."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, code: str = "BOOKING_ERROR", details: dict[str, Any] | None = None):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationFailed(BookingServiceError):
    """Raised when a required field is missing or malformed."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY

    def __init__(self, message: str, field: str | None = None, code: str = "VALIDATION_FAILED"):
        details = {"field": field} if field else {}
        super().__init__(message=message, code=code, details=details)


class UnknownPackage(ValidationFailed):
    def __init__(self, package_id: str):
        super().__init__(f"Unknown service package: {package_id}", field="package", code="UNKNOWN_PACKAGE")
        self.details["package"] = package_id


class UnknownAddon(ValidationFailed):
    def __init__(self, addon_id: str):
        super().__init__(f"Unknown add-on: {addon_id}", field="addons", code="UNKNOWN_ADDON")
        self.details["addon"] = addon_id


class OutOfWindow(BookingServiceError):
    """Raised when a date falls outside the booking horizon."""

    def __init__(self, requested: date, earliest: date, latest: date):
        super().__init__(
            message=f"Appointments can only be booked between {earliest.isoformat()} and {latest.isoformat()}.",
            code="OUT_OF_WINDOW",
            details={
                "date": requested.isoformat(),
                "earliest": earliest.isoformat(),
                "latest": latest.isoformat(),
            },
        )


class InvalidDate(BookingServiceError):
    """Raised when a blackout is requested for a date in the past."""

    def __init__(self, requested: date, today: date):
        super().__init__(
            message="Dates in the past cannot be blocked.",
            code="INVALID_DATE",
            details={"date": requested.isoformat(), "today": today.isoformat()},
        )


class SlotUnavailable(BookingServiceError):
    """Raised when a slot is closed or was claimed by a concurrent booking."""

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, slot_date: date, slot: str, blocked_by_admin: bool = False):
        message = (
            "That date is not accepting bookings."
            if blocked_by_admin
            else "That time slot is no longer available. Please choose another slot or date."
        )
        super().__init__(
            message=message,
            code="SLOT_UNAVAILABLE",
            details={"date": slot_date.isoformat(), "slot": slot, "blocked_by_admin": blocked_by_admin},
        )


class InvalidTransition(BookingServiceError):
    """Raised when an appointment status change is not allowed."""

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, appointment_id: str, current_status: str, action: str):
        super().__init__(
            message=f"Cannot {action} an appointment that is {current_status}.",
            code="INVALID_TRANSITION",
            details={"appointment_id": appointment_id, "status": current_status, "action": action},
        )


class AppointmentNotFound(BookingServiceError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, appointment_id: str):
        super().__init__(
            message="Appointment not found.",
            code="NOT_FOUND",
            details={"appointment_id": appointment_id},
        )


class NotBlocked(BookingServiceError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, blocked_date: date):
        super().__init__(
            message=f"{blocked_date.isoformat()} is not blocked.",
            code="NOT_BLOCKED",
            details={"date": blocked_date.isoformat()},
        )
