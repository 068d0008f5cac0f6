"""
Booking email notifications.

Emails are sent after the booking or status change has been committed and
never affect its outcome: every failure is logged and dropped.
"""

import logging
import smtplib
from dataclasses import dataclass
from datetime import date
from email.message import EmailMessage

from backend.core import config
from backend.core.config import SLOT_HOURS, Slot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppointmentNotice:
    """Snapshot of the appointment fields an email needs."""

    appointment_id: str
    client_name: str
    email: str
    vehicle: str
    condition: str
    date: date
    slot: Slot
    total_price: int
    status: str
    decline_reason: str | None = None

    @classmethod
    def from_appointment(cls, appointment) -> "AppointmentNotice":
        return cls(
            appointment_id=appointment.id,
            client_name=appointment.client_name,
            email=appointment.email,
            vehicle=appointment.vehicle,
            condition=appointment.condition.value,
            date=appointment.date,
            slot=appointment.slot,
            total_price=appointment.total_price,
            status=appointment.status.value,
            decline_reason=appointment.decline_reason,
        )

    @property
    def when(self) -> str:
        return f"{self.date.isoformat()} ({SLOT_HOURS[self.slot]})"


def send_email(to_address: str, subject: str, body: str) -> bool:
    """Send one plain-text email. Returns False instead of raising on failure."""
    if not config.SMTP_HOST:
        logger.debug('SMTP_HOST not configured; skipping "%s" email to %s', subject, to_address)
        return False

    message = EmailMessage()
    message['From'] = config.EMAIL_FROM_ADDRESS
    message['To'] = to_address
    message['Subject'] = subject
    message.set_content(body)

    try:
        with smtplib.SMTP(config.SMTP_HOST, config.SMTP_PORT, timeout=config.SMTP_TIMEOUT_SECONDS) as smtp:
            if config.SMTP_USE_TLS:
                smtp.starttls()
            if config.SMTP_USERNAME:
                smtp.login(config.SMTP_USERNAME, config.SMTP_PASSWORD)
            smtp.send_message(message)
    except Exception:
        logger.exception('Failed to send "%s" email to %s', subject, to_address)
        return False

    logger.info('Sent "%s" email to %s', subject, to_address)
    return True


def send_booking_received(notice: AppointmentNotice) -> None:
    send_email(
        notice.email,
        'We received your detailing request',
        (
            f"Thanks, {notice.client_name}!\n\n"
            f"Your {notice.vehicle} ({notice.condition}) is requested for {notice.when}.\n"
            f"Estimated total: ${notice.total_price}.\n\n"
            "We will confirm your appointment shortly."
        ),
    )

    if config.NOTIFY_ADMIN_EMAIL:
        send_email(
            config.NOTIFY_ADMIN_EMAIL,
            f'New booking request for {notice.when}',
            (
                f"{notice.client_name} <{notice.email}> requested {notice.when}.\n"
                f"Vehicle: {notice.vehicle} ({notice.condition})\n"
                f"Total: ${notice.total_price}\n"
                f"Appointment id: {notice.appointment_id}"
            ),
        )


STATUS_MESSAGES = {
    'Approved': ('Your detailing appointment is confirmed', 'Your appointment on {when} has been approved.'),
    'Completed': ('Thanks for choosing Divine Detailing', 'Your appointment on {when} is complete. Enjoy the shine!'),
    'Declined': ('Your detailing request was declined', 'We are unable to take your appointment on {when}.\nReason: {reason}'),
}


def send_status_changed(notice: AppointmentNotice) -> None:
    template = STATUS_MESSAGES.get(notice.status)
    if template is None:
        return

    subject, body = template
    send_email(
        notice.email,
        subject,
        f"Hi {notice.client_name},\n\n" + body.format(when=notice.when, reason=notice.decline_reason or ''),
    )
