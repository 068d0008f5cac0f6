import logging
import smtplib
from datetime import date

import pytest

from backend.core import config
from backend.core.config import Slot
from backend.services import notifications
from backend.services.notifications import AppointmentNotice


class FakeSMTP:
    sent: list = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False

    def starttls(self):
        return None

    def login(self, username, password):
        return None

    def send_message(self, message):
        FakeSMTP.sent.append(message)


class BrokenSMTP(FakeSMTP):
    def send_message(self, message):
        raise smtplib.SMTPServerDisconnected('connection dropped')


def build_notice(**overrides) -> AppointmentNotice:
    fields = {
        'appointment_id': 'abc123',
        'client_name': 'Jordan Smith',
        'email': 'jordan@example.com',
        'vehicle': '2019 Honda Civic',
        'condition': 'Daily Driver',
        'date': date(2024, 6, 2),
        'slot': Slot.MORNING,
        'total_price': 190,
        'status': 'Pending',
    }
    fields.update(overrides)
    return AppointmentNotice(**fields)


@pytest.fixture
def smtp_configured(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(config, 'SMTP_HOST', 'smtp.test')
    monkeypatch.setattr(config, 'SMTP_USERNAME', '')
    monkeypatch.setattr(config, 'NOTIFY_ADMIN_EMAIL', 'owner@divinedetailing.test')
    FakeSMTP.sent = []
    monkeypatch.setattr(notifications.smtplib, 'SMTP', FakeSMTP)


def test_send_email_is_skipped_without_smtp_host(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, 'SMTP_HOST', '')

    assert notifications.send_email('jordan@example.com', 'Hello', 'Body') is False


def test_booking_received_emails_client_and_owner(smtp_configured) -> None:
    notifications.send_booking_received(build_notice())

    recipients = [message['To'] for message in FakeSMTP.sent]
    assert recipients == ['jordan@example.com', 'owner@divinedetailing.test']
    assert '2024-06-02 (7am-12pm)' in FakeSMTP.sent[0].get_content()
    assert '$190' in FakeSMTP.sent[0].get_content()


def test_status_changed_includes_decline_reason(smtp_configured) -> None:
    notifications.send_status_changed(build_notice(status='Declined', decline_reason='Flooded street'))

    assert len(FakeSMTP.sent) == 1
    assert 'Reason: Flooded street' in FakeSMTP.sent[0].get_content()


def test_status_changed_ignores_pending(smtp_configured) -> None:
    notifications.send_status_changed(build_notice(status='Pending'))

    assert FakeSMTP.sent == []


def test_send_failures_are_logged_not_raised(monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> None:
    monkeypatch.setattr(config, 'SMTP_HOST', 'smtp.test')
    monkeypatch.setattr(notifications.smtplib, 'SMTP', BrokenSMTP)

    with caplog.at_level(logging.ERROR, logger='backend.services.notifications'):
        result = notifications.send_email('jordan@example.com', 'Hello', 'Body')

    assert result is False
    assert 'Failed to send "Hello" email to jordan@example.com' in caplog.text
