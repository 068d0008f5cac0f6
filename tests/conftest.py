import os
from datetime import date

os.environ.setdefault('DATABASE_URL', 'sqlite://')

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from backend.auth.jwt_handler import create_access_token  # noqa: E402
from backend.core import config  # noqa: E402
from backend.core.config import Slot  # noqa: E402
from backend.database import Base, get_db  # noqa: E402
from backend.main import app  # noqa: E402
from backend.models import appointment, blackout, user, vehicle  # noqa: E402,F401
from backend.services.appointments import BookingRequest  # noqa: E402

TODAY = date(2024, 6, 1)
ADMIN_EMAIL = 'owner@divinedetailing.test'


@pytest.fixture
def db_engine():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_booking():
    def _make_booking(**overrides) -> BookingRequest:
        fields = {
            'name': 'Jordan Smith',
            'email': 'jordan@example.com',
            'vehicle': '2019 Honda Civic',
            'condition': 'Daily Driver',
            'package': 'Full Detail',
            'date': date(2024, 6, 2),
            'slot': Slot.MORNING,
            'addons': ('Interior Shampoo',),
        }
        fields.update(overrides)
        return BookingRequest(**fields)

    return _make_booking


@pytest.fixture
def today(monkeypatch: pytest.MonkeyPatch) -> date:
    monkeypatch.setattr('backend.services.booking_window.current_date', lambda: TODAY)
    return TODAY


@pytest.fixture
def client(session_factory, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(config, 'ADMIN_EMAILS', [ADMIN_EMAIL])
    monkeypatch.setattr(config, 'SMTP_HOST', '')

    def _get_test_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_test_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def headers_for():
    def _headers_for(email: str) -> dict[str, str]:
        return {'Authorization': f'Bearer {create_access_token(email)}'}

    return _headers_for


@pytest.fixture
def admin_headers(headers_for) -> dict[str, str]:
    return headers_for(ADMIN_EMAIL)


@pytest.fixture
def client_headers(headers_for) -> dict[str, str]:
    return headers_for('jordan@example.com')


@pytest.fixture
def booking_payload() -> dict:
    return {
        'name': 'Jordan Smith',
        'email': 'jordan@example.com',
        'vehicle': '2019 Honda Civic',
        'condition': 'Daily Driver',
        'service': 'Full Detail',
        'date': '2024-06-02',
        'slot': 'Morning',
        'addons': ['Interior Shampoo'],
    }
