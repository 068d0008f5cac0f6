"""Blackout date model definitions."""

from datetime import datetime, timezone

from sqlalchemy import Column, Date, DateTime, String
from backend.database import Base


class BlackoutEntry(Base):
    """A date closed to new bookings by an administrator."""
    __tablename__ = "blackout_dates"

    date = Column(Date, primary_key=True)
    reason = Column(String)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
