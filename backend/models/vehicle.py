"""Saved vehicle model definitions."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from backend.database import Base


class Vehicle(Base):
    """A vehicle an account keeps on file for faster booking."""
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    description = Column(String, nullable=False)
    condition = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
