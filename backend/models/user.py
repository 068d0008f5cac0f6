"""User model definitions."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String
from backend.database import Base


class User(Base):
    """Represents an application account."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True)
    role = Column(String)  # client/admin
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
