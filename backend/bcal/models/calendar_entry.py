"""
calendar_entry.py — ORM Model for Calendar Entries

Purpose:
- A time-bounded event owned by exactly one user.
- `user_id` is set at creation and never changed by the service layer.

Invariant (enforced in services/calendar.py, not by the database):
    start_date <= end_date
"""

import uuid

from sqlalchemy import Column, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from bcal.models.base import Base, TimestampMixin, UTCDateTime


class CalendarEntry(TimestampMixin, Base):
    __tablename__ = "calendar_entries"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Owner; every query filters on this column
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String, nullable=False)
    start_date = Column(UTCDateTime, nullable=False, index=True)
    end_date = Column(UTCDateTime, nullable=False)
    content = Column(Text, nullable=True)

    user = relationship("User", back_populates="calendar_entries")

    def __repr__(self):
        return f"<CalendarEntry {self.title} | {self.start_date} → {self.end_date}>"
