"""
Calendar Repository

Data access for calendar entries. Every read takes the owner id; an entry
that exists under another user is returned as None, exactly like a missing one.
"""

import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bcal.core.exceptions import DatabaseException
from bcal.models.calendar_entry import CalendarEntry
from bcal.repositories.base import BaseRepository


class CalendarEntryRepository(BaseRepository[CalendarEntry]):
    """Repository for calendar entries, scoped by owner."""

    def __init__(self, db: Session):
        super().__init__(CalendarEntry, db)

    def get_for_user(self, user_id: str, entry_id: str) -> Optional[CalendarEntry]:
        try:
            return (
                self.db.query(CalendarEntry)
                .filter(CalendarEntry.user_id == user_id, CalendarEntry.id == entry_id)
                .first()
            )
        except SQLAlchemyError as e:
            raise DatabaseException("Failed to get calendar entry") from e

    def list_for_user(
        self,
        user_id: str,
        start_date: Optional[datetime.datetime] = None,
        end_date: Optional[datetime.datetime] = None,
    ) -> List[CalendarEntry]:
        """
        Entries owned by `user_id` that overlap [start_date, end_date].

        Either bound may be omitted; an entry overlaps when it ends on/after
        `start_date` and starts on/before `end_date`.
        """
        query = self.db.query(CalendarEntry).filter(CalendarEntry.user_id == user_id)
        if start_date is not None:
            query = query.filter(CalendarEntry.end_date >= start_date)
        if end_date is not None:
            query = query.filter(CalendarEntry.start_date <= end_date)
        try:
            return query.order_by(CalendarEntry.start_date.asc()).all()
        except SQLAlchemyError as e:
            raise DatabaseException("Failed to list calendar entries") from e

    def create_for_user(self, user_id: str, data: Dict[str, Any]) -> CalendarEntry:
        try:
            return self.create(CalendarEntry(user_id=user_id, **data))
        except SQLAlchemyError as e:
            raise DatabaseException("Failed to create calendar entry") from e

    def apply_update(self, entry: CalendarEntry, data: Dict[str, Any]) -> CalendarEntry:
        for key, value in data.items():
            if key == "user_id":
                continue
            setattr(entry, key, value)
        return self.update(entry)
