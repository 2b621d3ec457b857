"""
calendar.py — Ownership-Scoped Calendar Operations

Purpose:
- CRUD over calendar entries for one authenticated user at a time.
- Enforce start_date <= end_date on create and on every partial update,
  merging missing fields from the stored entry before the check.

Every method takes `user_id` explicitly (from the access-token guard). An
entry owned by someone else raises NotFoundException, same as a missing one.
"""

import datetime
from typing import Any, Dict, List, Optional

from bcal.core.exceptions import NotFoundException, ValidationException
from bcal.core.logging import get_logger
from bcal.models.base import as_utc
from bcal.models.calendar_entry import CalendarEntry
from bcal.repositories.calendar import CalendarEntryRepository
from bcal.schemas.calendar import DATE_ORDER_MESSAGE

logger = get_logger(__name__)


def check_date_order(start_date: datetime.datetime, end_date: datetime.datetime) -> None:
    if as_utc(start_date) > as_utc(end_date):
        raise ValidationException(DATE_ORDER_MESSAGE)


class CalendarService:
    def __init__(self, repository: CalendarEntryRepository):
        self.repository = repository

    def create(self, user_id: str, data: Dict[str, Any]) -> CalendarEntry:
        check_date_order(data["start_date"], data["end_date"])
        entry = self.repository.create_for_user(user_id, data)
        logger.info(f"User {user_id} created calendar entry {entry.id}")
        return entry

    def find_all(
        self,
        user_id: str,
        start_date: Optional[datetime.datetime] = None,
        end_date: Optional[datetime.datetime] = None,
    ) -> List[CalendarEntry]:
        if start_date is not None and end_date is not None:
            check_date_order(start_date, end_date)
        return self.repository.list_for_user(user_id, start_date, end_date)

    def find_one(self, user_id: str, entry_id: str) -> CalendarEntry:
        entry = self.repository.get_for_user(user_id, entry_id)
        if entry is None:
            raise NotFoundException("Calendar entry", entry_id)
        return entry

    def update(self, user_id: str, entry_id: str, data: Dict[str, Any]) -> CalendarEntry:
        """
        Apply a partial update. Only keys present in `data` change; the date
        order is checked against the stored value of whichever bound is absent.
        """
        entry = self.find_one(user_id, entry_id)

        start_date = data.get("start_date") or entry.start_date
        end_date = data.get("end_date") or entry.end_date
        check_date_order(start_date, end_date)

        entry = self.repository.apply_update(entry, data)
        logger.info(f"User {user_id} updated calendar entry {entry_id}")
        return entry

    def remove(self, user_id: str, entry_id: str) -> None:
        entry = self.find_one(user_id, entry_id)
        self.repository.delete(entry)
        logger.info(f"User {user_id} deleted calendar entry {entry_id}")
