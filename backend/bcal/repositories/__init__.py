from bcal.repositories.users import UNSET, UserRepository, UserStore
from bcal.repositories.calendar import CalendarEntryRepository

__all__ = ["UNSET", "UserRepository", "UserStore", "CalendarEntryRepository"]
