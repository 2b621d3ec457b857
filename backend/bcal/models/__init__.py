from bcal.models.base import Base
from bcal.models.user import User
from bcal.models.calendar_entry import CalendarEntry

__all__ = ["Base", "User", "CalendarEntry"]
