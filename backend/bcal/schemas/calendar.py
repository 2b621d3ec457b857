"""
Calendar Pydantic Schemas

Wire format is camelCase (startDate, endDate, userId); attributes stay
snake_case on the Python side.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from bcal.models.base import as_utc

DATE_ORDER_MESSAGE = "startDate must be before or equal to endDate"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateCalendarEntryRequest(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    start_date: datetime
    end_date: datetime
    content: Optional[str] = None

    @model_validator(mode="after")
    def check_date_order(self) -> "CreateCalendarEntryRequest":
        if as_utc(self.start_date) > as_utc(self.end_date):
            raise ValueError(DATE_ORDER_MESSAGE)
        return self


class UpdateCalendarEntryRequest(CamelModel):
    """
    Partial update. Fields left out keep their stored value; the date order
    against stored values is checked by the service.
    """

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    content: Optional[str] = None

    @model_validator(mode="after")
    def check_fields(self) -> "UpdateCalendarEntryRequest":
        for name in ("title", "start_date", "end_date"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{to_camel(name)} cannot be null")
        if self.start_date is not None and self.end_date is not None:
            if as_utc(self.start_date) > as_utc(self.end_date):
                raise ValueError(DATE_ORDER_MESSAGE)
        return self


class CalendarEntryResponse(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    user_id: str
    title: str
    start_date: datetime
    end_date: datetime
    content: Optional[str] = None


class CalendarEntryDataResponse(BaseModel):
    data: CalendarEntryResponse


class CalendarEntryListResponse(BaseModel):
    data: List[CalendarEntryResponse]
