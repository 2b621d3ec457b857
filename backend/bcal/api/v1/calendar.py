"""
calendar.py — Calendar Entry Endpoints

All routes sit behind the access-token guard and act only on the caller's
own entries. Someone else's entry is a 404, never a 403.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from bcal.api.deps import get_calendar_service
from bcal.api.guards import Identity, require_access_token
from bcal.core.exceptions import ValidationException
from bcal.schemas.auth import MessageResponse
from bcal.schemas.calendar import (
    CalendarEntryDataResponse,
    CalendarEntryListResponse,
    CalendarEntryResponse,
    CreateCalendarEntryRequest,
    UpdateCalendarEntryRequest,
)
from bcal.services.calendar import CalendarService

router = APIRouter(
    prefix="/calendar",
    tags=["calendar"]
)


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def create_entry(
    request: CreateCalendarEntryRequest,
    identity: Identity = Depends(require_access_token),
    service: CalendarService = Depends(get_calendar_service),
):
    entry = service.create(identity.id, request.model_dump())
    return MessageResponse(message=f"Calendar entry with id {entry.id} created")


@router.get("", response_model=CalendarEntryListResponse)
def list_entries(
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    identity: Identity = Depends(require_access_token),
    service: CalendarService = Depends(get_calendar_service),
):
    """
    GET /calendar?startDate=...&endDate=...

    Returns the caller's entries overlapping the window, ordered by start.
    """
    entries = service.find_all(identity.id, start_date, end_date)
    return CalendarEntryListResponse(
        data=[CalendarEntryResponse.model_validate(entry) for entry in entries]
    )


@router.get("/{entry_id}", response_model=CalendarEntryDataResponse)
def get_entry(
    entry_id: str,
    identity: Identity = Depends(require_access_token),
    service: CalendarService = Depends(get_calendar_service),
):
    entry = service.find_one(identity.id, entry_id)
    return CalendarEntryDataResponse(data=CalendarEntryResponse.model_validate(entry))


@router.patch("/{entry_id}", response_model=MessageResponse)
def update_entry(
    entry_id: str,
    request: UpdateCalendarEntryRequest,
    identity: Identity = Depends(require_access_token),
    service: CalendarService = Depends(get_calendar_service),
):
    updates = request.model_dump(exclude_unset=True)
    if not updates:
        raise ValidationException("No fields to update")

    entry = service.update(identity.id, entry_id, updates)
    return MessageResponse(message=f"Calendar entry with id {entry.id} has been updated")


@router.delete("/{entry_id}", response_model=MessageResponse)
def delete_entry(
    entry_id: str,
    identity: Identity = Depends(require_access_token),
    service: CalendarService = Depends(get_calendar_service),
):
    service.remove(identity.id, entry_id)
    return MessageResponse(message=f"Calendar entry with id {entry_id} deleted")
