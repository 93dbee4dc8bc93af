from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_household_context
from app.models.household_context import HouseholdContext
from app.services.event_service import EventService
from app.services.calendar_sync_service import CalendarSyncService
from app.schemas.event_schemas import (
    EventCreate,
    EventUpdate,
    EventResponse,
    EventListResponse,
    EventPermissionResponse,
    EventSuggestionCreate,
    EventSuggestionResponse,
    EventSyncResponse,
)

router = APIRouter()


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
def create_event(
    event_data: EventCreate,
    context: HouseholdContext = Depends(get_household_context),
    db: Session = Depends(get_db),
):
    """
    Create a new event.

    - The caller becomes the creator (always has EDIT access)
    - Tags control what other members may do with the event
    - Assignee must be a household member
    - Requires ADMIN or MEMBER role
    """
    service = EventService(db)
    return service.create_event(event_data, context)


@router.get("", response_model=EventListResponse)
def list_events(
    start: Optional[datetime] = Query(None, description="Earliest start time (inclusive)"),
    end: Optional[datetime] = Query(None, description="Latest start time (inclusive)"),
    context: HouseholdContext = Depends(get_household_context),
    db: Session = Depends(get_db),
):
    """
    List household events visible to the caller.

    - Events the caller has no access to are left out
    - Results sorted by start time
    """
    service = EventService(db)
    events = service.list_events(context, start=start, end=end)
    return EventListResponse(events=events, total=len(events))


@router.get("/sync", response_model=EventSyncResponse)
def list_sync_events(
    context: HouseholdContext = Depends(get_household_context),
    db: Session = Depends(get_db),
):
    """
    List events eligible for the caller's external calendar.

    - Only events the caller created, is assigned, or may fully edit
    """
    service = CalendarSyncService(db)
    events = service.eligible_events(context)
    return EventSyncResponse(events=events, total=len(events))


@router.get("/{event_id}", response_model=EventResponse)
def get_event(
    event_id: int,
    context: HouseholdContext = Depends(get_household_context),
    db: Session = Depends(get_db),
):
    """
    Get a specific event by ID.

    - Returns 404 if the event doesn't exist or the caller cannot see it
    """
    service = EventService(db)
    return service.get_event(event_id, context)


@router.get("/{event_id}/permission", response_model=EventPermissionResponse)
def get_event_permission(
    event_id: int,
    context: HouseholdContext = Depends(get_household_context),
    db: Session = Depends(get_db),
):
    """Get the caller's permission level for an event"""
    service = EventService(db)
    return service.get_event_permission(event_id, context)


@router.patch("/{event_id}", response_model=EventResponse)
def update_event(
    event_id: int,
    event_data: EventUpdate,
    context: HouseholdContext = Depends(get_household_context),
    db: Session = Depends(get_db),
):
    """
    Update an event.

    - Only provided fields are updated (partial update)
    - Provided tags replace the current tag set
    - Requires EDIT permission on the event (403 otherwise)
    """
    service = EventService(db)
    return service.update_event(event_id, event_data, context)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(
    event_id: int,
    context: HouseholdContext = Depends(get_household_context),
    db: Session = Depends(get_db),
):
    """
    Delete an event.

    - Tags and suggestions are deleted with it
    - Requires EDIT permission on the event (403 otherwise)
    """
    service = EventService(db)
    service.delete_event(event_id, context)


@router.post(
    "/{event_id}/suggestions",
    response_model=EventSuggestionResponse,
    status_code=status.HTTP_201_CREATED,
)
def suggest_edit(
    event_id: int,
    suggestion_data: EventSuggestionCreate,
    context: HouseholdContext = Depends(get_household_context),
    db: Session = Depends(get_db),
):
    """
    Suggest changes to an event.

    - Requires SUGGEST permission on the event
    - Changes are applied only when someone with EDIT permission approves
    """
    service = EventService(db)
    return service.suggest_edit(event_id, suggestion_data, context)


@router.get("/{event_id}/suggestions", response_model=list[EventSuggestionResponse])
def list_suggestions(
    event_id: int,
    context: HouseholdContext = Depends(get_household_context),
    db: Session = Depends(get_db),
):
    """List suggestions for an event, newest first"""
    service = EventService(db)
    return service.list_suggestions(event_id, context)


@router.post(
    "/{event_id}/suggestions/{suggestion_id}/approve",
    response_model=EventSuggestionResponse,
)
def approve_suggestion(
    event_id: int,
    suggestion_id: int,
    context: HouseholdContext = Depends(get_household_context),
    db: Session = Depends(get_db),
):
    """
    Approve a pending suggestion and apply it to the event.

    - Requires EDIT permission on the event
    """
    service = EventService(db)
    return service.approve_suggestion(event_id, suggestion_id, context)


@router.post(
    "/{event_id}/suggestions/{suggestion_id}/reject",
    response_model=EventSuggestionResponse,
)
def reject_suggestion(
    event_id: int,
    suggestion_id: int,
    context: HouseholdContext = Depends(get_household_context),
    db: Session = Depends(get_db),
):
    """
    Reject a pending suggestion.

    - Requires EDIT permission on the event
    """
    service = EventService(db)
    return service.reject_suggestion(event_id, suggestion_id, context)
