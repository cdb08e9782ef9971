"""
Organizer self-service: own profile and own events.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.db.session import get_db
from marketplace.models.user import User
from marketplace.schemas.common import MessageResponse
from marketplace.schemas.event import (
    EventCreatedResponse,
    EventResponse,
    EventUpdate,
    OrganizerEventsResponse,
)
from marketplace.schemas.user import OrganizerProfileEnvelope, OrganizerProfileResponse
from marketplace.services.event_service import delete_event, list_organizer_events, update_event
from marketplace.core.security import require_organizer

router = APIRouter(prefix="/organizer", tags=["Organizer"])


@router.get("/me", response_model=OrganizerProfileEnvelope)
async def my_profile(organizer: User = Depends(require_organizer)):
    if organizer.organizer_profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Organizer profile not found",
        )
    return OrganizerProfileEnvelope(data=OrganizerProfileResponse.model_validate(organizer.organizer_profile))


@router.get("/events", response_model=OrganizerEventsResponse)
async def my_events(
    organizer: User = Depends(require_organizer),
    db: AsyncSession = Depends(get_db),
):
    """All of the caller's events, whatever their approval state."""
    events = await list_organizer_events(db, organizer)
    return OrganizerEventsResponse(
        count=len(events),
        events=[EventResponse.model_validate(e) for e in events],
    )


@router.put("/events/{event_id}", response_model=EventCreatedResponse)
async def edit_event(
    event_id: int,
    changes: EventUpdate,
    organizer: User = Depends(require_organizer),
    db: AsyncSession = Depends(get_db),
):
    event = await update_event(db, event_id, changes, organizer)
    return EventCreatedResponse(event=EventResponse.model_validate(event))


@router.delete("/events/{event_id}", response_model=MessageResponse)
async def remove_event(
    event_id: int,
    organizer: User = Depends(require_organizer),
    db: AsyncSession = Depends(get_db),
):
    await delete_event(db, event_id, organizer)
    return MessageResponse(message="Event deleted")
