"""
Public catalog endpoints and event submission.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.db.session import get_db
from marketplace.models.user import User
from marketplace.schemas.event import (
    EventCreate,
    EventCreatedResponse,
    EventEnvelope,
    EventListResponse,
    EventResponse,
)
from marketplace.services.event_service import create_event, get_public_event, list_public_events
from marketplace.core.security import require_organizer

router = APIRouter(tags=["Events"])


@router.get("/events", response_model=EventListResponse)
async def list_events_endpoint(db: AsyncSession = Depends(get_db)):
    """Approved and published events. Pending, rejected and draft events never appear."""
    events = await list_public_events(db)
    return EventListResponse(
        count=len(events),
        data=[EventResponse.model_validate(e) for e in events],
    )


@router.get("/events/{event_id}", response_model=EventEnvelope)
async def get_event_endpoint(event_id: int, db: AsyncSession = Depends(get_db)):
    event = await get_public_event(db, event_id)
    return EventEnvelope(data=EventResponse.model_validate(event))


@router.post("/public/events", response_model=EventCreatedResponse, status_code=status.HTTP_201_CREATED)
async def submit_event_endpoint(
    event_data: EventCreate,
    organizer: User = Depends(require_organizer),
    db: AsyncSession = Depends(get_db),
):
    """Submit an event for admin approval. It starts out pending."""
    event = await create_event(db, event_data, organizer)
    return EventCreatedResponse(event=EventResponse.model_validate(event))
