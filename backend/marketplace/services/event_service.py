"""
Event service: organizer submissions and edits, public catalog queries.
"""

from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from marketplace.domain import ApprovalStatus
from marketplace.models.event import Event, TicketTier
from marketplace.models.user import User
from marketplace.schemas.event import EventCreate, EventUpdate, TicketTierIn
from marketplace.core.metrics import record_submission
from marketplace.core.logging import get_logger

logger = get_logger(__name__)


def _build_tiers(tiers: list[TicketTierIn]) -> list[TicketTier]:
    return [
        TicketTier(position=index, name=tier.name, price=tier.price, quantity=tier.quantity, sold=0)
        for index, tier in enumerate(tiers)
    ]


def _ensure_not_past(event_date: date) -> None:
    if event_date < date.today():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Event date cannot be in the past",
        )


async def load_event(db: AsyncSession, event_id: int) -> Event:
    """Fetch an event with organizer and tiers freshly loaded, or 404."""
    result = await db.execute(
        select(Event).where(Event.id == event_id).execution_options(populate_existing=True)
    )
    event = result.scalar_one_or_none()

    if not event:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Event {event_id} not found",
        )
    return event


async def create_event(db: AsyncSession, event_data: EventCreate, organizer: User) -> Event:
    """
    Submit a new event. Approval status is always assigned here (pending);
    `published` is the organizer's own choice and independent of approval.
    """
    _ensure_not_past(event_data.date)

    event = Event(
        title=event_data.title,
        description=event_data.description,
        date=event_data.date,
        time=event_data.time,
        location=event_data.location,
        category=event_data.category.value,
        images=list(event_data.images),
        published=event_data.published,
        approval_status=ApprovalStatus.PENDING.value,
        organizer_id=organizer.id,
        tickets=_build_tiers(event_data.tickets),
    )
    db.add(event)
    await db.flush()

    record_submission(event.published)
    logger.info(
        "event_submitted",
        event_id=event.id,
        organizer_id=organizer.id,
        tiers=len(event_data.tickets),
        published=event.published,
    )
    return await load_event(db, event.id)


async def get_public_event(db: AsyncSession, event_id: int) -> Event:
    """A single catalog event. Anything not approved and published is invisible."""
    event = await load_event(db, event_id)
    if not event.is_listed:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Event {event_id} not found",
        )
    return event


async def list_public_events(db: AsyncSession) -> list[Event]:
    """Approved and published events, soonest first."""
    result = await db.execute(
        select(Event)
        .where(
            Event.approval_status == ApprovalStatus.APPROVED.value,
            Event.published.is_(True),
        )
        .order_by(Event.date.asc(), Event.time.asc(), Event.id.asc())
    )
    return list(result.scalars().all())


async def list_organizer_events(db: AsyncSession, organizer: User) -> list[Event]:
    result = await db.execute(
        select(Event)
        .where(Event.organizer_id == organizer.id)
        .order_by(Event.created_at.desc(), Event.id.desc())
    )
    return list(result.scalars().all())


async def _owned_event(db: AsyncSession, event_id: int, organizer: User) -> Event:
    event = await load_event(db, event_id)
    if event.organizer_id != organizer.id:
        logger.warning("event_ownership_denied", event_id=event_id, user_id=organizer.id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only manage your own events",
        )
    return event


async def update_event(db: AsyncSession, event_id: int, changes: EventUpdate, organizer: User) -> Event:
    """Edit an owned event. Only pending submissions are editable."""
    event = await _owned_event(db, event_id, organizer)

    if event.approval_status != ApprovalStatus.PENDING.value:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Event has already been {event.approval_status} and can no longer be edited",
        )

    fields = changes.model_dump(exclude_unset=True, exclude={"tickets"})
    if "date" in fields and fields["date"] is not None:
        _ensure_not_past(fields["date"])

    for name, value in fields.items():
        if value is None:
            continue
        if name == "category":
            value = value.value
        setattr(event, name, value)

    if changes.tickets is not None:
        event.tickets = _build_tiers(changes.tickets)

    await db.flush()
    logger.info("event_updated", event_id=event.id, fields=sorted(fields))
    return await load_event(db, event.id)


async def delete_event(db: AsyncSession, event_id: int, organizer: User) -> None:
    """Delete an owned event regardless of its approval state."""
    event = await _owned_event(db, event_id, organizer)
    await db.delete(event)
    await db.flush()
    logger.info("event_deleted", event_id=event_id, approval_status=event.approval_status)
