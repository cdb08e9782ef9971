"""
Admin review workflow: pending queue, review transition, dashboard counts.

CONCURRENCY STRATEGY: Conditional transition
============================================

Problem:
  Two admins open the same pending event and both press a button.
  Both read approval_status='pending', both write, last write wins, and the
  organizer sees a decision flip that nobody intended.

Solution:
  The transition is a single conditional UPDATE:

    UPDATE events SET approval_status = :target, admin_feedback = ...
    WHERE id = :event_id AND approval_status = 'pending'

  rowcount == 1 means this review won. rowcount == 0 means someone else
  already moved the event out of pending, and we answer 409 with the state
  they left it in. No retry: the loser must look at the new state.

  pending -> approved and pending -> rejected are the only transitions;
  both are terminal here.
"""

from datetime import datetime, timezone

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from marketplace.domain import ApprovalStatus, Role
from marketplace.models.event import Event
from marketplace.models.organizer import OrganizerProfile
from marketplace.models.user import User
from marketplace.schemas.admin import ReviewRequest
from marketplace.services.event_service import load_event
from marketplace.core.metrics import record_review
from marketplace.core.logging import get_logger

logger = get_logger(__name__)

RECENT_EVENTS_LIMIT = 5


async def list_pending(db: AsyncSession) -> list[Event]:
    """Pending submissions in the order they arrived."""
    result = await db.execute(
        select(Event)
        .where(Event.approval_status == ApprovalStatus.PENDING.value)
        .order_by(Event.created_at.asc(), Event.id.asc())
    )
    return list(result.scalars().all())


async def get_event_for_review(db: AsyncSession, event_id: int) -> Event:
    return await load_event(db, event_id)


async def review_event(db: AsyncSession, event_id: int, decision: ReviewRequest, admin: User) -> Event:
    """
    Move a pending event to approved or rejected.
    Raises 404 for unknown events and 409 when the event is no longer pending.
    """
    # 404 before attempting the transition
    await load_event(db, event_id)

    target = decision.approval_status
    result = await db.execute(
        update(Event)
        .where(
            Event.id == event_id,
            Event.approval_status == ApprovalStatus.PENDING.value,
        )
        .values(
            approval_status=target.value,
            admin_feedback=decision.admin_feedback or None,
            reviewed_at=datetime.now(timezone.utc),
            reviewed_by_id=admin.id,
        )
        .execution_options(synchronize_session=False)
    )

    if result.rowcount == 0:
        current = await load_event(db, event_id)
        record_review("conflict")
        logger.warning(
            "review_conflict",
            event_id=event_id,
            admin_id=admin.id,
            requested=target.value,
            current=current.approval_status,
        )
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Event has already been reviewed (status: {current.approval_status})",
        )

    record_review(target.value)
    logger.info(
        "event_reviewed",
        event_id=event_id,
        admin_id=admin.id,
        status=target.value,
        has_feedback=bool(decision.admin_feedback),
    )
    return await load_event(db, event_id)


async def dashboard_stats(db: AsyncSession) -> dict:
    """Aggregate counts for the admin landing page."""
    rows = await db.execute(
        select(Event.approval_status, func.count()).group_by(Event.approval_status)
    )
    by_status = {status_value: count for status_value, count in rows.all()}

    organizers = (
        await db.execute(select(func.count()).select_from(User).where(User.role == Role.ORGANIZER.value))
    ).scalar()
    verified = (
        await db.execute(
            select(func.count()).select_from(OrganizerProfile).where(OrganizerProfile.is_verified.is_(True))
        )
    ).scalar()

    return {
        "events": {
            "total": sum(by_status.values()),
            "pending": by_status.get(ApprovalStatus.PENDING.value, 0),
            "approved": by_status.get(ApprovalStatus.APPROVED.value, 0),
            "rejected": by_status.get(ApprovalStatus.REJECTED.value, 0),
        },
        "users": {
            "organizers": organizers or 0,
            "verified_organizers": verified or 0,
        },
    }


async def recent_events(db: AsyncSession, limit: int = RECENT_EVENTS_LIMIT) -> list[Event]:
    result = await db.execute(
        select(Event).order_by(Event.created_at.desc(), Event.id.desc()).limit(limit)
    )
    return list(result.scalars().all())
