"""
Admin review endpoints. Every route requires the admin role.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.db.session import get_db
from marketplace.domain import ApprovalStatus
from marketplace.models.user import User
from marketplace.schemas.admin import (
    DashboardResponse,
    DashboardStats,
    EventReviewDetailResponse,
    PendingEventsResponse,
    ReviewRequest,
    ReviewResponse,
)
from marketplace.schemas.event import EventDetailResponse, EventResponse, PendingEventResponse
from marketplace.services.review_service import (
    dashboard_stats,
    get_event_for_review,
    list_pending,
    recent_events,
    review_event,
)
from marketplace.core.security import require_admin

router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(require_admin)])


@router.get("/events/pending", response_model=PendingEventsResponse)
async def pending_events(db: AsyncSession = Depends(get_db)):
    """The review queue, oldest submission first."""
    events = await list_pending(db)
    return PendingEventsResponse(
        count=len(events),
        data=[PendingEventResponse.model_validate(e) for e in events],
    )


@router.get("/events/{event_id}", response_model=EventReviewDetailResponse)
async def event_detail(event_id: int, db: AsyncSession = Depends(get_db)):
    """Full event with the organizer's company profile and ticket tiers."""
    event = await get_event_for_review(db, event_id)
    return EventReviewDetailResponse(event=EventDetailResponse.model_validate(event))


@router.put("/events/{event_id}/review", response_model=ReviewResponse)
async def review(
    event_id: int,
    decision: ReviewRequest,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Approve or reject a pending event.
    Rejection requires feedback (422 otherwise); a second review gets 409.
    """
    event = await review_event(db, event_id, decision, admin)
    verb = "approved" if decision.approval_status == ApprovalStatus.APPROVED else "rejected"
    return ReviewResponse(
        message=f"Event {verb} successfully",
        event=EventResponse.model_validate(event),
    )


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(db: AsyncSession = Depends(get_db)):
    stats = await dashboard_stats(db)
    recent = await recent_events(db)
    return DashboardResponse(
        data=DashboardStats.model_validate(stats),
        recent_events=[PendingEventResponse.model_validate(e) for e in recent],
    )
