"""
Admin side of the approval workflow: the pending queue, the review decision
and the dashboard.

The local queue only changes after the server has acknowledged a decision.
An acknowledged decision also drops any refresh still in flight and marks
the queue stale. A 409 means someone else reviewed the event first; the
queue is then marked stale and the next read refetches it.
"""

from dataclasses import dataclass
from typing import Optional, Union

from marketplace.client.errors import ClientError, ConflictError, FieldValidationError
from marketplace.client.notify import LoggingNotifier, Notifier
from marketplace.client.scope import ViewScope
from marketplace.client.transport import ApiClient, parse_model
from marketplace.core.logging import get_logger
from marketplace.domain import REVIEW_OUTCOMES, ApprovalStatus
from marketplace.schemas.admin import (
    DashboardResponse,
    DashboardStats,
    EventReviewDetailResponse,
    PendingEventsResponse,
    ReviewResponse,
)
from marketplace.schemas.event import EventDetailResponse, EventResponse, PendingEventResponse

logger = get_logger(__name__)


class ReviewRejected(FieldValidationError):
    """The decision is invalid; nothing was sent."""


@dataclass(frozen=True)
class ReviewDecision:
    status: ApprovalStatus
    feedback: str = ""

    @classmethod
    def create(cls, status: Union[ApprovalStatus, str], feedback: Optional[str] = "") -> "ReviewDecision":
        try:
            status = ApprovalStatus(status)
        except ValueError:
            status = None
        if status not in REVIEW_OUTCOMES:
            raise ReviewRejected(
                "Please choose approve or reject",
                {"approvalStatus": "Review must approve or reject the event"},
            )

        feedback = (feedback or "").strip()
        if status == ApprovalStatus.REJECTED and not feedback:
            raise ReviewRejected(
                "Please provide feedback for rejection",
                {"adminFeedback": "Feedback is required when rejecting an event"},
            )
        return cls(status=status, feedback=feedback)

    def payload(self) -> dict:
        return {"approvalStatus": self.status.value, "adminFeedback": self.feedback}


class ApprovalQueue:
    def __init__(
        self,
        api: ApiClient,
        scope: Optional[ViewScope] = None,
        notifier: Optional[Notifier] = None,
    ):
        self.api = api
        self.scope = scope or ViewScope("approval-queue")
        self.notifier = notifier or LoggingNotifier()
        self.events: list[PendingEventResponse] = []
        self.stale = True

    async def refresh(self) -> list[PendingEventResponse]:
        await self.scope.run_latest(self._fetch_pending(), self._apply)
        return self.events

    async def events_or_refresh(self) -> list[PendingEventResponse]:
        if self.stale:
            return await self.refresh()
        return self.events

    async def _fetch_pending(self) -> list[PendingEventResponse]:
        body = parse_model(PendingEventsResponse, await self.api.get("/admin/events/pending"))
        return sorted(body.data, key=lambda event: (event.created_at, event.id))

    def _apply(self, events: list[PendingEventResponse]) -> None:
        self.events = events
        self.stale = False

    async def get_detail(self, event_id: int) -> EventDetailResponse:
        body = await self.api.get(f"/admin/events/{event_id}")
        return parse_model(EventReviewDetailResponse, body).event

    async def review(
        self, event_id: int, status: Union[ApprovalStatus, str], feedback: Optional[str] = ""
    ) -> EventResponse:
        try:
            decision = ReviewDecision.create(status, feedback)
        except ReviewRejected as e:
            self.notifier.error(e.message)
            raise

        try:
            body = await self.api.put(f"/admin/events/{event_id}/review", json=decision.payload())
        except ConflictError as e:
            self.stale = True
            logger.info("review_conflict", event_id=event_id, message=e.message)
            self.notifier.error(e.message)
            raise
        except ClientError as e:
            self.notifier.error(e.message)
            raise

        result = parse_model(ReviewResponse, body)
        # A refresh that started before this review holds the old queue
        self.scope.invalidate()
        self.stale = True
        self.events = [event for event in self.events if event.id != event_id]
        logger.info("event_reviewed", event_id=event_id, outcome=decision.status.value)
        self.notifier.success(result.message)
        return result.event

    def search(self, term: str) -> list[PendingEventResponse]:
        term = term.strip().lower()
        if not term:
            return list(self.events)
        return [
            event
            for event in self.events
            if term in event.title.lower()
            or term in event.location.lower()
            or (event.organizer is not None and term in event.organizer.name.lower())
        ]


class AdminDashboard:
    def __init__(self, api: ApiClient):
        self.api = api
        self.stats: Optional[DashboardStats] = None
        self.recent_events: list[PendingEventResponse] = []

    async def load(self) -> DashboardStats:
        body = parse_model(DashboardResponse, await self.api.get("/admin/dashboard"))
        self.stats = body.data
        self.recent_events = body.recent_events
        return body.data
