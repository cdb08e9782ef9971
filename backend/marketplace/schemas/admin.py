"""
Pydantic schemas for the admin review workflow and dashboard.
"""

from pydantic import Field, ValidationInfo, field_validator

from marketplace.domain import REVIEW_OUTCOMES, ApprovalStatus
from marketplace.schemas.common import ApiModel
from marketplace.schemas.event import EventDetailResponse, EventResponse, PendingEventResponse


class ReviewRequest(ApiModel):
    approval_status: ApprovalStatus
    admin_feedback: str = Field("", max_length=5000, validate_default=True)

    @field_validator("approval_status")
    @classmethod
    def must_leave_pending(cls, value: ApprovalStatus) -> ApprovalStatus:
        if value not in REVIEW_OUTCOMES:
            raise ValueError("Review must approve or reject the event")
        return value

    @field_validator("admin_feedback")
    @classmethod
    def feedback_required_for_rejection(cls, value: str, info: ValidationInfo) -> str:
        value = (value or "").strip()
        if info.data.get("approval_status") == ApprovalStatus.REJECTED and not value:
            raise ValueError("Feedback is required when rejecting an event")
        return value


class ReviewResponse(ApiModel):
    success: bool = True
    message: str
    event: EventResponse


class PendingEventsResponse(ApiModel):
    success: bool = True
    count: int
    data: list[PendingEventResponse]


class EventReviewDetailResponse(ApiModel):
    success: bool = True
    event: EventDetailResponse


class EventCounts(ApiModel):
    total: int = 0
    pending: int = 0
    approved: int = 0
    rejected: int = 0


class UserCounts(ApiModel):
    organizers: int = 0
    verified_organizers: int = 0


class DashboardStats(ApiModel):
    events: EventCounts
    users: UserCounts


class DashboardResponse(ApiModel):
    success: bool = True
    data: DashboardStats
    recent_events: list[PendingEventResponse]
