"""
Pydantic schemas for event submission, editing, and catalog responses.
"""

import datetime as dt
from typing import Optional

from pydantic import ConfigDict, Field

from marketplace.domain import ApprovalStatus, EventCategory
from marketplace.schemas.common import ApiModel
from marketplace.schemas.user import OrganizerProfileResponse

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class TicketTierIn(ApiModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100)
    price: float = Field(..., ge=0)
    quantity: int = Field(..., ge=1, le=1_000_000)


class EventCreate(ApiModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1, max_length=10_000)
    date: dt.date
    time: str = Field(..., pattern=TIME_PATTERN)
    location: str = Field(..., min_length=1, max_length=255)
    category: EventCategory
    images: list[str] = Field(default_factory=list, max_length=20)
    published: bool = True
    tickets: list[TicketTierIn] = Field(..., min_length=1, max_length=20)


class EventUpdate(ApiModel):
    """Partial update; omitted fields keep their value."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1, max_length=10_000)
    date: Optional[dt.date] = None
    time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    category: Optional[EventCategory] = None
    images: Optional[list[str]] = Field(None, max_length=20)
    published: Optional[bool] = None
    tickets: Optional[list[TicketTierIn]] = Field(None, min_length=1, max_length=20)


class TicketTierResponse(ApiModel):
    id: int
    name: str
    price: float
    quantity: int
    sold: int


class OrganizerBrief(ApiModel):
    id: int
    name: str


class OrganizerDetail(ApiModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    organizer_profile: Optional[OrganizerProfileResponse] = None


class EventResponse(ApiModel):
    id: int
    title: str
    description: str
    date: dt.date
    time: str
    location: str
    category: EventCategory
    images: list[str]
    published: bool
    approval_status: ApprovalStatus
    admin_feedback: Optional[str] = None
    reviewed_at: Optional[dt.datetime] = None
    organizer: Optional[OrganizerBrief] = None
    tickets: list[TicketTierResponse]
    created_at: dt.datetime
    updated_at: dt.datetime


class EventDetailResponse(EventResponse):
    organizer: Optional[OrganizerDetail] = None


class PendingEventResponse(ApiModel):
    """Queue projection: just enough to triage a submission."""

    id: int
    title: str
    date: dt.date
    location: str
    organizer: Optional[OrganizerBrief] = None
    created_at: dt.datetime


class EventListResponse(ApiModel):
    success: bool = True
    count: int
    data: list[EventResponse]


class EventEnvelope(ApiModel):
    success: bool = True
    data: EventResponse


class EventCreatedResponse(ApiModel):
    success: bool = True
    event: EventResponse


class OrganizerEventsResponse(ApiModel):
    success: bool = True
    count: int
    events: list[EventResponse]
