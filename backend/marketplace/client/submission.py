"""
Organizer event submission.

The form is held as an EventDraft of raw user inputs. `validate_draft` checks
it locally, `build_payload` turns a valid draft into the request body, and
EventSubmission sends it. A submitted event always starts out pending review;
the server assigns that status.
"""

import datetime as dt
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from marketplace.client.errors import ClientError
from marketplace.client.forms import FormErrors, FormRejected, errors_from_failure
from marketplace.client.notify import LoggingNotifier, Notifier
from marketplace.client.transport import ApiClient, parse_model
from marketplace.core.logging import get_logger
from marketplace.domain import EventCategory
from marketplace.schemas.event import EventCreatedResponse, EventResponse

logger = get_logger(__name__)

DEFAULT_TIER_NAME = "General Admission"
DEFAULT_TIER_QUANTITY = "100"

EVENT_FIELDS = ("title", "date", "time", "location", "category", "description", "published", "images")
TICKET_GROUP = {"tickets": "tickets"}


@dataclass
class TicketTierDraft:
    name: str = ""
    price: str = ""
    quantity: str = ""

    def parsed(self) -> Optional[dict]:
        """The tier as sent to the server, or None while it is incomplete."""
        name = self.name.strip()
        if not name:
            return None
        try:
            price = Decimal(str(self.price).strip())
            quantity = int(str(self.quantity).strip())
        except (InvalidOperation, ValueError):
            return None
        if not price.is_finite() or price < 0 or quantity < 1:
            return None
        return {"name": name, "price": float(price), "quantity": quantity}

    @property
    def is_complete(self) -> bool:
        return self.parsed() is not None


def default_tiers() -> list[TicketTierDraft]:
    return [TicketTierDraft(name=DEFAULT_TIER_NAME, quantity=DEFAULT_TIER_QUANTITY)]


@dataclass
class EventDraft:
    title: str = ""
    date: Union[dt.date, str, None] = None
    time: str = ""
    location: str = ""
    category: str = ""
    description: str = ""
    published: bool = True
    images: list[str] = field(default_factory=list)
    tickets: list[TicketTierDraft] = field(default_factory=default_tiers)

    def add_tier(self) -> TicketTierDraft:
        tier = TicketTierDraft()
        self.tickets.append(tier)
        return tier

    def remove_tier(self, index: int) -> None:
        # The form always keeps at least one row
        if len(self.tickets) > 1:
            del self.tickets[index]

    def remove_image(self, url: str) -> None:
        self.images = [image for image in self.images if image != url]


def resolve_date(value: Union[dt.date, str, None]) -> Optional[dt.date]:
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return dt.date.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


def validate_draft(draft: EventDraft) -> FormErrors:
    errors = FormErrors()

    if not draft.title.strip():
        errors.fields["title"] = "Event title is required"

    if draft.date is None or (isinstance(draft.date, str) and not draft.date.strip()):
        errors.fields["date"] = "Event date is required"
    elif resolve_date(draft.date) is None:
        errors.fields["date"] = "Please enter a valid date"

    if not draft.time.strip():
        errors.fields["time"] = "Event time is required"

    if not draft.location.strip():
        errors.fields["location"] = "Location is required"

    if not draft.category.strip():
        errors.fields["category"] = "Category is required"
    elif draft.category not in {category.value for category in EventCategory}:
        errors.fields["category"] = "Please select a valid category"

    if not draft.description.strip():
        errors.fields["description"] = "Description is required"

    if not any(tier.is_complete for tier in draft.tickets):
        errors.fields["tickets"] = "At least one valid ticket type is required"

    return errors


def build_payload(draft: EventDraft) -> dict:
    """Request body for a validated draft. Incomplete ticket rows are left out."""
    event_date = resolve_date(draft.date)
    return {
        "title": draft.title.strip(),
        "description": draft.description.strip(),
        "date": event_date.isoformat() if event_date else None,
        "time": draft.time.strip(),
        "location": draft.location.strip(),
        "category": draft.category,
        "images": list(draft.images),
        "published": draft.published,
        "tickets": [tier for tier in (t.parsed() for t in draft.tickets) if tier is not None],
    }


class ImageUploadError(ClientError):
    """One image failed to upload; the same file may be retried."""

    retryable = True

    def __init__(self, message: str, filename: str):
        super().__init__(message)
        self.filename = filename


class ImageUploader:
    def __init__(self, api: ApiClient):
        self.api = api

    async def upload(self, filename: str, content: bytes, content_type: str) -> str:
        try:
            body = await self.api.post("/upload/image", files={"image": (filename, content, content_type)})
        except ClientError as e:
            raise ImageUploadError(f"Failed to upload {filename}: {e.message}", filename) from e

        url = body.get("url")
        if not url:
            raise ImageUploadError(f"Failed to upload {filename}: no URL returned", filename)
        logger.info("image_uploaded", filename=filename, url=url)
        return url


class EventSubmission:
    def __init__(
        self,
        api: ApiClient,
        notifier: Optional[Notifier] = None,
        uploader: Optional[ImageUploader] = None,
    ):
        self.api = api
        self.notifier = notifier or LoggingNotifier()
        self.uploader = uploader or ImageUploader(api)

    async def attach_image(
        self, draft: EventDraft, filename: str, content: bytes, content_type: str
    ) -> Optional[str]:
        """
        Upload one image and append its URL to the draft. A failed upload is
        reported and leaves the draft untouched.
        """
        try:
            url = await self.uploader.upload(filename, content, content_type)
        except ImageUploadError as e:
            self.notifier.error(e.message)
            return None
        draft.images.append(url)
        return url

    async def submit(self, draft: EventDraft) -> EventResponse:
        errors = validate_draft(draft)
        if errors:
            self.notifier.error("Please fix the errors in the form")
            raise FormRejected(errors)

        try:
            body = await self.api.post("/public/events", json=build_payload(draft))
        except ClientError as e:
            errors = errors_from_failure(
                e,
                EVENT_FIELDS,
                fallback="Failed to create event. Please try again.",
                group_prefixes=TICKET_GROUP,
            )
            self.notifier.error(errors.general or "Please fix the errors in the form")
            raise FormRejected(errors) from e

        event = parse_model(EventCreatedResponse, body).event
        logger.info("event_submitted", event_id=event.id, published=event.published)
        self.notifier.success("Event submitted for approval")
        return event
