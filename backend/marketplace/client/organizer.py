"""
Organizer portal: the caller's own events and profile.
"""

from typing import Any, Optional

from marketplace.client.errors import ClientError
from marketplace.client.notify import LoggingNotifier, Notifier
from marketplace.client.scope import ViewScope
from marketplace.client.transport import ApiClient, parse_model
from marketplace.core.logging import get_logger
from marketplace.schemas.event import EventCreatedResponse, EventResponse, OrganizerEventsResponse
from marketplace.schemas.user import OrganizerProfileEnvelope, OrganizerProfileResponse

logger = get_logger(__name__)


def ticket_totals(event: EventResponse) -> tuple[int, int]:
    """(sold, capacity) summed over the event's tiers."""
    return (
        sum(tier.sold for tier in event.tickets),
        sum(tier.quantity for tier in event.tickets),
    )


class OrganizerEvents:
    def __init__(
        self,
        api: ApiClient,
        scope: Optional[ViewScope] = None,
        notifier: Optional[Notifier] = None,
    ):
        self.api = api
        self.scope = scope or ViewScope("organizer-events")
        self.notifier = notifier or LoggingNotifier()
        self.events: list[EventResponse] = []

    async def refresh(self) -> list[EventResponse]:
        await self.scope.run_latest(self._fetch(), self._apply)
        return self.events

    async def _fetch(self) -> list[EventResponse]:
        return parse_model(OrganizerEventsResponse, await self.api.get("/organizer/events")).events

    def _apply(self, events: list[EventResponse]) -> None:
        self.events = events

    async def update(self, event_id: int, changes: dict[str, Any]) -> EventResponse:
        """Edit a pending event. `changes` uses the wire (camelCase) field names."""
        try:
            body = await self.api.put(f"/organizer/events/{event_id}", json=changes)
        except ClientError as e:
            self.notifier.error(e.message)
            raise

        event = parse_model(EventCreatedResponse, body).event
        self.scope.invalidate()
        self.events = [event if existing.id == event_id else existing for existing in self.events]
        self.notifier.success("Event updated")
        return event

    async def delete(self, event_id: int) -> None:
        try:
            await self.api.delete(f"/organizer/events/{event_id}")
        except ClientError as e:
            self.notifier.error(e.message)
            raise

        self.scope.invalidate()
        self.events = [event for event in self.events if event.id != event_id]
        logger.info("organizer_event_deleted", event_id=event_id)
        self.notifier.success("Event deleted")

    async def profile(self) -> OrganizerProfileResponse:
        return parse_model(OrganizerProfileEnvelope, await self.api.get("/organizer/me")).data
