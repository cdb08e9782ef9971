"""
Public catalog: the list of approved, published events and their details.
"""

from typing import Iterable, Optional

from marketplace.client.errors import ClientError, NotFoundError
from marketplace.client.notify import LoggingNotifier, Notifier
from marketplace.client.scope import ViewScope
from marketplace.client.transport import ApiClient, parse_model
from marketplace.core.logging import get_logger
from marketplace.domain import ApprovalStatus, EventCategory
from marketplace.schemas.event import EventEnvelope, EventListResponse, EventResponse

logger = get_logger(__name__)

ALL_CATEGORIES = "all"


def is_listed(event: EventResponse) -> bool:
    return event.approval_status == ApprovalStatus.APPROVED and event.published


def filter_events(
    events: Iterable[EventResponse],
    search_term: str = "",
    category: str = ALL_CATEGORIES,
) -> list[EventResponse]:
    """
    Case-insensitive substring search over title, description, location and
    organizer name, combined with an exact category match ("all" matches any).
    """
    term = search_term.strip().lower()
    matches = []
    for event in events:
        if category != ALL_CATEGORIES and event.category.value != category:
            continue
        if term:
            organizer_name = event.organizer.name if event.organizer else ""
            haystack = (event.title, event.description, event.location, organizer_name)
            if not any(term in value.lower() for value in haystack):
                continue
        matches.append(event)
    return matches


class Catalog:
    def __init__(self, api: ApiClient):
        self.api = api

    async def fetch_events(self) -> list[EventResponse]:
        body = parse_model(EventListResponse, await self.api.get("/events"))
        listed = [event for event in body.data if is_listed(event)]
        if len(listed) != len(body.data):
            logger.warning("catalog_unlisted_events_dropped", dropped=len(body.data) - len(listed))
        return listed

    async def fetch_event(self, event_id: int) -> EventResponse:
        event = parse_model(EventEnvelope, await self.api.get(f"/events/{event_id}")).data
        if not is_listed(event):
            raise NotFoundError("Event not found")
        return event


class CatalogView:
    """Fetched events plus the current filter; `visible` is always recomputed."""

    def __init__(
        self,
        catalog: Catalog,
        scope: Optional[ViewScope] = None,
        notifier: Optional[Notifier] = None,
    ):
        self.catalog = catalog
        self.scope = scope or ViewScope("catalog")
        self.notifier = notifier or LoggingNotifier()
        self.events: list[EventResponse] = []
        self.search_term = ""
        self.category = ALL_CATEGORIES
        self.loading = False
        self.error: Optional[str] = None

    @property
    def visible(self) -> list[EventResponse]:
        return filter_events(self.events, self.search_term, self.category)

    def set_search(self, term: str) -> None:
        self.search_term = term

    def set_category(self, category: str) -> None:
        if category != ALL_CATEGORIES:
            EventCategory(category)
        self.category = category

    async def load(self) -> bool:
        """Fetch the catalog. Returns False if the result was discarded or failed."""
        self.loading = True
        self.error = None
        try:
            return await self.scope.run_latest(self.catalog.fetch_events(), self._apply)
        except ClientError as e:
            self.error = e.message
            self.notifier.error(e.message)
            return False
        finally:
            self.loading = False

    def _apply(self, events: list[EventResponse]) -> None:
        self.events = events
