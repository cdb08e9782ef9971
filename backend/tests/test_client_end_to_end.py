"""
End-to-end: the client flows driving the real application.
"""

import pytest
from httpx import ASGITransport

from marketplace.client.auth import AuthFlow
from marketplace.client.catalog import Catalog
from marketplace.client.errors import ConflictError
from marketplace.client.forms import FormRejected
from marketplace.client.review import ApprovalQueue, ReviewRejected
from marketplace.client.router import RedirectToDefault, Render, Router, landing_page
from marketplace.client.session import SessionStore
from marketplace.client.storage import MemoryStorage
from marketplace.client.submission import EventDraft, EventSubmission, TicketTierDraft
from marketplace.client.transport import ApiClient
from marketplace.domain import ApprovalStatus, Role
from marketplace.main import app

from conftest import PASSWORD, RecordingNotifier, future_date

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.mark.asyncio
async def test_submission_review_and_catalog(api, store, admin):
    # Organizer registers and submits an event with an image
    notifier = RecordingNotifier()
    session = await AuthFlow(api, notifier).organizer_signup(
        "Olga Events", "olga@example.com", "longenough", company="Olga Live"
    )
    assert landing_page(session.role) == "/organizer-portal"
    assert Router(store).resolve("/organizer-portal/events/new") == Render("create-event")
    assert Router(store).resolve("/admin") == RedirectToDefault()

    submission = EventSubmission(api, notifier)
    draft = EventDraft(
        title="Jazz Night",
        date=future_date(),
        time="20:00",
        location="Blue Note Hall",
        category="music",
        description="An evening of live jazz",
        tickets=[TicketTierDraft("General Admission", "30", "100"), TicketTierDraft("", "5", "5")],
    )
    image_url = await submission.attach_image(draft, "poster.png", PNG_BYTES, "image/png")
    assert image_url in draft.images

    event = await submission.submit(draft)
    assert event.approval_status == ApprovalStatus.PENDING
    assert [t.name for t in event.tickets] == ["General Admission"]

    catalog = Catalog(api)
    assert await catalog.fetch_events() == []

    # Admin signs in through the admin portal
    admin_store = SessionStore(durable=MemoryStorage(), ephemeral=MemoryStorage())
    async with ApiClient(admin_store, base_url="http://test/api", transport=ASGITransport(app=app)) as admin_api:
        await AuthFlow(admin_api, RecordingNotifier()).sign_in(admin.email, PASSWORD, required_role=Role.ADMIN)

        queue = ApprovalQueue(admin_api, notifier=RecordingNotifier())
        pending = await queue.refresh()
        assert [p.id for p in pending] == [event.id]

        with pytest.raises(ReviewRejected):
            await queue.review(event.id, "rejected", "")
        assert [p.id for p in queue.events] == [event.id]

        reviewed = await queue.review(event.id, "approved", "Welcome aboard")
        assert reviewed.approval_status == ApprovalStatus.APPROVED
        assert queue.events == []

        # A second admin view still showing the event loses the race
        stale_view = ApprovalQueue(admin_api, notifier=RecordingNotifier())
        stale_view.events = list(pending)
        stale_view.stale = False
        with pytest.raises(ConflictError):
            await stale_view.review(event.id, "rejected", "Too late")
        assert stale_view.stale is True
        assert [p.id for p in stale_view.events] == [event.id]

    listed = await catalog.fetch_events()
    assert [e.id for e in listed] == [event.id]
    detail = await catalog.fetch_event(event.id)
    assert detail.images == [image_url]


@pytest.mark.asyncio
async def test_organizer_cannot_use_admin_portal(api, store, organizer):
    notifier = RecordingNotifier()
    with pytest.raises(FormRejected) as exc_info:
        await AuthFlow(api, notifier).sign_in(organizer.email, PASSWORD, required_role=Role.ADMIN)

    assert exc_info.value.errors.general == "Access denied. Only admin users can login here."
    assert not store.is_authenticated
