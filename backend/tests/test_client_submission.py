"""
Tests for the organizer submission flow on the client.
"""

import json
from datetime import date

import httpx
import pytest

from marketplace.client.forms import FormRejected
from marketplace.client.submission import (
    EventDraft,
    EventSubmission,
    ImageUploadError,
    ImageUploader,
    TicketTierDraft,
    build_payload,
    validate_draft,
)

from conftest import RecordingNotifier, event_json, future_date


def complete_draft(**overrides) -> EventDraft:
    draft = EventDraft(
        title="Jazz Night",
        date=future_date(),
        time="20:00",
        location="Blue Note Hall",
        category="music",
        description="An evening of live jazz",
        tickets=[TicketTierDraft("General Admission", "30", "100")],
    )
    for name, value in overrides.items():
        setattr(draft, name, value)
    return draft


def test_new_draft_defaults():
    draft = EventDraft()
    assert draft.published is True
    assert [(t.name, t.price, t.quantity) for t in draft.tickets] == [("General Admission", "", "100")]


def test_empty_draft_reports_every_field():
    errors = validate_draft(EventDraft())
    assert set(errors.fields) == {"title", "date", "time", "location", "category", "description", "tickets"}
    assert errors.get("title") == "Event title is required"
    assert errors.get("tickets") == "At least one valid ticket type is required"


def test_unknown_category_is_a_category_error():
    errors = validate_draft(complete_draft(category="opera"))
    assert list(errors.fields) == ["category"]


def test_unparseable_date():
    errors = validate_draft(complete_draft(date="next friday"))
    assert errors.get("date") == "Please enter a valid date"


def test_iso_string_date_accepted():
    assert not validate_draft(complete_draft(date="2031-05-04"))
    assert build_payload(complete_draft(date="2031-05-04"))["date"] == "2031-05-04"


@pytest.mark.parametrize(
    "tier",
    [
        TicketTierDraft("", "10", "5"),
        TicketTierDraft("   ", "10", "5"),
        TicketTierDraft("VIP", "free", "5"),
        TicketTierDraft("VIP", "-1", "5"),
        TicketTierDraft("VIP", "10", "0"),
        TicketTierDraft("VIP", "10", "2.5"),
    ],
)
def test_incomplete_tiers(tier):
    assert not tier.is_complete


def test_payload_drops_incomplete_tiers():
    draft = complete_draft(
        date=date(2031, 5, 4),
        tickets=[
            TicketTierDraft("General Admission", "30", "100"),
            TicketTierDraft("", "15", "10"),
            TicketTierDraft("Free Entry", "0", "50"),
        ],
    )
    payload = build_payload(draft)
    assert payload["tickets"] == [
        {"name": "General Admission", "price": 30.0, "quantity": 100},
        {"name": "Free Entry", "price": 0.0, "quantity": 50},
    ]
    assert payload["date"] == "2031-05-04"
    assert "approvalStatus" not in payload


def test_remove_tier_keeps_last_row():
    draft = EventDraft()
    draft.remove_tier(0)
    assert len(draft.tickets) == 1
    draft.add_tier()
    draft.remove_tier(0)
    assert len(draft.tickets) == 1


@pytest.mark.asyncio
async def test_invalid_draft_sends_nothing(mock_api):
    api, sent = mock_api(lambda request: httpx.Response(201, json={"success": True}))
    notifier = RecordingNotifier()

    with pytest.raises(FormRejected) as exc_info:
        await EventSubmission(api, notifier).submit(EventDraft(title="Only a title"))

    assert sent == []
    assert "location" in exc_info.value.errors.fields
    assert notifier.errors


@pytest.mark.asyncio
async def test_submit_posts_payload_and_returns_pending_event(mock_api):
    def created(request):
        body = json.loads(request.content)
        event = event_json(1, body["title"], approval_status="pending", published=body["published"])
        return httpx.Response(201, json={"success": True, "event": event})

    api, sent = mock_api(created)
    notifier = RecordingNotifier()

    event = await EventSubmission(api, notifier).submit(complete_draft(published=False))

    assert sent[0].method == "POST"
    assert sent[0].url.path == "/api/public/events"
    assert event.approval_status.value == "pending"
    assert event.published is False
    assert notifier.successes == ["Event submitted for approval"]


@pytest.mark.asyncio
async def test_server_field_errors_map_onto_form(mock_api):
    def invalid(request):
        return httpx.Response(422, json={
            "success": False,
            "message": "Validation failed",
            "errors": [
                {"param": "title", "msg": "Title too long"},
                {"param": "tickets.0.price", "msg": "Input should be greater than or equal to 0"},
                {"param": "venueCode", "msg": "Unknown venue"},
            ],
        })

    api, _ = mock_api(invalid)
    notifier = RecordingNotifier()

    with pytest.raises(FormRejected) as exc_info:
        await EventSubmission(api, notifier).submit(complete_draft())

    errors = exc_info.value.errors
    assert errors.get("title") == "Title too long"
    assert errors.get("tickets") == "Input should be greater than or equal to 0"
    assert errors.general == "Unknown venue"
    assert notifier.errors


@pytest.mark.asyncio
async def test_business_rule_is_a_general_error(mock_api):
    api, _ = mock_api(lambda request: httpx.Response(
        400, json={"success": False, "message": "Event date cannot be in the past"}
    ))

    with pytest.raises(FormRejected) as exc_info:
        await EventSubmission(api, RecordingNotifier()).submit(complete_draft())

    assert exc_info.value.errors.fields == {}
    assert exc_info.value.errors.general == "Event date cannot be in the past"


@pytest.mark.asyncio
async def test_network_failure_is_a_general_error(mock_api):
    def unreachable(request):
        raise httpx.ConnectError("connection refused", request=request)

    api, _ = mock_api(unreachable)

    with pytest.raises(FormRejected) as exc_info:
        await EventSubmission(api, RecordingNotifier()).submit(complete_draft())

    assert exc_info.value.errors.general == "Network error. Please check your internet connection."


@pytest.mark.asyncio
async def test_image_upload_sends_multipart(mock_api):
    def uploaded(request):
        assert b'name="image"; filename="poster.png"' in request.content
        return httpx.Response(200, json={"success": True, "url": "/media/abc.png"})

    api, sent = mock_api(uploaded)
    url = await ImageUploader(api).upload("poster.png", b"\x89PNG", "image/png")

    assert url == "/media/abc.png"
    assert sent[0].url.path == "/api/upload/image"


@pytest.mark.asyncio
async def test_failed_image_leaves_form_untouched(mock_api):
    api, _ = mock_api(lambda request: httpx.Response(
        400, json={"success": False, "message": "Only JPEG, PNG, GIF or WebP images can be uploaded"}
    ))
    notifier = RecordingNotifier()
    draft = complete_draft(images=["/media/existing.png"])

    url = await EventSubmission(api, notifier).attach_image(draft, "notes.txt", b"hi", "text/plain")

    assert url is None
    assert draft.images == ["/media/existing.png"]
    assert draft.title == "Jazz Night"
    assert notifier.errors == ["Failed to upload notes.txt: Only JPEG, PNG, GIF or WebP images can be uploaded"]


@pytest.mark.asyncio
async def test_upload_error_is_retryable(mock_api):
    api, _ = mock_api(lambda request: httpx.Response(500, json={"success": False, "message": "boom"}))

    with pytest.raises(ImageUploadError) as exc_info:
        await ImageUploader(api).upload("poster.png", b"\x89PNG", "image/png")

    assert exc_info.value.retryable is True
    assert exc_info.value.filename == "poster.png"
