"""Tests for order note rendering and write-back."""

import json
from unittest.mock import MagicMock

import pytest

from order_events_service.annotator import OrderAnnotator, render_note
from order_events_service.errors import AnnotationError
from order_events_service.parser import parse_order
from order_events_service.schemas import EnrichedRecord


@pytest.fixture
def records(event_fields):
    second = dict(event_fields, title="Glazing Night", start_date_time="2024-12-08T18:00:00")
    return [
        EnrichedRecord(line_item_title="Pottery Workshop", details=event_fields),
        EnrichedRecord(
            line_item_title="Glazing",
            details=second,
            ticket_title="Glazing - Ticket 1",
            scheduling_link="https://calendly.com/d/one",
        ),
    ]


def test_render_detailed_note(records):
    """Detailed notes have one numbered stanza per record separated by blank lines."""
    assert render_note(records) == (
        "Event Details:\n"
        "\n"
        "Event 1: Wheel Throwing Basics\n"
        "Address: 12 Clay St, Portland\n"
        "Start: 2024-12-01T18:00:00\n"
        "End: 2024-12-01T20:00:00\n"
        "Refund Policy: Full refund up to 48h before\n"
        "Map Embed: https://maps.example.com/embed/1\n"
        "Calendar Embed: https://calendar.example.com/embed/1\n"
        "\n"
        "Event 2: Glazing Night\n"
        "Address: 12 Clay St, Portland\n"
        "Start: 2024-12-08T18:00:00\n"
        "End: 2024-12-01T20:00:00\n"
        "Refund Policy: Full refund up to 48h before\n"
        "Map Embed: https://maps.example.com/embed/1\n"
        "Calendar Embed: https://calendar.example.com/embed/1\n"
        "Booking Link: https://calendly.com/d/one"
    )


def test_render_compact_note(records):
    """Compact notes use a single line per record."""
    assert render_note(records, style="compact") == (
        "Event Details:\n"
        "Event 1: Wheel Throwing Basics (2024-12-01T18:00:00 - 2024-12-01T20:00:00)\n"
        "Event 2: Glazing Night (2024-12-08T18:00:00 - 2024-12-01T20:00:00) https://calendly.com/d/one"
    )


def test_render_missing_fields():
    """Missing fields render as N/A and the title falls back to the line item."""
    note = render_note([EnrichedRecord(line_item_title="Mystery Class", details={})])

    assert "Event 1: Mystery Class" in note
    assert "Address: N/A" in note
    assert "Booking Link" not in note


def test_annotate_overwrites_order_note(order_data, records):
    """The rendered note is written to the order."""
    shopify = MagicMock()
    order = parse_order(json.dumps(order_data))

    note = OrderAnnotator(shopify).annotate(order, records)

    shopify.update_order_note.assert_called_once_with(5845762638078, note)
    assert note.startswith("Event Details:\n\nEvent 1:")


def test_annotate_propagates_failure(order_data, records):
    """Shopify failures are not swallowed."""
    shopify = MagicMock()
    shopify.update_order_note.side_effect = AnnotationError("Failed to add note")

    with pytest.raises(AnnotationError):
        OrderAnnotator(shopify).annotate(parse_order(json.dumps(order_data)), records)
