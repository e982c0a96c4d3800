"""Order note rendering and write-back."""

from .logger import logger
from .schemas import EnrichedRecord, OrderPayload
from .shopify_client import ShopifyAdminClient

NOTE_HEADER = "Event Details:"

# (label, field key) pairs rendered in each detailed stanza after the title line
DETAIL_LINES = [
    ("Address", "address"),
    ("Start", "start_date_time"),
    ("End", "end_date_time"),
    ("Refund Policy", "refund_policy"),
    ("Map Embed", "map_embed"),
    ("Calendar Embed", "calendar_embed"),
]


def _record_title(record: EnrichedRecord) -> str:
    return record.get("title", default=record.line_item_title or "N/A")


def render_detailed_stanza(index: int, record: EnrichedRecord) -> str:
    lines = [f"Event {index}: {_record_title(record)}"]
    lines.extend(f"{label}: {record.get(key)}" for label, key in DETAIL_LINES)
    if record.scheduling_link:
        lines.append(f"Booking Link: {record.scheduling_link}")
    return "\n".join(lines)


def render_compact_line(index: int, record: EnrichedRecord) -> str:
    line = f"Event {index}: {_record_title(record)} ({record.get('start_date_time')} - {record.get('end_date_time')})"
    if record.scheduling_link:
        line += f" {record.scheduling_link}"
    return line


def render_note(records: list[EnrichedRecord], style: str = "detailed") -> str:
    """Render records as the human-readable order note.

    Records keep their order and are numbered from 1. The detailed style
    separates stanzas with a blank line; the compact style uses one line
    per record.
    """
    if style == "compact":
        body = "\n".join(render_compact_line(i, r) for i, r in enumerate(records, start=1))
        return f"{NOTE_HEADER}\n{body}"
    body = "\n\n".join(render_detailed_stanza(i, r) for i, r in enumerate(records, start=1))
    return f"{NOTE_HEADER}\n\n{body}"


class OrderAnnotator:
    """Overwrites an order's note with its event details."""

    def __init__(self, shopify: ShopifyAdminClient, style: str = "detailed"):
        self.shopify = shopify
        self.style = style

    def annotate(self, order: OrderPayload, records: list[EnrichedRecord]) -> str:
        """Write the note for records to the order and return the note text.

        Raises:
            AnnotationError: If Shopify rejects the update
        """
        note = render_note(records, self.style)
        logger.info(f"Adding note to Shopify order {order.id}:\n{note}")
        self.shopify.update_order_note(order.id, note)
        return note
