"""Per-line-item enrichment of an order with catalog and scheduling data."""

from .config import ServiceConfig
from .logger import logger
from .scheduling import CalendlyClient
from .schemas import CustomerIdentity, EnrichedRecord, LineItemPayload, OrderPayload
from .shopify_client import ShopifyAdminClient


class LineItemEnricher:
    """Turns line items into one EnrichedRecord per purchased unit.

    Lookups are made one line item at a time, one unit at a time, so the
    record order follows the order's line items and then the unit index.
    """

    def __init__(
        self,
        config: ServiceConfig,
        shopify: ShopifyAdminClient,
        calendly: CalendlyClient | None = None,
    ):
        self.shopify = shopify
        self.calendly = calendly
        self.handle_field = config.scheduling_handle_field

    def enrich(self, order: OrderPayload, identity: CustomerIdentity) -> list[EnrichedRecord]:
        """Collect records for every line item of an order.

        Args:
            order: Parsed order
            identity: Customer identity, used to prefill scheduling links

        Returns:
            list[EnrichedRecord]: Possibly empty; never longer than the total
            purchased quantity
        """
        records: list[EnrichedRecord] = []
        for line_item in order.line_items:
            logger.info(
                f"Processing line item: {line_item.title}, "
                f"Product ID: {line_item.product_id}, Quantity: {line_item.quantity}"
            )
            records.extend(self.enrich_line_item(line_item, identity))
        return records

    def enrich_line_item(self, line_item: LineItemPayload, identity: CustomerIdentity) -> list[EnrichedRecord]:
        if line_item.product_id is None:
            logger.warning(f"Line item '{line_item.title}' has no product, skipping")
            return []

        fields = self.shopify.fetch_event_fields(line_item.product_id)
        if fields is None:
            logger.warning(f"No event data found for product ID: {line_item.product_id}")
            return []

        fields = dict(fields)
        handle = fields.pop(self.handle_field, None)

        if self.calendly is None or not handle:
            return [EnrichedRecord(line_item_title=line_item.title, details=fields) for _ in range(line_item.quantity)]

        event_type_uri = self.calendly.resolve_event_type_uri(handle)
        if event_type_uri is None:
            logger.warning(f"Could not resolve scheduling handle '{handle}' for product {line_item.product_id}")
            return []

        records = []
        for ticket_number in range(1, line_item.quantity + 1):
            ticket_title = f"{line_item.title} - Ticket {ticket_number}"
            link = self.calendly.create_scheduling_link(event_type_uri, identity, ticket_title)
            if link is None:
                logger.warning(f"No scheduling link for '{ticket_title}', skipping ticket")
                continue
            records.append(
                EnrichedRecord(
                    line_item_title=line_item.title,
                    details=fields,
                    ticket_title=ticket_title,
                    scheduling_link=link,
                )
            )
        return records
