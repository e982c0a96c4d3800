"""Order webhook pipeline: verify, parse, enrich, track, annotate."""

from .annotator import OrderAnnotator
from .config import ServiceConfig
from .enricher import LineItemEnricher
from .logger import logger
from .parser import extract_identity, parse_order
from .scheduling import CalendlyClient
from .schemas import WebhookResponse
from .shopify_client import ShopifyAdminClient
from .tracker import KlaviyoTracker
from .verification import verify_signature


class OrderWebhookPipeline:
    """Processes one order-created webhook per call to handle().

    Holds no per-order state, so a single instance can serve concurrent
    requests. Collaborators default to real API clients built from config
    and can be replaced for testing.
    """

    def __init__(
        self,
        config: ServiceConfig,
        shopify: ShopifyAdminClient | None = None,
        tracker: KlaviyoTracker | None = None,
        calendly: CalendlyClient | None = None,
    ):
        """Initialize the pipeline.

        Args:
            config: Service configuration
            shopify: Shopify Admin client used for catalog lookups and notes
            tracker: Klaviyo tracker
            calendly: Scheduling client; built from config when a Calendly token is set
        """
        self.config = config
        self.shopify = shopify or ShopifyAdminClient(config)
        self.tracker = tracker or KlaviyoTracker(config)
        if calendly is None and config.scheduling_enabled:
            calendly = CalendlyClient(config)
        self.enricher = LineItemEnricher(config, self.shopify, calendly)
        self.annotator = OrderAnnotator(self.shopify, config.note_style)

    def handle(self, raw_body: bytes | str, signature: str | None) -> WebhookResponse:
        """Run the whole pipeline for one webhook delivery.

        Args:
            raw_body: Exact request body as received
            signature: Value of the X-Shopify-Hmac-Sha256 header

        Returns:
            WebhookResponse: 401 if the signature is invalid, 500 on any
            processing error, 200 otherwise (including when nothing was tracked)
        """
        if not verify_signature(self.config.shopify_webhook_secret, raw_body, signature):
            logger.error("Invalid webhook signature")
            return WebhookResponse.unauthorized()

        try:
            self.process(raw_body)
        except Exception:
            logger.exception("Error processing webhook")
            return WebhookResponse.server_error()

        return WebhookResponse.success()

    def process(self, raw_body: bytes | str) -> None:
        """Process an already verified body; exceptions propagate to the caller."""
        order = parse_order(raw_body)
        identity = extract_identity(order)

        records = self.enricher.enrich(order, identity)
        logger.info(f"Collected {len(records)} event product record(s) for order {order.id}")

        if not records:
            logger.info("No event products found, skipping Klaviyo event tracking and order note update")
            return

        self.tracker.track(order, identity, records)
        self.annotator.annotate(order, records)
