"""Klaviyo event tracking for orders containing event products."""

import json
from datetime import datetime, timezone

import requests
from logging_utils.config import get_http_logger

from .config import ServiceConfig
from .errors import TrackingError, describe_http_error
from .logger import SERVICE_NAME
from .schemas import CustomerIdentity, EnrichedRecord, OrderPayload

logger = get_http_logger(SERVICE_NAME, "klaviyo")


def format_event_time(created_at: datetime, time_format: str) -> str | int:
    """Render the order time as Klaviyo expects it.

    Naive timestamps are taken to be UTC.
    """
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    if time_format == "epoch":
        return int(created_at.timestamp())
    return created_at.astimezone(timezone.utc).isoformat()


class KlaviyoTracker:
    """Posts one custom event per order to the Klaviyo events API."""

    def __init__(self, config: ServiceConfig):
        """Initialize the tracker from service configuration.

        Args:
            config: Service configuration holding the Klaviyo key and contract options
        """
        self.url = config.klaviyo_events_url
        self.api_key = config.klaviyo_api_key
        self.revision = config.klaviyo_revision
        self.event_name = config.klaviyo_event_name
        self.profile_mode = config.klaviyo_profile_mode
        self.time_format = config.klaviyo_time_format
        self.timeout = config.http_timeout

    def build_profile(self, order: OrderPayload, identity: CustomerIdentity) -> dict | None:
        """Return the profile attributes for the event, or None if there is no usable identity."""
        if self.profile_mode == "external_id":
            return {"external_id": order.non_pii_id}
        if not identity.email:
            return None
        profile = {"email": identity.email}
        if identity.first_name:
            profile["first_name"] = identity.first_name
        if identity.last_name:
            profile["last_name"] = identity.last_name
        return profile

    def build_payload(self, order: OrderPayload, profile: dict, records: list[EnrichedRecord]) -> dict:
        return {
            "data": {
                "type": "event",
                "attributes": {
                    "metric": {"data": {"type": "metric", "attributes": {"name": self.event_name}}},
                    "profile": {"data": {"type": "profile", "attributes": profile}},
                    "properties": {
                        "event_products": [record.as_properties() for record in records],
                        "order_id": order.id,
                    },
                    "time": format_event_time(order.created_at, self.time_format),
                },
            }
        }

    def track(self, order: OrderPayload, identity: CustomerIdentity, records: list[EnrichedRecord]) -> bool:
        """Record the purchase of event products.

        Args:
            order: Parsed order
            identity: Resolved customer identity
            records: Enriched records, in order

        Returns:
            bool: True if the event was sent, False if it was skipped for lack of a profile

        Raises:
            TrackingError: If the Klaviyo call fails
        """
        profile = self.build_profile(order, identity)
        if profile is None:
            logger.warning(f"No email found for order {order.id}, skipping Klaviyo event tracking")
            return False

        payload = self.build_payload(order, profile, records)
        logger.info(f"Sending payload to Klaviyo: {json.dumps(payload, indent=2, default=str)}")

        try:
            response = requests.post(
                self.url,
                json=payload,
                headers={
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                    "Authorization": f"Klaviyo-API-Key {self.api_key}",
                    "revision": self.revision,
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            detail = describe_http_error(e)
            logger.error(f"Error tracking Klaviyo event for order {order.id}: {detail}")
            raise TrackingError(f"Failed to track Klaviyo event: {detail}") from e

        logger.info(f"Tracked Klaviyo event '{self.event_name}' for order {order.id}")
        return True
