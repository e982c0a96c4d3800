"""Calendly client for minting single-use scheduling links."""

from urllib.parse import urlencode

import requests
from logging_utils.config import get_http_logger

from .config import ServiceConfig
from .errors import LOOKUP_ERRORS, describe_http_error
from .logger import SERVICE_NAME
from .schemas import CustomerIdentity

logger = get_http_logger(SERVICE_NAME, "calendly")


class CalendlyClient:
    """Resolves event type handles and creates one-booking links.

    Every method returns None instead of raising so a failed lookup only
    costs the ticket it was made for.
    """

    def __init__(self, config: ServiceConfig):
        """Initialize the client from service configuration.

        Args:
            config: Service configuration holding the Calendly token
        """
        self.base_url = config.calendly_api_url.rstrip("/")
        self.token = config.calendly_api_token
        self.timeout = config.http_timeout

    def _request(self, method: str, path: str, **kwargs) -> dict:
        response = requests.request(
            method,
            f"{self.base_url}{path}",
            headers={
                "Authorization": f"Bearer {self.token}",
                "Content-Type": "application/json",
            },
            timeout=self.timeout,
            **kwargs,
        )
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict):
            raise ValueError(f"Unexpected Calendly response: {data!r}")
        return data

    def get_current_user_uri(self) -> str | None:
        """Return the URI of the user owning the API token."""
        try:
            data = self._request("GET", "/users/me")
            return (data.get("resource") or {}).get("uri")
        except LOOKUP_ERRORS as e:
            logger.error(f"Error fetching Calendly user: {describe_http_error(e)}")
            return None

    def resolve_event_type_uri(self, handle: str) -> str | None:
        """Find the event type whose scheduling URL slug is exactly handle.

        Args:
            handle: Slug of the event type, e.g. "intro-workshop"

        Returns:
            str | None: The event type URI, or None if no active type matches
        """
        user_uri = self.get_current_user_uri()
        if not user_uri:
            return None

        try:
            data = self._request("GET", "/event_types", params={"user": user_uri, "active": "true"})
            for event_type in data.get("collection") or []:
                slug = (event_type.get("scheduling_url") or "").rstrip("/").rsplit("/", 1)[-1]
                if slug == handle or event_type.get("slug") == handle:
                    return event_type.get("uri")
        except LOOKUP_ERRORS as e:
            logger.error(f"Error listing Calendly event types: {describe_http_error(e)}")
            return None

        logger.warning(f"No Calendly event type found for handle '{handle}'")
        return None

    def create_scheduling_link(
        self, event_type_uri: str, identity: CustomerIdentity, ticket_title: str
    ) -> str | None:
        """Create a link that can be booked once.

        Args:
            event_type_uri: URI returned by resolve_event_type_uri
            identity: Customer identity used to prefill the booking form
            ticket_title: Title of the ticket the link is minted for

        Returns:
            str | None: Booking URL with invitee prefill parameters
        """
        payload = {"max_event_count": 1, "owner": event_type_uri, "owner_type": "EventType"}
        try:
            data = self._request("POST", "/scheduling_links", json=payload)
            booking_url = (data.get("resource") or {}).get("booking_url")
        except LOOKUP_ERRORS as e:
            logger.error(f"Error creating Calendly link for '{ticket_title}': {describe_http_error(e)}")
            return None

        if not booking_url or not isinstance(booking_url, str):
            logger.error(f"Calendly returned no booking URL for '{ticket_title}'")
            return None

        prefill = {"name": identity.full_name, "email": identity.email}
        query = urlencode({k: v for k, v in prefill.items() if v})
        logger.info(f"Created Calendly link for '{ticket_title}'")
        if not query:
            return booking_url
        separator = "&" if "?" in booking_url else "?"
        return f"{booking_url}{separator}{query}"
