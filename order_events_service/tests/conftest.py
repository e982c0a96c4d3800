"""Test fixtures for the order events service tests."""

import json
from unittest.mock import MagicMock

import pytest
import requests
from loguru import logger

from order_events_service.config import ServiceConfig
from order_events_service.verification import compute_signature

WEBHOOK_SECRET = "test-webhook-secret"


@pytest.fixture
def config():
    """Create a service config that ignores the environment's optional integrations.

    Returns:
        ServiceConfig: Config with test credentials and scheduling disabled.
    """
    return ServiceConfig(
        _env_file=None,
        shopify_webhook_secret=WEBHOOK_SECRET,
        shopify_store_url="test-store.myshopify.com",
        admin_api_access_token="shpat_test",
        klaviyo_api_key="pk_test",
        klaviyo_profile_mode="external_id",
        klaviyo_time_format="iso",
        calendly_api_token="",
        note_style="detailed",
    )


@pytest.fixture
def order_data():
    """Create a sample orders/create webhook payload.

    Returns:
        dict: An order with one event product bought twice and one plain product.
    """
    return {
        "id": 5845762638078,
        "created_at": "2024-11-02T10:15:00-04:00",
        "email": "",
        "contact_email": "",
        "customer": {"email": "ada@example.com", "first_name": "Ada", "last_name": "Lovelace"},
        "billing_address": {"first_name": "Ada", "last_name": "Lovelace"},
        "line_items": [
            {"product_id": 111, "title": "Pottery Workshop", "quantity": 2, "price": "45.00"},
            {"product_id": 222, "title": "Gift Card", "quantity": 1, "price": "25.00"},
        ],
    }


@pytest.fixture
def event_fields():
    """Catalog fields for the pottery workshop, as returned by the Shopify client."""
    return {
        "title": "Wheel Throwing Basics",
        "address": "12 Clay St, Portland",
        "start_date_time": "2024-12-01T18:00:00",
        "end_date_time": "2024-12-01T20:00:00",
        "refund_policy": "Full refund up to 48h before",
        "map_embed": "https://maps.example.com/embed/1",
        "calendar_embed": "https://calendar.example.com/embed/1",
    }


@pytest.fixture
def sign():
    """Return a helper that signs a body with the test webhook secret."""

    def _sign(body):
        return compute_signature(WEBHOOK_SECRET, body)

    return _sign


@pytest.fixture
def make_response():
    """Return a factory for mocked requests responses."""

    def _make(json_data=None, status_code=200, text=None):
        response = MagicMock()
        response.status_code = status_code
        response.json.return_value = json_data
        response.text = text if text is not None else json.dumps(json_data)
        if status_code >= 400:
            response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Error", response=response)
        return response

    return _make


@pytest.fixture
def log_messages():
    """Capture loguru messages emitted during a test."""
    messages = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
