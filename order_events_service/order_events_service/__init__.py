"""Order events service: enriches order-created webhooks with event data."""

__version__ = "0.1.0"
