"""Order payload parsing and customer identity resolution."""

import json
from collections.abc import Callable

from pydantic import ValidationError

from .errors import OrderParseError
from .logger import logger
from .schemas import CustomerIdentity, IdentitySource, OrderPayload

Extractor = Callable[[OrderPayload], str | None]


def _source_field(source: IdentitySource | None, name: str) -> str | None:
    if source is None:
        return None
    return getattr(source, name, None)


# Sources are tried in order; the first non-empty value wins.
EMAIL_EXTRACTORS: list[Extractor] = [
    lambda order: _source_field(order.customer, "email"),
    lambda order: order.email,
    lambda order: order.contact_email,
    lambda order: _source_field(order.billing_address, "email"),
]

FIRST_NAME_EXTRACTORS: list[Extractor] = [
    lambda order: _source_field(order.customer, "first_name"),
    lambda order: order.first_name,
    lambda order: _source_field(order.billing_address, "first_name"),
]

LAST_NAME_EXTRACTORS: list[Extractor] = [
    lambda order: _source_field(order.customer, "last_name"),
    lambda order: order.last_name,
    lambda order: _source_field(order.billing_address, "last_name"),
]


def first_non_empty(order: OrderPayload, extractors: list[Extractor]) -> str:
    """Run extractors in order and return the first non-blank value, or ''."""
    for extract in extractors:
        value = extract(order)
        if value and value.strip():
            return value.strip()
    return ""


def extract_identity(order: OrderPayload) -> CustomerIdentity:
    """Resolve email and name from whichever part of the payload carries them."""
    return CustomerIdentity(
        email=first_non_empty(order, EMAIL_EXTRACTORS),
        first_name=first_non_empty(order, FIRST_NAME_EXTRACTORS),
        last_name=first_non_empty(order, LAST_NAME_EXTRACTORS),
    )


def parse_order(raw_body: bytes | str) -> OrderPayload:
    """Deserialize a verified webhook body into an OrderPayload.

    Args:
        raw_body: The exact body that passed signature verification

    Returns:
        OrderPayload: The parsed order

    Raises:
        OrderParseError: If the body is not JSON or not an order object
    """
    try:
        data = json.loads(raw_body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise OrderParseError(f"Webhook body is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise OrderParseError(f"Webhook body is a JSON {type(data).__name__}, expected an object")

    logger.debug(f"Received order object: {json.dumps(data, indent=2)}")

    try:
        return OrderPayload.model_validate(data)
    except ValidationError as e:
        raise OrderParseError(f"Webhook body is not an order: {e}") from e
