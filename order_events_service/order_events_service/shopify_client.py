"""Shopify Admin GraphQL client for product event data and order notes."""

import json

import requests
from logging_utils.config import get_http_logger

from .config import ServiceConfig
from .errors import LOOKUP_ERRORS, AnnotationError, describe_http_error
from .logger import SERVICE_NAME

logger = get_http_logger(SERVICE_NAME, "shopify")

PRODUCT_EVENT_QUERY = """
query GetProductEvent($productId: ID!, $namespace: String!, $key: String!) {
  product(id: $productId) {
    metafield(namespace: $namespace, key: $key) {
      reference {
        ... on Metaobject {
          fields {
            key
            value
          }
        }
      }
    }
  }
}
"""

ORDER_NOTE_MUTATION = """
mutation UpdateOrder($input: OrderInput!) {
  orderUpdate(input: $input) {
    order {
      id
      note
    }
    userErrors {
      field
      message
    }
  }
}
"""


class ShopifyAdminClient:
    """Thin wrapper around the Shopify Admin GraphQL endpoint."""

    def __init__(self, config: ServiceConfig):
        """Initialize the client from service configuration.

        Args:
            config: Service configuration holding store URL and access token
        """
        self.endpoint = config.shopify_graphql_url
        self.access_token = config.admin_api_access_token
        self.timeout = config.http_timeout
        self.namespace = config.event_metafield_namespace
        self.key = config.event_metafield_key
        self.field_prefix = config.event_field_prefix

    def _post(self, query: str, variables: dict) -> dict:
        response = requests.post(
            self.endpoint,
            json={"query": query, "variables": variables},
            headers={
                "Content-Type": "application/json",
                "X-Shopify-Access-Token": self.access_token,
            },
            timeout=self.timeout,
        )
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict):
            raise ValueError(f"Unexpected GraphQL response: {data!r}")
        return data

    def fetch_event_fields(self, product_id: int | str) -> dict[str, str] | None:
        """Read the event metaobject referenced by a product's metafield.

        Args:
            product_id: Numeric Shopify product id

        Returns:
            dict[str, str] | None: Field values keyed without the field prefix,
            or None if the product has no event data or the lookup failed
        """
        variables = {
            "productId": f"gid://shopify/Product/{product_id}",
            "namespace": self.namespace,
            "key": self.key,
        }
        try:
            data = self._post(PRODUCT_EVENT_QUERY, variables)
            return self._read_event_fields(product_id, data)
        except LOOKUP_ERRORS as e:
            logger.error(f"Error fetching event data for product {product_id}: {describe_http_error(e)}")
            return None

    def _read_event_fields(self, product_id: int | str, data: dict) -> dict[str, str] | None:
        if data.get("errors"):
            logger.error(f"GraphQL errors for product {product_id}: {json.dumps(data['errors'])}")
            return None

        product = (data.get("data") or {}).get("product")
        metafield = product.get("metafield") if product else None
        if not metafield or not metafield.get("reference"):
            logger.info(f"No '{self.namespace}.{self.key}' metafield found for product {product_id}")
            return None

        fields = {}
        for field in metafield["reference"].get("fields") or []:
            key = field.get("key") or ""
            if key.startswith(self.field_prefix):
                key = key[len(self.field_prefix):]
            if key and field.get("value") is not None:
                fields[key] = str(field["value"])
        return fields

    def update_order_note(self, order_id: int | str, note: str) -> None:
        """Overwrite an order's note.

        Args:
            order_id: Numeric Shopify order id
            note: Full note text; any existing note is replaced

        Raises:
            AnnotationError: On transport failure, GraphQL errors or user errors
        """
        variables = {"input": {"id": f"gid://shopify/Order/{order_id}", "note": note}}
        try:
            data = self._post(ORDER_NOTE_MUTATION, variables)
        except (requests.RequestException, ValueError) as e:
            detail = describe_http_error(e)
            logger.error(f"Error adding note to Shopify order {order_id}: {detail}")
            raise AnnotationError(f"Failed to add note to Shopify order {order_id}: {detail}") from e

        if data.get("errors"):
            logger.error(f"GraphQL errors updating order {order_id}: {json.dumps(data['errors'])}")
            raise AnnotationError(f"Failed to add note to Shopify order {order_id}")

        result = (data.get("data") or {}).get("orderUpdate") or {}
        user_errors = result.get("userErrors") or []
        if user_errors:
            logger.error(f"User errors updating order {order_id}: {json.dumps(user_errors)}")
            raise AnnotationError(f"Failed to add note to Shopify order {order_id}")

        logger.info(f"Added event details to Shopify order {order_id} notes")
