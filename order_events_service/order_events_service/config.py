"""Service configuration loaded from the environment."""

from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class ServiceConfig(BaseSettings):
    """Immutable configuration for one order webhook pipeline.

    Loads values from environment variables and a .env file (if present).
    An instance is handed to the pipeline explicitly; nothing reads the
    environment after construction.
    """

    # Shopify
    shopify_webhook_secret: str = ""
    shopify_store_url: str = ""
    admin_api_access_token: str = ""
    shopify_api_version: str = "2024-10"
    event_metafield_namespace: str = "custom"
    event_metafield_key: str = "event"
    event_field_prefix: str = "event."

    # Klaviyo
    klaviyo_api_key: str = ""
    klaviyo_events_url: str = "https://a.klaviyo.com/api/events/"
    klaviyo_revision: str = "2023-07-15"
    klaviyo_event_name: str = "Event Product Purchased"
    klaviyo_profile_mode: Literal["external_id", "email"] = "external_id"
    klaviyo_time_format: Literal["iso", "epoch"] = "iso"

    # Calendly (scheduling links are only minted when a token is set)
    calendly_api_token: str = ""
    calendly_api_url: str = "https://api.calendly.com"
    scheduling_handle_field: str = "calendly_event_url_handle"

    # Order note
    note_style: Literal["detailed", "compact"] = "detailed"

    # Outbound HTTP
    http_timeout: float = 15.0

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore", frozen=True)

    @property
    def shopify_graphql_url(self) -> str:
        return f"https://{self.shopify_store_url}/admin/api/{self.shopify_api_version}/graphql.json"

    @property
    def scheduling_enabled(self) -> bool:
        return bool(self.calendly_api_token)


_config: Optional[ServiceConfig] = None


def get_config() -> ServiceConfig:
    """Return the process-wide ServiceConfig, building it on first use."""
    global _config
    if _config is None:
        _config = ServiceConfig()
    return _config

