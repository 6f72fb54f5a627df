"""Central environment-driven settings for the gateway process.

Loaded once at import time. Behavior is controlled by environment variables
(see `.env.example`).
"""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class CommonSettings(BaseSettings):
    """Typed view of runtime configuration from environment variables."""

    service_name: str = "paygate"
    log_level: str = "INFO"
    stripe_secret_key: str
    stripe_api_version: str = "2024-11-20.acacia"
    # Which implementation serves POST /api/stripe/payment.
    payment_mode: Literal["one_time", "subscription"] = "one_time"
    default_amount: float | None = 1000
    default_currency: str = "usd"
    fallback_receipt_email: str = "test@test.com"
    subscription_price_id: str = ""
    save_card_email: str = "test@test.com"
    save_card_name: str = "Test Customer"
    customer_store_url: str = ""
    customer_store_ttl_seconds: int = 86400
    tracing_enabled: bool = True
    otel_exporter_otlp_endpoint: str = "http://otel-collector:4318/v1/traces"
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = CommonSettings()
