"""Startup config logging never leaks the Stripe secret."""

from paygate.common.config import CommonSettings
from paygate.common.startup import redacted_config


def test_secret_fields_are_redacted(settings):
    config = redacted_config(settings, ["stripe_secret_key", "payment_mode", "subscription_price_id"])

    assert config["stripe_secret_key"] == "<redacted>"
    assert config["payment_mode"] == "one_time"
    assert config["subscription_price_id"] == "price_123"
    assert config["service"] == "paygate"


def test_unknown_fields_are_marked_unset(settings):
    assert redacted_config(settings, ["nope"])["nope"] == "<unset>"


def test_store_url_credentials_are_stripped():
    settings = CommonSettings(
        stripe_secret_key="sk_test_dummy",
        customer_store_url="redis://:hunter2@redis:6379/0",
        tracing_enabled=False,
    )

    value = redacted_config(settings, ["customer_store_url"])["customer_store_url"]

    assert "hunter2" not in value
    assert value == "redis://<redacted>@redis:6379/0"


def test_store_url_without_credentials_is_unchanged():
    settings = CommonSettings(
        stripe_secret_key="sk_test_dummy",
        customer_store_url="redis://redis:6379/0",
        tracing_enabled=False,
    )

    assert redacted_config(settings, ["customer_store_url"])["customer_store_url"] == "redis://redis:6379/0"
