"""StripeProvider forwards to the SDK with the expected parameters."""

from unittest.mock import MagicMock, patch

import pytest
import stripe

from paygate.services.gateway.provider import StripeProvider


@pytest.fixture
def stripe_provider(settings):
    return StripeProvider(settings)


def test_configures_sdk(settings, stripe_provider):
    assert stripe.api_key == settings.stripe_secret_key
    assert stripe.api_version == "2024-11-20.acacia"
    assert stripe.max_network_retries == 0


def test_find_customer_returns_first_match(stripe_provider):
    listing = MagicMock()
    listing.data = [{"id": "cus_1"}]

    with patch("stripe.Customer.list", return_value=listing) as mock_list:
        customer = stripe_provider.find_customer_by_email("a@b.com")

    assert customer == {"id": "cus_1"}
    mock_list.assert_called_once_with(email="a@b.com", limit=1)


def test_find_customer_returns_none_when_empty(stripe_provider):
    listing = MagicMock()
    listing.data = []

    with patch("stripe.Customer.list", return_value=listing):
        assert stripe_provider.find_customer_by_email("a@b.com") is None


def test_create_customer_sets_default_payment_method(stripe_provider):
    with patch("stripe.Customer.create", return_value={"id": "cus_2"}) as mock_create:
        customer = stripe_provider.create_customer("a@b.com", "Ada", "pm_1")

    assert customer["id"] == "cus_2"
    call_args = mock_create.call_args[1]
    assert call_args["payment_method"] == "pm_1"
    assert call_args["invoice_settings"] == {"default_payment_method": "pm_1"}
    assert call_args["name"] == "Ada"


def test_payment_intent_errors_propagate(stripe_provider):
    with patch("stripe.PaymentIntent.create") as mock_create:
        mock_create.side_effect = stripe.StripeError("card declined")

        with pytest.raises(stripe.StripeError):
            stripe_provider.create_payment_intent(amount=100, currency="usd")


def test_create_subscription_passes_params_through(stripe_provider):
    with patch("stripe.Subscription.create", return_value={"id": "sub_1"}) as mock_create:
        stripe_provider.create_subscription(customer="cus_1", expand=["latest_invoice.payment_intent"])

    mock_create.assert_called_once_with(customer="cus_1", expand=["latest_invoice.payment_intent"])
