"""Thin wrapper over the Stripe SDK calls the gateway consumes.

Every method performs exactly one Stripe API request and returns the SDK
object untouched. Errors (`stripe.StripeError` and subclasses) propagate.
"""

from contextlib import contextmanager
from typing import Any

import stripe

from paygate.common.config import CommonSettings
from paygate.common.logging import logger
from paygate.common.metrics import provider_call_seconds
from paygate.common.tracing import provider_span


class StripeProvider:
    """Customer lookup/creation, payment intents and subscriptions."""

    def __init__(self, settings: CommonSettings) -> None:
        stripe.api_key = settings.stripe_secret_key
        stripe.api_version = settings.stripe_api_version
        stripe.max_network_retries = 0
        self.service_name = settings.service_name

    @contextmanager
    def _call(self, call: str):
        with provider_span(call), provider_call_seconds.labels(service=self.service_name, call=call).time():
            yield

    def find_customer_by_email(self, email: str) -> Any | None:
        """Return the first Stripe customer with `email`, or None."""

        with self._call("customers.list"):
            customers = stripe.Customer.list(email=email, limit=1)
        if not customers.data:
            return None
        return customers.data[0]

    def create_customer(self, email: str, name: str | None, payment_method_id: str) -> Any:
        """Create a customer with `payment_method_id` attached as invoice default."""

        with self._call("customers.create"):
            customer = stripe.Customer.create(
                email=email,
                name=name,
                payment_method=payment_method_id,
                invoice_settings={"default_payment_method": payment_method_id},
            )
        logger.info("stripe customer created customer_id=%s", customer["id"])
        return customer

    def create_payment_intent(self, **params: Any) -> Any:
        with self._call("payment_intents.create"):
            return stripe.PaymentIntent.create(**params)

    def create_subscription(self, **params: Any) -> Any:
        with self._call("subscriptions.create"):
            return stripe.Subscription.create(**params)
