"""Gateway handlers: validate, delegate to Stripe once, shape the result.

Payments are confirmed server-side (`confirm=True` together with
`error_on_requires_action=True`): a card that needs 3D Secure or any other
customer action fails the request instead of pausing. The alternative is to
create the intent unconfirmed, return its `client_secret`, and let the browser
confirm it with Stripe.js, which handles step-up authentication at the cost of
a second round trip. Only the server-side flow is implemented.

Subscriptions use the client-side flow: the subscription is created
`default_incomplete` and the first invoice's payment intent client secret is
returned for the browser to confirm.
"""

from contextlib import contextmanager
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from pydantic import BaseModel, ValidationError

from paygate.common.config import CommonSettings
from paygate.common.logging import logger
from paygate.common.state_machine import DELEGATING, FAILED, SUCCEEDED, VALIDATING, HandlerRun
from paygate.services.gateway.expandable import require_expanded
from paygate.services.gateway.provider import StripeProvider
from paygate.services.gateway.schemas import (
    PaymentRequest,
    SaveCardRequest,
    SubscriptionRequest,
    SubscriptionResult,
)
from paygate.services.gateway.store import CustomerRecord, CustomerStore

PAYMENT_METHOD_TYPE = "card"

INVALID_AMOUNT = "Invalid amount provided"
INVALID_CURRENCY = "Invalid currency provided"
INVALID_BODY = "Invalid request body"

# First failing field decides the message; anything unlisted is INVALID_BODY.
FIELD_MESSAGES = {
    "amount": INVALID_AMOUNT,
    "currency": INVALID_CURRENCY,
    "paymentMethodId": "paymentMethodId is required",
    "email": "email is required",
}


class RequestValidationFailed(ValueError):
    """Local input error; the provider was not contacted."""


class GatewayConfigError(RuntimeError):
    """Server-side configuration needed by a handler is missing."""


def to_minor_units(amount: float) -> int:
    """Convert a major-unit amount to minor units, rounding half up."""

    return int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def parse_body(model: type[BaseModel], payload: Any) -> Any:
    """Validate a decoded JSON body against `model`, raising `RequestValidationFailed`."""

    if not isinstance(payload, dict):
        raise RequestValidationFailed(INVALID_BODY)
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        loc = exc.errors()[0]["loc"]
        field = str(loc[0]) if loc else ""
        raise RequestValidationFailed(FIELD_MESSAGES.get(field, INVALID_BODY)) from exc


class GatewayService:
    """The three gateway operations over one provider and one customer store."""

    def __init__(self, provider: StripeProvider, store: CustomerStore, settings: CommonSettings) -> None:
        self.provider = provider
        self.store = store
        self.settings = settings

    @contextmanager
    def _phase(self, run: HandlerRun, state: str):
        run.advance(state)
        try:
            yield
        except Exception:
            run.advance(FAILED)
            logger.info("handler_finished operation=%s states=%s", run.operation, run.history)
            raise

    def _succeed(self, run: HandlerRun) -> None:
        run.advance(SUCCEEDED)
        logger.info("handler_finished operation=%s states=%s", run.operation, run.history)

    def _find_or_create_customer(self, email: str, name: str | None, payment_method_id: str) -> tuple[Any, bool]:
        """Return (customer, created)."""

        customer = self.provider.find_customer_by_email(email)
        if customer is not None:
            return customer, False
        return self.provider.create_customer(email, name, payment_method_id), True

    def create_payment_intent(self, payload: Any) -> dict[str, str]:
        """Create and confirm a one-time card payment."""

        run = HandlerRun("payment_intent")
        with self._phase(run, VALIDATING):
            req = parse_body(PaymentRequest, payload)
            amount = req.amount if req.amount is not None else self.settings.default_amount
            if not amount or amount <= 0:
                raise RequestValidationFailed(INVALID_AMOUNT)
            minor_amount = to_minor_units(amount)
            # Sub-cent amounts round down to nothing.
            if minor_amount <= 0:
                raise RequestValidationFailed(INVALID_AMOUNT)
            currency = (req.currency or self.settings.default_currency).lower()

        with self._phase(run, DELEGATING):
            intent = self.provider.create_payment_intent(
                amount=minor_amount,
                currency=currency,
                payment_method_types=[PAYMENT_METHOD_TYPE],
                payment_method=req.payment_method_id,
                confirm=True,
                receipt_email=req.email or self.settings.fallback_receipt_email,
                error_on_requires_action=True,
                metadata={"profile_id": req.profile_id or ""},
            )
            logger.info(
                "payment intent created payment_intent_id=%s status=%s amount=%s currency=%s",
                intent["id"],
                intent["status"],
                intent["amount"],
                currency,
            )
        self._succeed(run)
        return {"message": "Payment intent created successfully"}

    def create_subscription(self, payload: Any) -> dict[str, str]:
        """Create a subscription for the configured price and return its client secret."""

        run = HandlerRun("subscription")
        with self._phase(run, VALIDATING):
            req = parse_body(SubscriptionRequest, payload)

        with self._phase(run, DELEGATING):
            price_id = self.settings.subscription_price_id
            if not price_id:
                raise GatewayConfigError("SUBSCRIPTION_PRICE_ID is not configured")

            customer, created = self._find_or_create_customer(req.email, req.name, req.payment_method_id)
            self.store.put(
                CustomerRecord(
                    email=req.email,
                    customer_id=customer["id"],
                    payment_method_id=req.payment_method_id,
                )
            )
            logger.info("subscription customer customer_id=%s created=%s", customer["id"], created)

            subscription = self.provider.create_subscription(
                customer=customer["id"],
                items=[{"price": price_id}],
                default_payment_method=req.payment_method_id,
                payment_behavior="default_incomplete",
                collection_method="charge_automatically",
                payment_settings={
                    "payment_method_types": [PAYMENT_METHOD_TYPE],
                    "save_default_payment_method": "on_subscription",
                },
                metadata={"profile_id": req.profile_id or ""},
                expand=["latest_invoice.payment_intent"],
            )
            invoice = require_expanded(subscription["latest_invoice"], "latest_invoice")
            payment_intent = require_expanded(invoice["payment_intent"], "latest_invoice.payment_intent")
            result = SubscriptionResult(
                subscriptionId=subscription["id"],
                clientSecret=payment_intent["client_secret"],
            )
            logger.info(
                "subscription created subscription_id=%s status=%s",
                subscription["id"],
                subscription["status"],
            )
        self._succeed(run)
        return result.model_dump()

    def save_card(self, payload: Any) -> dict[str, str]:
        """Register the configured customer identity with a stored card."""

        run = HandlerRun("save_card")
        with self._phase(run, VALIDATING):
            req = parse_body(SaveCardRequest, payload)

        email = self.settings.save_card_email
        with self._phase(run, DELEGATING):
            customer, created = self._find_or_create_customer(
                email, self.settings.save_card_name, req.payment_method_id
            )
            self.store.put(
                CustomerRecord(
                    email=email,
                    customer_id=customer["id"],
                    payment_method_id=req.payment_method_id,
                )
            )
            logger.info("save card customer_id=%s created=%s", customer["id"], created)
        self._succeed(run)
        if created:
            return {"message": "Customer created successfully"}
        return {"message": "Customer already exists"}
