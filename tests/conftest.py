"""Shared fixtures: a recording fake of the Stripe provider and a wired gateway."""

import os

os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_dummy")
os.environ["TRACING_ENABLED"] = "false"
os.environ["CUSTOMER_STORE_URL"] = ""

import pytest
from fastapi.testclient import TestClient

from paygate.common.config import CommonSettings
from paygate.services.gateway.service import GatewayService
from paygate.services.gateway.store import InMemoryCustomerStore


def expanded_subscription(sub_id: str = "sub_123", client_secret: str = "pi_123_secret_abc") -> dict:
    return {
        "id": sub_id,
        "status": "incomplete",
        "latest_invoice": {
            "id": "in_123",
            "payment_intent": {"id": "pi_123", "client_secret": client_secret},
        },
    }


class FakeProvider:
    """Records every call in order; customers live in a dict keyed by email."""

    def __init__(self, customers=None, subscription=None, error=None) -> None:
        self.calls: list[tuple[str, object]] = []
        self.customers: dict[str, dict] = dict(customers or {})
        self.subscription = subscription if subscription is not None else expanded_subscription()
        self.error = error
        self._created = 0

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def find_customer_by_email(self, email):
        self.calls.append(("find_customer_by_email", email))
        return self.customers.get(email)

    def create_customer(self, email, name, payment_method_id):
        self.calls.append(("create_customer", {"email": email, "name": name, "payment_method_id": payment_method_id}))
        self._created += 1
        customer = {"id": f"cus_new{self._created}", "email": email}
        self.customers[email] = customer
        return customer

    def create_payment_intent(self, **params):
        self.calls.append(("create_payment_intent", params))
        if self.error is not None:
            raise self.error
        return {"id": "pi_123", "status": "succeeded", "amount": params["amount"]}

    def create_subscription(self, **params):
        self.calls.append(("create_subscription", params))
        if self.error is not None:
            raise self.error
        return self.subscription


@pytest.fixture
def settings():
    return CommonSettings(
        stripe_secret_key="sk_test_dummy",
        subscription_price_id="price_123",
        tracing_enabled=False,
    )


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def store():
    return InMemoryCustomerStore()


@pytest.fixture
def gateway_service(provider, store, settings):
    return GatewayService(provider, store, settings)


@pytest.fixture
def client(gateway_service):
    from paygate.services.gateway.main import app, get_service

    app.dependency_overrides[get_service] = lambda: gateway_service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
