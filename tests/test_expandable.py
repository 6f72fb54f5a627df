"""Reference vs expanded classification of Stripe fields."""

import pytest

from paygate.services.gateway.expandable import (
    Expanded,
    ExpansionError,
    Reference,
    expandable,
    require_expanded,
)


def test_bare_id_is_reference():
    assert expandable("in_123") == Reference(id="in_123")


def test_object_is_expanded():
    invoice = {"id": "in_123", "payment_intent": "pi_1"}
    value = expandable(invoice)

    assert isinstance(value, Expanded)
    assert value.id == "in_123"
    assert value.obj is invoice


def test_require_expanded_returns_object():
    invoice = {"id": "in_123"}
    assert require_expanded(invoice, "latest_invoice") is invoice


def test_require_expanded_rejects_reference():
    with pytest.raises(ExpansionError, match="latest_invoice"):
        require_expanded("in_123", "latest_invoice")


def test_missing_field_is_an_expansion_error():
    with pytest.raises(ExpansionError):
        expandable(None)
