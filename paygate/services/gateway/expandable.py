"""Stripe expandable fields as an explicit two-variant type.

Stripe returns fields such as `subscription.latest_invoice` either as a bare
id string or, when requested through `expand=[...]`, as the full object.
`expandable()` classifies a raw value once so callers branch on the variant
instead of inspecting shapes.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict


class ExpansionError(RuntimeError):
    """An expected inline object came back as a bare reference."""


class Reference(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["reference"] = "reference"
    id: str


class Expanded(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: Literal["expanded"] = "expanded"
    id: str
    obj: Any


Expandable = Reference | Expanded


def expandable(value: Any) -> Expandable:
    """Classify a raw Stripe field value."""

    if isinstance(value, str):
        return Reference(id=value)
    if value is None:
        raise ExpansionError("expandable field is missing")
    return Expanded(id=value["id"], obj=value)


def require_expanded(value: Any, field: str) -> Any:
    """Return the inline object for `field` or raise `ExpansionError`."""

    match expandable(value):
        case Expanded(obj=obj):
            return obj
        case Reference(id=ref):
            raise ExpansionError(f"{field} was not expanded (got reference {ref})")
