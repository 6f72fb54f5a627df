"""Request/response bodies for the gateway endpoints.

Field names follow the JSON the browser client sends (camelCase); Python code
uses the snake_case attribute names.
"""

from pydantic import BaseModel, ConfigDict, Field


class _Body(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class PaymentRequest(_Body):
    """Body accepted by the one-time payment variant.

    `amount` is in major currency units; when absent the server default is
    used.
    """

    amount: float | None = Field(default=None, gt=0, allow_inf_nan=False, strict=True)
    currency: str | None = Field(default=None, pattern=r"^[A-Za-z]{3}$")
    payment_method_id: str = Field(alias="paymentMethodId", min_length=1)
    email: str | None = None
    profile_id: str | None = Field(default=None, alias="profileId")


class SubscriptionRequest(_Body):
    """Body accepted by the subscription variant."""

    email: str = Field(min_length=1)
    name: str | None = None
    payment_method_id: str = Field(alias="paymentMethodId", min_length=1)
    profile_id: str | None = Field(default=None, alias="profileId")


class SaveCardRequest(_Body):
    payment_method_id: str = Field(alias="paymentMethodId", min_length=1)


class SubscriptionResult(BaseModel):
    subscriptionId: str
    clientSecret: str
