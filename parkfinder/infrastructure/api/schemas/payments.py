from pydantic import BaseModel, Field, field_validator, ConfigDict
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
from parkfinder.domain.common import PaymentMethod, PaymentStatus


class PaymentIntentRequest(BaseModel):
    """Body of POST /create-payment-intent; keys are camelCase on the wire."""
    amount: Optional[Decimal] = None
    user_id: Optional[int] = Field(default=None, alias="userId")
    reservation_id: Optional[int] = Field(default=None, alias="reservationId")
    payment_method: PaymentMethod = Field(default=PaymentMethod.CREDIT_CARD, alias="paymentMethod")

    model_config = ConfigDict(populate_by_name=True)


class PaymentIntentResponse(BaseModel):
    client_secret: Optional[str] = Field(default=None, serialization_alias="clientSecret")
    id: str
    payment_id: int = Field(..., serialization_alias="paymentId")


class PaymentResponse(BaseModel):
    id: int
    user_id: int
    amount: float
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    stripe_payment_intent_id: Optional[str] = None
    transaction_date: datetime
    last_four: Optional[str] = None
    card_brand: Optional[str] = None

    @field_validator('transaction_date')
    @classmethod
    def make_datetime_aware(cls, dt: datetime) -> datetime:
        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
        return dt

    model_config = ConfigDict(from_attributes=True)


class PaymentStatusResponse(BaseModel):
    status: str
    amount: float
    payment: Optional[PaymentResponse] = None

    model_config = ConfigDict(from_attributes=True)


class WebhookAck(BaseModel):
    received: bool = True
