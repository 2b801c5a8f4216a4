"""Pydantic schemas for subscription validation."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.domain.clock import as_utc, utc_now

Currency = Literal["USD", "EUR", "GBP", "INR"]
Frequency = Literal["daily", "weekly", "monthly", "yearly"]
Category = Literal[
    "sports",
    "news",
    "entertainment",
    "lifestyle",
    "technology",
    "finance",
    "politics",
    "other",
]
Status = Literal["active", "cancelled", "expired"]


class SubscriptionCreateSchema(BaseModel):
    """Schema for creating a subscription.

    ``renewal_date`` may be omitted when ``frequency`` is given; it is then
    derived from ``start_date`` on save.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=2, max_length=100)
    price: float = Field(..., ge=0, le=10000)
    currency: Currency = "USD"
    frequency: Frequency | None = None
    category: Category
    payment_method: str = Field(..., min_length=1, alias="paymentMethod")
    status: Status = "active"
    start_date: datetime | None = Field(None, alias="startDate")
    renewal_date: datetime | None = Field(None, alias="renewalDate")

    @field_validator("name", "payment_method", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("start_date", "renewal_date", mode="after")
    @classmethod
    def normalise_timestamp(cls, value: datetime | None) -> datetime | None:
        return as_utc(value)

    @model_validator(mode="after")
    def validate_dates(self) -> "SubscriptionCreateSchema":
        """Start date must not be in the future; renewal must follow start."""
        start = self.start_date or utc_now()
        if self.start_date is not None and self.start_date > utc_now():
            raise ValueError("Start date must be in the past")
        if self.renewal_date is None and self.frequency is None:
            raise ValueError("Either renewal_date or frequency is required")
        if self.renewal_date is not None and self.renewal_date <= start:
            raise ValueError("Renewal date must be after the start date")
        return self


class SubscriptionUpdateSchema(BaseModel):
    """Schema for partially updating a subscription; unset fields are left alone."""

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = Field(None, min_length=2, max_length=100)
    price: float | None = Field(None, ge=0, le=10000)
    currency: Currency | None = None
    frequency: Frequency | None = None
    category: Category | None = None
    payment_method: str | None = Field(None, min_length=1, alias="paymentMethod")
    status: Status | None = None
    renewal_date: datetime | None = Field(None, alias="renewalDate")

    @field_validator("name", "payment_method", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("renewal_date", mode="after")
    @classmethod
    def normalise_timestamp(cls, value: datetime | None) -> datetime | None:
        return as_utc(value)
