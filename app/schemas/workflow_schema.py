"""Pydantic schema for the inbound reminder workflow trigger."""

from pydantic import BaseModel, ConfigDict, Field


class ReminderTriggerSchema(BaseModel):
    """Payload that starts a reminder run: ``{"subscriptionId": "..."}``."""

    model_config = ConfigDict(populate_by_name=True)

    subscription_id: str = Field(..., min_length=1, alias="subscriptionId")
