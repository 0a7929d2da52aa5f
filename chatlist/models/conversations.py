"""Conversation models shared by the fetcher, the cache and the views."""

from datetime import datetime
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidatorFunctionWrapHandler,
    field_validator,
)


class Conversation(BaseModel):
    """Summary of one chat thread as returned by the list endpoints.

    A missing or unparseable ``created_at`` is kept as ``None``: the
    conversation stays in the list but falls into no date bucket.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", coerce_numbers_to_str=True)

    id: str
    title: Optional[str] = None
    created_at: Optional[datetime] = None
    message_count: Optional[int] = Field(default=None, ge=0)
    last_message: Optional[str] = None

    @field_validator("created_at", mode="wrap")
    @classmethod
    def _unusable_timestamp_is_none(
        cls, value: Any, handler: ValidatorFunctionWrapHandler
    ) -> Optional[datetime]:
        try:
            return handler(value)
        except ValidationError:
            return None


class CreateChatRequest(BaseModel):
    """Body posted to the prompt endpoint to open a new conversation."""

    chat_id: str = "new"
    content: str


class CreatedConversation(BaseModel):
    """Response of the prompt endpoint for a newly created conversation."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    chat_id: str
    title: Optional[str] = None


class DateBuckets(BaseModel):
    """Conversations partitioned by creation day, newest first."""

    today: list[Conversation] = Field(default_factory=list)
    yesterday: list[Conversation] = Field(default_factory=list)
    last_seven_days: list[Conversation] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.today) + len(self.yesterday) + len(self.last_seven_days)
