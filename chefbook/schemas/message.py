"""Pydantic schemas for messages. Accepts snake_case (REST) and camelCase (websocket) keys."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class MessageCreate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    receiver_id: int
    content: str = Field(..., min_length=1, max_length=5000)
    booking_id: int | None = None


class TypingEvent(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    receiver_id: int


class MarkReadRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message_ids: list[int] = Field(default_factory=list)


class MarkReadResponse(BaseModel):
    updated: int


class MessageResponse(BaseModel):
    id: int
    booking_id: int | None = None
    sender_id: int
    receiver_id: int
    content: str
    timestamp: datetime
    read: bool

    class Config:
        from_attributes = True
