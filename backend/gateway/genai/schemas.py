"""Pydantic schemas for the chat endpoint."""
from typing import List, Literal

from pydantic import BaseModel, Field, ValidationError

from gateway.ai_provider.base import ChatMessage


class ChatMessageInput(BaseModel):
    """A single chat turn as sent by clients."""
    role: Literal["user", "model", "system"]
    content: str = Field(..., min_length=1)

    def to_message(self) -> ChatMessage:
        return ChatMessage(role=self.role, content=self.content)


class ChatRequest(BaseModel):
    """Request model for POST /chat."""
    messages: List[ChatMessageInput] = Field(..., min_length=1)


_FIELD_MESSAGES = {
    "role": "Invalid role value",
    "content": "Content is required",
}


def first_error_message(exc: ValidationError) -> str:
    """Short, client-facing description of the first schema violation."""
    error = exc.errors()[0]
    raw_loc = tuple(error.get("loc", ()))
    loc = [part for part in raw_loc if isinstance(part, str)]
    field = loc[-1] if loc else ""

    if raw_loc and isinstance(raw_loc[-1], int):
        return "Each message must be an object"
    if field == "messages":
        if error.get("type") == "missing":
            return "Messages field is required"
        if error.get("type") == "too_short":
            return "At least one message is required"
        return "Messages must be a list"
    if field in _FIELD_MESSAGES:
        return _FIELD_MESSAGES[field]
    return error.get("msg", "Invalid request body")
