"""
Chat Pydantic Schemas
Request and response models for the member chat assistant
"""

from typing import List, Literal

from pydantic import BaseModel, Field

from clubos.schemas.event import EventResponse


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str = Field(..., min_length=1, max_length=4000)


class ChatRequest(BaseModel):
    """Conversation so far, oldest first; the last message is the member's new turn"""

    messages: List[ChatMessage] = Field(..., min_length=1, max_length=50)


class ChatAttachment(BaseModel):
    """Event cards for the client to render next to the reply"""

    type: Literal["event_list", "event_cancel", "event_choices"]
    events: List[EventResponse]


class ChatResponse(BaseModel):
    message: str
    attachments: List[ChatAttachment] = []
