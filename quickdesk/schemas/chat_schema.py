from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from quickdesk.schemas.ticket_schema import TicketResponse


class SendMessageRequest(BaseModel):
    content: str = Field(..., description="Message text; blank after trimming is rejected")


class ChatMessageResponse(BaseModel):
    id: int
    ticket_id: int
    sender_id: int
    sender_name: str
    sender_role: str
    content: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ChatResponse(BaseModel):
    ticket: TicketResponse
    chat: List[ChatMessageResponse] = Field(default=[], description="Messages, oldest first")
    agent: Optional[str] = Field(default=None, description="Assigned agent name")
