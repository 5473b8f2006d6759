from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from quickdesk.schemas.agent_schema import BestProvider


class CommentResponse(BaseModel):
    id: int
    content: str
    created_by: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class TicketResponse(BaseModel):
    id: int
    subject: str
    description: str
    category_id: Optional[int] = None
    status: str
    created_by: int
    assigned_to: Optional[int] = None
    assigned_agent_name: Optional[str] = None
    attachment: Optional[str] = None
    upvotes: int
    downvotes: int
    comments: List[CommentResponse] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class TicketCreatedResponse(BaseModel):
    message: str
    ticket: TicketResponse
    best_providers: List[BestProvider]


class TicketPage(BaseModel):
    tickets: List[TicketResponse]
    page: int
    total_pages: int
    total_tickets: int


class TicketStats(BaseModel):
    total_tickets: int
    open_tickets: int
    resolved_tickets: int


class UpdateTicketRequest(BaseModel):
    status: Optional[Literal["open", "in-progress", "resolved"]] = None
    assigned_to: Optional[int] = None


class AddCommentRequest(BaseModel):
    content: str = Field(..., min_length=1, max_length=10000)


class VoteRequest(BaseModel):
    vote: Literal["up", "down"]


class MessageOnly(BaseModel):
    message: str
