import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from quickdesk.api.dependencies import get_db
from quickdesk.api.security import get_current_user
from quickdesk.models.chat_message import ChatMessage
from quickdesk.models.ticket import STATUS_IN_PROGRESS, STATUS_OPEN, Ticket
from quickdesk.models.user import User
from quickdesk.schemas.chat_schema import ChatMessageResponse, ChatResponse, SendMessageRequest
from quickdesk.schemas.ticket_schema import TicketResponse
from quickdesk.services.notification_service import (
    TYPE_AGENT_RESPONSE,
    TYPE_USER_RESPONSE,
    create_notification,
)

logger = logging.getLogger(__name__)
router = APIRouter()


def _get_accessible_ticket(db: Session, ticket_id: int, user: User) -> Ticket:
    """Users see their own tickets, agents the ones assigned to them, admins everything."""
    ticket = db.query(Ticket).filter(Ticket.id == ticket_id).first()
    if not ticket:
        raise HTTPException(status_code=404, detail="Ticket not found")

    if user.is_admin:
        return ticket
    if user.is_agent:
        if ticket.assigned_to != user.id:
            raise HTTPException(status_code=403, detail="Access denied")
    elif ticket.created_by != user.id:
        raise HTTPException(status_code=403, detail="Access denied")
    return ticket


@router.get("/{ticket_id}", response_model=ChatResponse)
def get_chat(
    ticket_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    ticket = _get_accessible_ticket(db, ticket_id, user)
    messages = (
        db.query(ChatMessage)
        .filter(ChatMessage.ticket_id == ticket.id)
        .order_by(ChatMessage.id.asc())
        .all()
    )
    return ChatResponse(
        ticket=TicketResponse.model_validate(ticket),
        chat=[ChatMessageResponse.model_validate(m) for m in messages],
        agent=ticket.assigned_agent_name,
    )


@router.post("/{ticket_id}/message", response_model=ChatMessageResponse)
def send_message(
    ticket_id: int,
    request: SendMessageRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    content = request.content.strip()
    if not content:
        raise HTTPException(status_code=400, detail="Message content is required")

    ticket = _get_accessible_ticket(db, ticket_id, user)

    msg = ChatMessage(
        ticket_id=ticket.id,
        sender_id=user.id,
        sender_name=user.username or user.email,
        sender_role=user.role,
        content=content,
    )
    db.add(msg)

    # First conversation on a ticket moves it forward; never moves it back
    if ticket.status == STATUS_OPEN:
        ticket.status = STATUS_IN_PROGRESS
        logger.info("Ticket %s moved to %s", ticket.id, STATUS_IN_PROGRESS)

    db.commit()
    db.refresh(msg)

    if user.is_agent and ticket.created_by != user.id:
        create_notification(
            db,
            ticket.created_by,
            TYPE_AGENT_RESPONSE,
            "Agent Response",
            f"{user.username} responded to your ticket: {ticket.subject}",
            {"ticket_id": ticket.id, "agent_id": user.id, "agent_name": user.username},
        )
    elif not user.is_agent and not user.is_admin and ticket.assigned_to:
        create_notification(
            db,
            ticket.assigned_to,
            TYPE_USER_RESPONSE,
            "User Response",
            f"{user.username} responded to ticket: {ticket.subject}",
            {"ticket_id": ticket.id, "user_id": user.id, "user_name": user.username},
        )

    return msg
