import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from sqlalchemy.orm import Session

from quickdesk.api.dependencies import get_db
from quickdesk.api.security import get_current_user
from quickdesk.models.ticket import Ticket, TicketComment
from quickdesk.models.user import User
from quickdesk.schemas.agent_schema import BestProvider
from quickdesk.schemas.ticket_schema import (
    AddCommentRequest,
    CommentResponse,
    MessageOnly,
    TicketCreatedResponse,
    TicketPage,
    TicketResponse,
    TicketStats,
    UpdateTicketRequest,
    VoteRequest,
)
from quickdesk.services.attachment_service import save_attachment
from quickdesk.services.notification_service import TYPE_TICKET_ASSIGNED, create_notification
from quickdesk.services.ticket_service import (
    SORT_OPTIONS,
    create_ticket,
    list_tickets,
    provider_payload,
    ticket_stats,
)

logger = logging.getLogger(__name__)
router = APIRouter()


def _get_ticket_or_404(db: Session, ticket_id: int) -> Ticket:
    ticket = db.query(Ticket).filter(Ticket.id == ticket_id).first()
    if not ticket:
        raise HTTPException(status_code=404, detail="Ticket not found")
    return ticket


def _to_page(result: dict) -> TicketPage:
    return TicketPage(
        tickets=[TicketResponse.model_validate(t) for t in result["tickets"]],
        page=result["page"],
        total_pages=result["total_pages"],
        total_tickets=result["total_tickets"],
    )


def _check_sort(sort: str) -> None:
    if sort not in SORT_OPTIONS:
        raise HTTPException(status_code=400, detail=f"sort must be one of: {', '.join(SORT_OPTIONS)}")


@router.get("/stats", response_model=TicketStats)
def get_stats(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    """Dashboard counters scoped to the caller's role."""
    return ticket_stats(db, user)


@router.get("/", response_model=TicketPage)
def get_tickets(
    page: int = 1,
    search: str = "",
    status: str = "",
    category: Optional[int] = None,
    sort: str = "recent",
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    _check_sort(sort)
    return _to_page(list_tickets(db, page=page, search=search, status=status, category=category, sort=sort))


@router.get("/my", response_model=TicketPage)
def get_my_tickets(
    page: int = 1,
    search: str = "",
    status: str = "",
    category: Optional[int] = None,
    sort: str = "recent",
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    _check_sort(sort)
    return _to_page(
        list_tickets(
            db, page=page, search=search, status=status, category=category, sort=sort, created_by=user.id
        )
    )


@router.post("/", response_model=TicketCreatedResponse, status_code=201)
def post_ticket(
    subject: str = Form(..., min_length=1, max_length=255),
    description: str = Form(..., min_length=1),
    category_id: Optional[int] = Form(default=None),
    attachment: Optional[UploadFile] = File(default=None),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    stored = save_attachment(attachment)
    ticket, top = create_ticket(
        db,
        creator=user,
        subject=subject,
        description=description,
        category_id=category_id,
        attachment=stored,
    )
    return TicketCreatedResponse(
        message="Ticket created successfully",
        ticket=TicketResponse.model_validate(ticket),
        best_providers=[BestProvider(**p) for p in provider_payload(top)],
    )


@router.get("/{ticket_id}", response_model=TicketResponse)
def get_ticket(ticket_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return _get_ticket_or_404(db, ticket_id)


@router.put("/{ticket_id}", response_model=TicketResponse)
def update_ticket(
    ticket_id: int,
    request: UpdateTicketRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Manual status change / reassignment. Independent of automatic matching."""
    ticket = _get_ticket_or_404(db, ticket_id)

    is_participant = user.is_admin or ticket.created_by == user.id or ticket.assigned_to == user.id
    if not is_participant:
        raise HTTPException(status_code=403, detail="Access denied")

    newly_assigned: Optional[User] = None
    if request.assigned_to is not None and request.assigned_to != ticket.assigned_to:
        if not (user.is_agent or user.is_admin):
            raise HTTPException(status_code=403, detail="Only agents or admins can reassign tickets")
        agent = db.query(User).filter(User.id == request.assigned_to).first()
        if not agent or not agent.is_agent:
            raise HTTPException(status_code=400, detail="assigned_to must reference an agent")
        ticket.assigned_to = agent.id
        ticket.assigned_agent_name = agent.username
        newly_assigned = agent

    if request.status is not None:
        ticket.status = request.status

    db.commit()
    db.refresh(ticket)

    if newly_assigned:
        logger.info("Ticket %s manually reassigned to agent %s by user %s", ticket.id, newly_assigned.id, user.id)
        create_notification(
            db,
            newly_assigned.id,
            TYPE_TICKET_ASSIGNED,
            "Ticket Assigned",
            f"You have been assigned ticket: {ticket.subject}",
            {"ticket_id": ticket.id},
        )
    return ticket


@router.post("/{ticket_id}/comments", response_model=CommentResponse, status_code=201)
def add_comment(
    ticket_id: int,
    request: AddCommentRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    ticket = _get_ticket_or_404(db, ticket_id)
    comment = TicketComment(ticket_id=ticket.id, content=request.content, created_by=user.id)
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return comment


@router.post("/{ticket_id}/vote", response_model=MessageOnly)
def vote(
    ticket_id: int,
    request: VoteRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    ticket = _get_ticket_or_404(db, ticket_id)
    # Increment in SQL, not read-modify-write
    column = Ticket.upvotes if request.vote == "up" else Ticket.downvotes
    db.query(Ticket).filter(Ticket.id == ticket.id).update(
        {column: column + 1}, synchronize_session=False
    )
    db.commit()
    return MessageOnly(message="Vote recorded successfully")
