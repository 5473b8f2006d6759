import logging
import math
from typing import Any, List, Optional, Tuple

from sqlalchemy import func as sqlfunc, or_
from sqlalchemy.orm import Query, Session

from quickdesk.core.config import settings
from quickdesk.models.ticket import STATUS_OPEN, STATUS_RESOLVED, Ticket, TicketComment
from quickdesk.models.user import User
from quickdesk.services.agent_matcher import CandidateScore, best_agent, rank_agents
from quickdesk.services.email_service import send_email_notification
from quickdesk.services.notification_service import (
    TYPE_BEST_PROVIDERS,
    TYPE_TICKET_ASSIGNED,
    create_notification,
)

logger = logging.getLogger(__name__)

SORT_OPTIONS = ("recent", "oldest", "most-comments", "most-votes")


def provider_payload(candidates: List[CandidateScore]) -> List[dict[str, Any]]:
    return [
        {
            "id": c.agent.id,
            "name": c.agent.username,
            "rating": c.rating,
            "specializations": list(c.specializations),
            "score": c.score,
        }
        for c in candidates
    ]


def create_ticket(
    db: Session,
    *,
    creator: User,
    subject: str,
    description: str,
    category_id: Optional[int],
    attachment: Optional[str] = None,
) -> Tuple[Ticket, List[CandidateScore]]:
    """Create a ticket, auto-assign the best agent and send the derived notifications.

    Returns the persisted ticket and the best-provider candidates (at most
    BEST_PROVIDERS_LIMIT). Notification/email failures never fail the ticket.
    """
    ranked = rank_agents(db, description, category_id)
    assigned = best_agent(ranked)

    ticket = Ticket(
        subject=subject,
        description=description,
        category_id=category_id,
        status=STATUS_OPEN,
        created_by=creator.id,
        assigned_to=assigned.id if assigned else None,
        assigned_agent_name=assigned.username if assigned else None,
        attachment=attachment,
        upvotes=0,
        downvotes=0,
    )
    db.add(ticket)
    db.commit()
    db.refresh(ticket)

    top = ranked[: settings.BEST_PROVIDERS_LIMIT]
    if top:
        create_notification(
            db,
            creator.id,
            TYPE_BEST_PROVIDERS,
            "Best Service Providers Found",
            f"We found {len(top)} expert agents for your request",
            {"ticket_id": ticket.id, "agents": provider_payload(top)},
        )

    if assigned:
        logger.info("Ticket %s auto-assigned to agent %s (score=%.2f)", ticket.id, assigned.id, ranked[0].score)
        send_email_notification(
            assigned.email,
            "New Ticket Assigned",
            f"You have been assigned a new ticket: {subject}",
        )
        create_notification(
            db,
            assigned.id,
            TYPE_TICKET_ASSIGNED,
            "New Ticket Assigned",
            f"You have been assigned ticket: {subject}",
            {"ticket_id": ticket.id},
        )
    else:
        logger.info("Ticket %s created without a matching agent", ticket.id)

    return ticket, top


def _apply_filters(
    q: Query,
    *,
    search: str = "",
    status: str = "",
    category: Optional[int] = None,
) -> Query:
    if search:
        q = q.filter(
            or_(
                Ticket.subject.icontains(search, autoescape=True),
                Ticket.description.icontains(search, autoescape=True),
            )
        )
    if status:
        q = q.filter(Ticket.status == status)
    if category is not None:
        q = q.filter(Ticket.category_id == category)
    return q


def _apply_sort(db: Session, q: Query, sort: str) -> Query:
    if sort == "oldest":
        return q.order_by(Ticket.created_at.asc(), Ticket.id.asc())
    if sort == "most-votes":
        return q.order_by(Ticket.upvotes.desc(), Ticket.id.desc())
    if sort == "most-comments":
        counts = (
            db.query(TicketComment.ticket_id, sqlfunc.count(TicketComment.id).label("n"))
            .group_by(TicketComment.ticket_id)
            .subquery()
        )
        return q.outerjoin(counts, counts.c.ticket_id == Ticket.id).order_by(
            sqlfunc.coalesce(counts.c.n, 0).desc(), Ticket.id.desc()
        )
    # "recent" and anything unrecognised
    return q.order_by(Ticket.created_at.desc(), Ticket.id.desc())


def list_tickets(
    db: Session,
    *,
    page: int = 1,
    search: str = "",
    status: str = "",
    category: Optional[int] = None,
    sort: str = "recent",
    created_by: Optional[int] = None,
) -> dict[str, Any]:
    """Paginated, filtered ticket listing. `created_by` limits it to one user's tickets."""
    page = max(1, page)
    limit = settings.TICKETS_PAGE_SIZE

    q = db.query(Ticket)
    if created_by is not None:
        q = q.filter(Ticket.created_by == created_by)
    q = _apply_filters(q, search=search, status=status, category=category)

    total = q.count()
    tickets = _apply_sort(db, q, sort).offset((page - 1) * limit).limit(limit).all()

    return {
        "tickets": tickets,
        "page": page,
        "total_pages": math.ceil(total / limit) if limit else 0,
        "total_tickets": total,
    }


def ticket_stats(db: Session, user: User) -> dict[str, int]:
    q = db.query(Ticket)
    if user.is_agent:
        q = q.filter(Ticket.assigned_to == user.id)
    elif not user.is_admin:
        q = q.filter(Ticket.created_by == user.id)

    return {
        "total_tickets": q.count(),
        "open_tickets": q.filter(Ticket.status == STATUS_OPEN).count(),
        "resolved_tickets": q.filter(Ticket.status == STATUS_RESOLVED).count(),
    }
