"""
Agent Matcher
Scores every agent against a new ticket's description and category tags,
then ranks them. Rank 1 is auto-assigned; the top few are surfaced to the
ticket creator as "best providers".

Scoring is additive per agent:
  +2.0 for each agent tag found (case-insensitive substring) in the description
  +1.0 for each (category tag, agent tag) pair where either contains the other
  +0.5 * the agent's current average rating
Only agents with a score strictly greater than zero are returned.
"""
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from quickdesk.models.category import Category
from quickdesk.models.user import ROLE_AGENT, User

logger = logging.getLogger(__name__)

DESCRIPTION_MATCH_WEIGHT = 2.0
CATEGORY_MATCH_WEIGHT = 1.0
RATING_WEIGHT = 0.5


@dataclass(frozen=True)
class AgentSnapshot:
    """Read-only view of an agent taken when a ticket is created."""
    id: int
    username: str
    email: str
    specializations: Tuple[str, ...] = ()
    rating: float = 0.0


@dataclass(frozen=True)
class CandidateScore:
    agent: AgentSnapshot
    score: float
    rating: float
    specializations: Tuple[str, ...]


def score_agent(
    description: str,
    category_specializations: Sequence[str],
    agent: AgentSnapshot,
) -> float:
    description_lower = description.lower()
    agent_tags = [tag.lower() for tag in agent.specializations]
    score = 0.0

    # Presence check only: a tag repeated in the description still counts once
    for tag in agent_tags:
        if tag in description_lower:
            score += DESCRIPTION_MATCH_WEIGHT

    for category_tag in category_specializations:
        category_tag = category_tag.lower()
        for tag in agent_tags:
            if tag in category_tag or category_tag in tag:
                score += CATEGORY_MATCH_WEIGHT

    score += (agent.rating or 0.0) * RATING_WEIGHT
    return score


def rank_candidates(
    description: str,
    category_specializations: Sequence[str],
    agents: Iterable[AgentSnapshot],
) -> List[CandidateScore]:
    """Rank a snapshot of agents for one ticket.

    Pure function: nothing is read from or written to the database. The result
    is ordered by descending score; ties keep the enumeration order of `agents`
    (sorted() is stable).
    """
    description = description or ""
    category_specializations = tuple(category_specializations or ())

    candidates: List[CandidateScore] = []
    for agent in agents:
        score = score_agent(description, category_specializations, agent)
        if score > 0:
            candidates.append(
                CandidateScore(
                    agent=agent,
                    score=score,
                    rating=agent.rating or 0.0,
                    specializations=agent.specializations,
                )
            )

    return sorted(candidates, key=lambda c: c.score, reverse=True)


def normalize_tags(tags: Optional[Iterable[str]]) -> List[str]:
    """Trim tags and drop blanks; a blank tag is a substring of every description."""
    return [t.strip() for t in (tags or ()) if t and t.strip()]


def _string_tags(tags) -> Tuple[str, ...]:
    # JSON columns are not type-checked; anything that is not a string is skipped
    return tuple(t for t in (tags or ()) if isinstance(t, str))


def snapshot_agent(user: User) -> AgentSnapshot:
    return AgentSnapshot(
        id=user.id,
        username=user.username,
        email=user.email,
        specializations=_string_tags(user.specializations),
        rating=float(user.rating or 0.0),
    )


def load_category_specializations(db: Session, category_id: Optional[int]) -> Tuple[str, ...]:
    if category_id is None:
        return ()
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        return ()
    return _string_tags(category.specializations)


def load_agent_snapshots(db: Session) -> List[AgentSnapshot]:
    agents = db.query(User).filter(User.role == ROLE_AGENT).order_by(User.id.asc()).all()
    return [snapshot_agent(a) for a in agents]


def rank_agents(db: Session, description: str, category_id: Optional[int]) -> List[CandidateScore]:
    """Rank all agents for a ticket about to be created.

    Never raises on lookup failure: a database error or an unreadable agent
    row degrades to an empty ranking so the ticket is simply created unassigned.
    """
    try:
        category_specializations = load_category_specializations(db, category_id)
        agents = load_agent_snapshots(db)
    except (SQLAlchemyError, TypeError, ValueError):
        logger.exception("Agent lookup failed; ticket will be created unassigned")
        db.rollback()
        return []

    ranked = rank_candidates(description, category_specializations, agents)
    logger.debug(
        "Ranked %d/%d agents for category=%s (top=%s)",
        len(ranked),
        len(agents),
        category_id,
        ranked[0].agent.id if ranked else None,
    )
    return ranked


def best_agent(ranked: Sequence[CandidateScore]) -> Optional[AgentSnapshot]:
    return ranked[0].agent if ranked else None
