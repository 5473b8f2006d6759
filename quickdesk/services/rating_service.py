import logging
import math
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from quickdesk.models.agent_rating import AgentRating
from quickdesk.models.user import User

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


class InvalidRatingError(ValueError):
    pass


def validate_rating(rating: float) -> float:
    if rating is None or not math.isfinite(rating) or not (MIN_RATING <= rating <= MAX_RATING):
        raise InvalidRatingError(f"Rating must be between {MIN_RATING} and {MAX_RATING}")
    return float(rating)


def aggregate_rating(current_average: float, current_count: int, new_rating: float) -> Tuple[float, int]:
    """Fold one more rating into a running average. Returns (average, count)."""
    current_average = current_average or 0.0
    current_count = current_count or 0
    new_count = current_count + 1
    new_average = (current_average * current_count + new_rating) / new_count
    return new_average, new_count


def rate_agent(
    db: Session,
    agent: User,
    *,
    rating: float,
    rated_by: int,
    comment: Optional[str] = None,
) -> User:
    """Apply a rating to `agent` and record it.

    Read-modify-write without row locking: two concurrent ratings for the same
    agent can lose one update.
    """
    rating = validate_rating(rating)
    agent.rating, agent.total_ratings = aggregate_rating(agent.rating, agent.total_ratings, rating)

    db.add(
        AgentRating(
            agent_id=agent.id,
            user_id=rated_by,
            rating=rating,
            comment=comment,
        )
    )
    db.commit()
    db.refresh(agent)
    logger.info("Agent %s rated %.1f by user %s (avg=%.2f over %d)",
                agent.id, rating, rated_by, agent.rating, agent.total_ratings)
    return agent
