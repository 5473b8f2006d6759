from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from quickdesk.api.dependencies import get_db
from quickdesk.api.security import get_current_user
from quickdesk.models.user import ROLE_AGENT, User
from quickdesk.schemas.agent_schema import (
    AgentProfileResponse,
    RateAgentRequest,
    RateAgentResponse,
    UpdateAgentProfileRequest,
)
from quickdesk.services.agent_matcher import normalize_tags
from quickdesk.services.rating_service import InvalidRatingError, rate_agent

router = APIRouter()


def _get_agent_or_404(db: Session, agent_id: int) -> User:
    agent = db.query(User).filter(User.id == agent_id, User.role == ROLE_AGENT).first()
    if not agent:
        raise HTTPException(status_code=404, detail="Agent not found")
    return agent


@router.post("/{agent_id}/rate", response_model=RateAgentResponse)
def rate(
    agent_id: int,
    request: RateAgentRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    agent = _get_agent_or_404(db, agent_id)
    try:
        agent = rate_agent(db, agent, rating=request.rating, rated_by=user.id, comment=request.comment)
    except InvalidRatingError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return RateAgentResponse(
        message="Rating submitted successfully",
        new_rating=agent.rating,
        total_ratings=agent.total_ratings,
    )


@router.get("/{agent_id}/profile", response_model=AgentProfileResponse)
def get_profile(agent_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return _get_agent_or_404(db, agent_id)


@router.put("/{agent_id}/profile", response_model=AgentProfileResponse)
def update_profile(
    agent_id: int,
    request: UpdateAgentProfileRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Agents edit their own profile; admins may edit any agent's."""
    agent = _get_agent_or_404(db, agent_id)
    if not (user.is_admin or user.id == agent.id):
        raise HTTPException(status_code=403, detail="Access denied")

    if request.specializations is not None:
        agent.specializations = normalize_tags(request.specializations)
    if request.bio is not None:
        agent.bio = request.bio
    if request.experience is not None:
        agent.experience = request.experience

    db.commit()
    db.refresh(agent)
    return agent
