from sqlalchemy import Column, Integer, Text, DateTime, Float, ForeignKey
from sqlalchemy.sql import func

from quickdesk.core.database import Base


class AgentRating(Base):
    __tablename__ = "agent_ratings"

    id = Column(Integer, primary_key=True, index=True)
    agent_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    rating = Column(Float, nullable=False)
    comment = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
