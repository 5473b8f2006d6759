from sqlalchemy import Column, Integer, String, Text, DateTime, Float, JSON
from sqlalchemy.sql import func

from quickdesk.core.database import Base


ROLE_USER = "user"
ROLE_AGENT = "agent"
ROLE_ADMIN = "admin"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(128), index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), default=ROLE_USER, index=True, nullable=False)

    # Free-text keywords matched against ticket descriptions and category tags
    specializations = Column(JSON, default=list, nullable=False)

    # Agent profile (left at defaults for users/admins)
    rating = Column(Float, default=0.0, nullable=False)
    total_ratings = Column(Integer, default=0, nullable=False)
    bio = Column(Text, default="", nullable=False)
    experience = Column(Text, default="", nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @property
    def is_agent(self) -> bool:
        return self.role == ROLE_AGENT
