from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.sql import func

from quickdesk.core.database import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    specializations = Column(JSON, default=list, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
