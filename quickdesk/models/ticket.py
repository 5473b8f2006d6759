from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from quickdesk.core.database import Base


STATUS_OPEN = "open"
STATUS_IN_PROGRESS = "in-progress"
STATUS_RESOLVED = "resolved"


class Ticket(Base):
    __tablename__ = "tickets"

    id = Column(Integer, primary_key=True, index=True)
    subject = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    # May reference a category that no longer exists
    category_id = Column(Integer, index=True, nullable=True)
    status = Column(String(32), default=STATUS_OPEN, index=True, nullable=False)

    created_by = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    assigned_to = Column(Integer, ForeignKey("users.id"), index=True, nullable=True)
    assigned_agent_name = Column(String(128), nullable=True)

    attachment = Column(String(512), nullable=True)
    upvotes = Column(Integer, default=0, nullable=False)
    downvotes = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    comments = relationship(
        "TicketComment",
        back_populates="ticket",
        order_by="TicketComment.id",
        cascade="all, delete-orphan",
    )


class TicketComment(Base):
    __tablename__ = "ticket_comments"

    id = Column(Integer, primary_key=True, index=True)
    ticket_id = Column(Integer, ForeignKey("tickets.id"), index=True, nullable=False)
    content = Column(Text, nullable=False)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    ticket = relationship("Ticket", back_populates="comments")
