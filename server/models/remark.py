from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from .base import Base
from utils.datetime_utils import get_utc_now


class Remark(Base):
    """Append-only note on a ticket. Only body/updated_at change on edit."""
    __tablename__ = "remark"

    id = Column(Integer, primary_key=True, autoincrement=True)
    ticket_id = Column(Integer, ForeignKey("ticket.id", ondelete="CASCADE"), nullable=False)
    body = Column(Text, nullable=False)
    added_by = Column(String(255), nullable=True)
    created_at = Column(DateTime, nullable=False, default=get_utc_now)
    updated_at = Column(DateTime, nullable=True)

    ticket = relationship("Ticket", back_populates="remarks")

    __table_args__ = (
        Index("idx_remark_ticket", "ticket_id", "created_at"),
    )

    def __repr__(self):
        return f"<Remark {self.id} ticket={self.ticket_id}>"
