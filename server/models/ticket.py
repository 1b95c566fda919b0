from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Index, Integer, Enum
from sqlalchemy.orm import relationship, validates
import enum
from .base import Base, TimestampMixin


class TicketStatus(str, enum.Enum):
    """Ticket status. Every change is an explicit status write."""
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


class RepairLevel(str, enum.Enum):
    """Level of repair."""
    MINOR = "Minor"
    MAJOR = "Major"
    CRITICAL = "Critical/Urgent"


def _enum_column(enum_cls, name):
    return Enum(
        enum_cls,
        name=name,
        native_enum=False,
        length=32,
        values_callable=lambda x: [e.value for e in x],
    )


class Ticket(Base, TimestampMixin):
    """Maintenance request tracked by its control number."""
    __tablename__ = "ticket"

    id = Column(Integer, primary_key=True, autoincrement=True)
    control_number = Column(String(64), nullable=False, unique=True)

    category_id = Column(Integer, ForeignKey("category.id"), nullable=False)
    location = Column(String(255), nullable=False)
    level_of_repair = Column(_enum_column(RepairLevel, "repair_level_enum"), nullable=True)

    description = Column(Text, nullable=False)
    reported_by = Column(String(255), nullable=False)
    end_user = Column(String(255), nullable=True)

    status = Column(
        _enum_column(TicketStatus, "ticket_status_enum"),
        nullable=False,
        default=TicketStatus.PENDING,
    )
    received_at = Column(DateTime, nullable=False)
    accomplished_at = Column(DateTime, nullable=True)
    target_date = Column(DateTime, nullable=True)

    # Denormalized from received_at for monthly/yearly reports
    report_year = Column(Integer, nullable=False)
    report_month = Column(Integer, nullable=False)

    file_url = Column(String(255), nullable=True)

    category = relationship("Category", back_populates="tickets")
    remarks = relationship(
        "Remark",
        back_populates="ticket",
        cascade="all, delete-orphan",
        order_by="Remark.id",
    )

    __table_args__ = (
        Index("idx_ticket_status", "status"),
        Index("idx_ticket_report_period", "report_year", "report_month"),
        Index("idx_ticket_category", "category_id"),
    )

    @validates("received_at")
    def _derive_report_period(self, key, value):
        if value is not None:
            self.report_year = value.year
            self.report_month = value.month
        return value

    @property
    def current_remark(self):
        """Body of the most recently created remark, if any."""
        return self.remarks[-1].body if self.remarks else None

    @property
    def category_code(self):
        return self.category.code if self.category else None

    @property
    def category_name(self):
        return self.category.name if self.category else None

    def __repr__(self):
        return f"<Ticket {self.control_number}>"
