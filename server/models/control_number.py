from sqlalchemy import Column, Integer, CheckConstraint
from .base import Base


class ControlNumberSequence(Base):
    """Last issued sequence value per (year, month) bucket. Never decremented."""
    __tablename__ = "control_number_sequence"

    year = Column(Integer, primary_key=True, autoincrement=False)
    month = Column(Integer, primary_key=True, autoincrement=False)
    last_value = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("month BETWEEN 1 AND 12", name="ck_control_number_sequence_month"),
        CheckConstraint("last_value >= 0", name="ck_control_number_sequence_value"),
    )

    def __repr__(self):
        return f"<ControlNumberSequence {self.year}-{self.month:02d} last={self.last_value}>"
