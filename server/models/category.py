from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin


class Category(Base, TimestampMixin):
    """Maintenance type; its code is embedded in control numbers."""
    __tablename__ = "category"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    code = Column(String(16), nullable=False, unique=True)

    tickets = relationship("Ticket", back_populates="category")

    def __repr__(self):
        return f"<Category {self.code}>"


class Location(Base, TimestampMixin):
    """Known location offered to the intake form."""
    __tablename__ = "location"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, unique=True)

    def __repr__(self):
        return f"<Location {self.name}>"
