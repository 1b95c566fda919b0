# server/models/__init__.py
from .base import Base
from .category import Category, Location
from .ticket import Ticket, TicketStatus, RepairLevel
from .remark import Remark
from .control_number import ControlNumberSequence

__all__ = [
    "Base",
    "Category",
    "Location",
    "Ticket",
    "TicketStatus",
    "RepairLevel",
    "Remark",
    "ControlNumberSequence",
]
