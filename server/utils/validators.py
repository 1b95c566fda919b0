# server/utils/validators.py
import re
from typing import Optional

from models.ticket import RepairLevel, TicketStatus

CATEGORY_CODE_PATTERN = re.compile(r"^[A-Za-z]+$")


def validate_category_code(code: str) -> str:
    """Validate category code (letters only) and normalize to upper case."""
    code = (code or "").strip()
    if not CATEGORY_CODE_PATTERN.match(code):
        raise ValueError("Category code must contain only letters (A-Z). Numbers are not allowed.")
    return code.upper()


def validate_status(value: Optional[str]) -> Optional[TicketStatus]:
    """Validate ticket status, case-insensitive ("in progress" -> In Progress)."""
    if value is None or not value.strip():
        return None
    normalized = " ".join(value.replace("_", " ").split()).lower()
    for status in TicketStatus:
        if status.value.lower() == normalized:
            return status
    allowed = ", ".join(s.value for s in TicketStatus)
    raise ValueError(f"Invalid status '{value}'. Must be one of: {allowed}")


def validate_repair_level(value: Optional[str]) -> Optional[RepairLevel]:
    """Validate level of repair. "Critical" and "Urgent" both map to Critical/Urgent."""
    if value is None or not value.strip():
        return None
    normalized = value.strip().lower()
    for level in RepairLevel:
        if normalized == level.value.lower() or normalized in level.value.lower().split("/"):
            return level
    allowed = ", ".join(l.value for l in RepairLevel)
    raise ValueError(f"Invalid level of repair '{value}'. Must be one of: {allowed}")
