# server/utils/datetime_utils.py
"""
Strict UTC datetime handling to prevent timezone drift.
All datetimes are stored as naive UTC.
"""
from datetime import datetime, timezone
from typing import Optional
import logging

logger = logging.getLogger(__name__)


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO 8601 string to a naive UTC datetime.

    Accepts a bare date ("2024-03-05"), a naive datetime (treated as UTC)
    or an aware datetime ("2024-03-05T10:00:00Z", "...+08:00").

    Raises:
        ValueError: If the string is not ISO 8601
    """
    if value is None:
        return None

    value = value.strip()
    if not value:
        return None

    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise ValueError(f"Invalid date format '{value}'")

    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)

    logger.debug(f"Parsed date: {value} -> {dt} (UTC)")
    return dt


def to_iso_string(dt: Optional[datetime]) -> Optional[str]:
    """
    Convert datetime to ISO string with UTC timezone.

    Args:
        dt: datetime object (assumed UTC if naive)

    Returns:
        ISO format string with 'Z' suffix (UTC)
    """
    if dt is None:
        return None

    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)

    return dt.strftime('%Y-%m-%dT%H:%M:%S.%f')[:-3] + 'Z'


def get_utc_now() -> datetime:
    """
    Get current UTC time as naive datetime.
    Use this instead of datetime.utcnow().
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)

