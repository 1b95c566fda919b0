# server/services/control_number_service.py
"""
Control number allocation.

Format: RMF-{categoryCode}-{YYYY}-{MM}-{SEQ}

SEQ is shared by all categories within a (year, month) bucket. It is taken
from a counter row incremented with a single UPDATE inside the caller's
transaction, so the row stays locked until the ticket is committed and two
requests can never observe the same value. Values above 999 simply widen
(1000, 1001, ...); counters never go down, so numbers are not reused after
deletions.
"""
import re
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.config import CONTROL_NUMBER_PREFIX
from core.logger import get_logger
from models.category import Category
from models.control_number import ControlNumberSequence
from models.ticket import Ticket
from utils.datetime_utils import get_utc_now
from utils.exceptions import CategoryNotFoundError

logger = get_logger(__name__)

CONTROL_NUMBER_PATTERN = re.compile(
    r"^(?P<prefix>[A-Z]+)-(?P<code>[A-Z]+)-(?P<year>\d{4})-(?P<month>\d{2})-(?P<seq>\d{3,})$"
)

# Bounded retries for the bucket-row insert race
_MAX_BUCKET_ATTEMPTS = 3


def format_control_number(code: str, year: int, month: int, sequence: int,
                          prefix: str = CONTROL_NUMBER_PREFIX) -> str:
    return f"{prefix}-{code}-{year:04d}-{month:02d}-{sequence:03d}"


def parse_control_number(control_number: str) -> Optional[dict]:
    """Split a control number into its parts, or None if it is malformed."""
    match = CONTROL_NUMBER_PATTERN.match(control_number or "")
    if not match:
        return None
    return {
        "prefix": match.group("prefix"),
        "code": match.group("code"),
        "year": int(match.group("year")),
        "month": int(match.group("month")),
        "sequence": int(match.group("seq")),
    }


class ControlNumberAllocator:
    """Mints control numbers from the per-month counter."""

    def __init__(self, clock: Callable[[], datetime] = get_utc_now,
                 prefix: str = CONTROL_NUMBER_PREFIX):
        self.clock = clock
        self.prefix = prefix

    def allocate(self, db: Session, category_id: int) -> str:
        """
        Allocate the next control number for a category.

        Runs inside the caller's transaction; the caller commits.

        Raises:
            CategoryNotFoundError: If the category does not exist
        """
        category = db.get(Category, category_id) if category_id is not None else None
        if not category:
            raise CategoryNotFoundError(category_id)

        now = self.clock()
        sequence = self.next_sequence(db, now.year, now.month)
        control_number = format_control_number(
            category.code, now.year, now.month, sequence, prefix=self.prefix
        )
        logger.info(f"Control number allocated: {control_number}")
        return control_number

    def next_sequence(self, db: Session, year: int, month: int) -> int:
        """Atomically increment and return the counter for (year, month)."""
        for attempt in range(1, _MAX_BUCKET_ATTEMPTS + 1):
            if self._increment(db, year, month):
                return self._current_value(db, year, month)

            # Bucket row does not exist yet: create it seeded from existing tickets
            seed = self._highest_issued(db, year, month)
            try:
                with db.begin_nested():
                    db.add(ControlNumberSequence(year=year, month=month, last_value=seed + 1))
                logger.info(f"✓ Control number bucket created: {year}-{month:02d} (seed={seed})")
                return seed + 1
            except IntegrityError:
                # Another request created the row first; increment theirs
                logger.warning(
                    f"Bucket {year}-{month:02d} created concurrently, retrying (attempt {attempt})"
                )

        raise RuntimeError(f"Could not allocate sequence for {year}-{month:02d}")

    @staticmethod
    def _increment(db: Session, year: int, month: int) -> bool:
        result = db.execute(
            update(ControlNumberSequence)
            .where(ControlNumberSequence.year == year, ControlNumberSequence.month == month)
            .values(last_value=ControlNumberSequence.last_value + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    @staticmethod
    def _current_value(db: Session, year: int, month: int) -> int:
        return db.execute(
            select(ControlNumberSequence.last_value)
            .where(ControlNumberSequence.year == year, ControlNumberSequence.month == month)
        ).scalar_one()

    def _highest_issued(self, db: Session, year: int, month: int) -> int:
        """Highest sequence already used by tickets of this bucket (0 if none)."""
        pattern = f"{self.prefix}-%-{year:04d}-{month:02d}-%"
        rows = db.execute(
            select(Ticket.control_number).where(Ticket.control_number.like(pattern))
        ).scalars()

        highest = 0
        for control_number in rows:
            parts = parse_control_number(control_number)
            if parts and (parts["year"], parts["month"]) == (year, month):
                highest = max(highest, parts["sequence"])
        return highest
