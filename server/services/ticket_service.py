# server/services/ticket_service.py
"""
Ticket lifecycle: intake, updates, deletion and remarks.

Ordering rules for stored assets:
- a new upload is validated and written before the record changes
- the record is committed before the previous asset is deleted
- if the commit fails the new upload is deleted and the old one is kept
"""
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from sqlalchemy import desc, or_
from sqlalchemy.orm import Session

from core.config import CONTROL_NUMBER_MAX_ATTEMPTS
from core.logger import get_logger
from models.category import Category
from models.remark import Remark
from models.ticket import Ticket, TicketStatus
from schemas.ticket import TicketForm
from services.category_service import LocationService
from services.control_number_service import ControlNumberAllocator
from services.file_storage import FileStorage
from services.file_validation_service import FileTrustValidator, IncomingFile
from utils.datetime_utils import get_utc_now, parse_iso_datetime
from utils.exceptions import CategoryNotFoundError, ConflictError, NotFoundError, ValidationError
from utils.validators import validate_repair_level, validate_status

logger = get_logger(__name__)

# Form attribute -> field name reported to clients
FIELD_NAMES = {
    "description": "description",
    "location": "location",
    "reported_by": "reportedBy",
    "item": "item",
    "end_user": "endUser",
    "level_of_repair": "levelOfRepair",
    "remarks": "remarks",
    "status": "status",
    "target_date": "targetDate",
    "date_received": "dateReceived",
    "date_accomplished": "dateAccomplished",
}

REQUIRED_ON_CREATE = ("description", "location", "reported_by", "item")


def stamp_accomplished_date(
    previous_status: Optional[TicketStatus],
    new_status: TicketStatus,
    current_date: Optional[datetime],
    explicit_date: Optional[datetime],
    now: datetime,
) -> Optional[datetime]:
    """
    Accomplished date after a status write.

    - non-Completed: always None (an explicit date is ignored)
    - Completed with an explicit date: that date
    - staying Completed: the existing date
    - becoming Completed: now
    """
    if new_status != TicketStatus.COMPLETED:
        return None
    if explicit_date is not None:
        return explicit_date
    if previous_status == TicketStatus.COMPLETED and current_date is not None:
        return current_date
    return now


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class TicketService:
    """Owns Ticket/Remark persistence and drives file validation and numbering."""

    def __init__(
        self,
        db: Session,
        storage: FileStorage,
        allocator: Optional[ControlNumberAllocator] = None,
        validator: Optional[FileTrustValidator] = None,
        clock: Callable[[], datetime] = get_utc_now,
    ):
        self.db = db
        self.storage = storage
        self.clock = clock
        self.allocator = allocator or ControlNumberAllocator(clock=clock)
        self.validator = validator or FileTrustValidator(storage)

    # ==================== TICKETS ====================

    def create_ticket(self, form: TicketForm, upload: Optional[IncomingFile] = None) -> Ticket:
        """
        Create a ticket with a freshly allocated control number.

        Raises:
            ValidationError: Missing or malformed fields
            CategoryNotFoundError: `item` names no category
            FileRejectedError: The upload failed validation
        """
        missing = [FIELD_NAMES[name] for name in REQUIRED_ON_CREATE if _blank(getattr(form, name))]
        if missing:
            raise ValidationError("Required fields are missing", missing)

        category_id = self._parse_category_id(form.item)
        status = self._parse(validate_status, form, "status") or TicketStatus.PENDING
        level = self._parse(validate_repair_level, form, "level_of_repair")
        received_at = self._parse(parse_iso_datetime, form, "date_received")
        target_date = self._parse(parse_iso_datetime, form, "target_date")
        explicit_accomplished = self._parse(parse_iso_datetime, form, "date_accomplished")

        # Category is checked before anything touches storage
        if not self.db.get(Category, category_id):
            raise CategoryNotFoundError(category_id)

        stored_name = self.validator.validate(upload) if upload else None
        now = self.clock()

        try:
            ticket = Ticket(
                control_number=self._allocate_unique(category_id),
                category_id=category_id,
                location=LocationService.resolve_location(self.db, form.location),
                level_of_repair=level,
                description=form.description.strip(),
                reported_by=form.reported_by.strip(),
                end_user=None if _blank(form.end_user) else form.end_user.strip(),
                status=status,
                received_at=received_at or now,
                target_date=target_date,
                accomplished_at=stamp_accomplished_date(
                    None, status, None, explicit_accomplished, now
                ),
                file_url=stored_name,
            )
            if not _blank(form.remarks):
                ticket.remarks.append(
                    Remark(body=form.remarks.strip(), added_by=ticket.reported_by, created_at=now)
                )

            self.db.add(ticket)
            self.db.commit()
        except BaseException:
            self.db.rollback()
            self.validator.discard(stored_name)
            raise

        self.db.refresh(ticket)
        logger.info(f"✓ Ticket created: {ticket.control_number}")
        return ticket

    def get_ticket(self, ticket_id: int) -> Ticket:
        ticket = self.db.get(Ticket, ticket_id)
        if not ticket:
            raise NotFoundError(f"Ticket not found: {ticket_id}")
        return ticket

    def get_by_control_number(self, control_number: str) -> Ticket:
        ticket = (
            self.db.query(Ticket)
            .filter(Ticket.control_number == control_number.strip().upper())
            .first()
        )
        if not ticket:
            raise NotFoundError(f"Ticket not found: {control_number}")
        return ticket

    def list_tickets(
        self,
        status: Optional[str] = None,
        category_id: Optional[int] = None,
        year: Optional[int] = None,
        month: Optional[int] = None,
        search: Optional[str] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> Tuple[List[Ticket], int]:
        """Newest first. Returns (page, total matching)."""
        query = self.db.query(Ticket)

        if status:
            try:
                query = query.filter(Ticket.status == validate_status(status))
            except ValueError as e:
                raise ValidationError(str(e), ["status"])
        if category_id is not None:
            query = query.filter(Ticket.category_id == category_id)
        if year is not None:
            query = query.filter(Ticket.report_year == year)
        if month is not None:
            query = query.filter(Ticket.report_month == month)
        if search and search.strip():
            term = f"%{search.strip()}%"
            query = query.filter(
                or_(
                    Ticket.control_number.ilike(term),
                    Ticket.description.ilike(term),
                    Ticket.reported_by.ilike(term),
                )
            )

        total = query.count()
        tickets = (
            query.order_by(desc(Ticket.received_at), desc(Ticket.id))
            .offset(offset)
            .limit(limit)
            .all()
        )
        return tickets, total

    def update_ticket(
        self, ticket_id: int, form: TicketForm, upload: Optional[IncomingFile] = None
    ) -> Ticket:
        """
        Apply the fields present in `form`. The control number never changes,
        even when the category does.
        """
        ticket = self.get_ticket(ticket_id)

        blanked = [
            FIELD_NAMES[name]
            for name in ("description", "location", "reported_by")
            if getattr(form, name) is not None and _blank(getattr(form, name))
        ]
        if blanked:
            raise ValidationError("Required fields cannot be blank", blanked)

        category_id = None
        if not _blank(form.item):
            category_id = self._parse_category_id(form.item)
            if category_id != ticket.category_id and not self.db.get(Category, category_id):
                raise CategoryNotFoundError(category_id)

        new_status = self._parse(validate_status, form, "status") or ticket.status
        level = self._parse(validate_repair_level, form, "level_of_repair")
        received_at = self._parse(parse_iso_datetime, form, "date_received")
        target_date = self._parse(parse_iso_datetime, form, "target_date")
        explicit_accomplished = self._parse(parse_iso_datetime, form, "date_accomplished")

        stored_name = self.validator.validate(upload) if upload else None
        previous_file = ticket.file_url
        now = self.clock()

        try:
            if form.description is not None:
                ticket.description = form.description.strip()
            if form.location is not None:
                ticket.location = LocationService.resolve_location(self.db, form.location)
            if form.reported_by is not None:
                ticket.reported_by = form.reported_by.strip()
            if form.end_user is not None:
                ticket.end_user = None if _blank(form.end_user) else form.end_user.strip()
            if form.level_of_repair is not None:
                ticket.level_of_repair = level
            if category_id is not None:
                ticket.category_id = category_id
            if received_at is not None:
                ticket.received_at = received_at
            if form.target_date is not None:
                ticket.target_date = target_date

            ticket.accomplished_at = stamp_accomplished_date(
                ticket.status, new_status, ticket.accomplished_at, explicit_accomplished, now
            )
            ticket.status = new_status

            if not _blank(form.remarks):
                ticket.remarks.append(
                    Remark(body=form.remarks.strip(), added_by=ticket.reported_by, created_at=now)
                )
            if stored_name:
                ticket.file_url = stored_name

            self.db.commit()
        except BaseException:
            self.db.rollback()
            self.validator.discard(stored_name)
            raise

        if stored_name and previous_file and previous_file != stored_name:
            self.validator.discard(previous_file)

        self.db.refresh(ticket)
        logger.info(f"✓ Ticket updated: {ticket.control_number} ({ticket.status.value})")
        return ticket

    def delete_ticket(self, ticket_id: int) -> None:
        """Delete a ticket, its remarks and, once committed, its stored file."""
        ticket = self.get_ticket(ticket_id)
        control_number = ticket.control_number
        stored_name = ticket.file_url

        try:
            self.db.delete(ticket)
            self.db.commit()
        except BaseException:
            self.db.rollback()
            raise

        self.validator.discard(stored_name)
        logger.info(f"✓ Ticket deleted: {control_number}")

    # ==================== REMARKS ====================

    def list_remarks(self, ticket_id: int) -> List[Remark]:
        return list(self.get_ticket(ticket_id).remarks)

    def add_remark(self, ticket_id: int, body: Optional[str], added_by: Optional[str] = None) -> Remark:
        if _blank(body):
            raise ValidationError("Remark body is required", ["body"])
        ticket = self.get_ticket(ticket_id)

        remark = Remark(
            ticket_id=ticket.id,
            body=body.strip(),
            added_by=None if _blank(added_by) else added_by.strip(),
            created_at=self.clock(),
        )
        self.db.add(remark)
        self.db.commit()
        self.db.refresh(remark)
        logger.info(f"✓ Remark added to {ticket.control_number}")
        return remark

    def edit_remark(self, remark_id: int, body: Optional[str]) -> Remark:
        """Change a remark's body. Author, creation time and ordering are untouched."""
        if _blank(body):
            raise ValidationError("Remark body is required", ["body"])
        remark = self.db.get(Remark, remark_id)
        if not remark:
            raise NotFoundError(f"Remark not found: {remark_id}")

        remark.body = body.strip()
        remark.updated_at = self.clock()

        self.db.commit()
        self.db.refresh(remark)
        return remark

    # ==================== HELPERS ====================

    def _allocate_unique(self, category_id: int) -> str:
        """Allocate a number not already held by a ticket (legacy rows may collide)."""
        for attempt in range(1, CONTROL_NUMBER_MAX_ATTEMPTS + 1):
            control_number = self.allocator.allocate(self.db, category_id)
            taken = (
                self.db.query(Ticket.id)
                .filter(Ticket.control_number == control_number)
                .first()
            )
            if not taken:
                return control_number
            logger.warning(f"Control number {control_number} already in use (attempt {attempt})")

        raise ConflictError("Could not allocate a unique control number")

    @staticmethod
    def _parse_category_id(value: str) -> int:
        try:
            return int(value.strip())
        except (AttributeError, ValueError):
            raise ValidationError(f"Invalid category id '{value}'", ["item"])

    @staticmethod
    def _parse(parser, form: TicketForm, name: str):
        """Run a field parser, reporting failures against the client field name."""
        try:
            return parser(getattr(form, name))
        except ValueError as e:
            raise ValidationError(str(e), [FIELD_NAMES[name]])
