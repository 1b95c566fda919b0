# server/routes/ticket_routes.py
"""
Ticket intake and management routes

Create and update take a multipart form with an optional `file` photo.
Errors are raised as MaintenanceDeskException subclasses and rendered by
the registered error handlers.
"""
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from core.logger import get_logger
from dependencies import get_ticket_service
from schemas.common import ErrorResponse, MessageResponse, PaginatedResponse
from schemas.ticket import TicketEnvelope, TicketForm, TicketResponse
from services.file_validation_service import IncomingFile
from services.ticket_service import TicketService

logger = get_logger(__name__)

router = APIRouter(
    prefix="/api/tickets",
    tags=["Tickets"],
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        422: {"model": ErrorResponse, "description": "Uploaded file rejected"},
    },
)


def _incoming_file(file: Optional[UploadFile]) -> Optional[IncomingFile]:
    """Read an UploadFile into memory; an empty file part counts as no file."""
    if file is None or not file.filename:
        return None
    content = file.file.read()
    return IncomingFile(
        filename=file.filename,
        content=content,
        size=file.size if file.size is not None else len(content),
        content_type=file.content_type,
    )


def ticket_form(
    description: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    reported_by: Optional[str] = Form(None, alias="reportedBy"),
    item: Optional[str] = Form(None, description="Category id"),
    end_user: Optional[str] = Form(None, alias="endUser"),
    level_of_repair: Optional[str] = Form(None, alias="levelOfRepair"),
    remarks: Optional[str] = Form(None),
    status: Optional[str] = Form(None),
    target_date: Optional[str] = Form(None, alias="targetDate"),
    date_received: Optional[str] = Form(None, alias="dateReceived"),
    date_accomplished: Optional[str] = Form(None, alias="dateAccomplished"),
) -> TicketForm:
    return TicketForm(
        description=description,
        location=location,
        reported_by=reported_by,
        item=item,
        end_user=end_user,
        level_of_repair=level_of_repair,
        remarks=remarks,
        status=status,
        target_date=target_date,
        date_received=date_received,
        date_accomplished=date_accomplished,
    )


# ==================== INTAKE ====================

@router.post("", response_model=TicketEnvelope, status_code=201)
def create_ticket(
    form: TicketForm = Depends(ticket_form),
    file: Optional[UploadFile] = File(None),
    service: TicketService = Depends(get_ticket_service),
):
    """
    Submit a maintenance ticket

    Required: description, location, reportedBy, item (category id).
    Optional: endUser, levelOfRepair, remarks, status (default Pending),
    targetDate, dateReceived, dateAccomplished, file (.jpg/.jpeg/.png, < 5MB).
    """
    ticket = service.create_ticket(form, _incoming_file(file))
    return TicketEnvelope(
        message="Ticket submitted successfully",
        ticket=TicketResponse.model_validate(ticket),
    )


# ==================== QUERIES ====================

@router.get("", response_model=PaginatedResponse[TicketResponse])
def list_tickets(
    status: Optional[str] = Query(None),
    category_id: Optional[int] = Query(None, alias="categoryId"),
    year: Optional[int] = Query(None, ge=1900, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12),
    search: Optional[str] = Query(None),
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    service: TicketService = Depends(get_ticket_service),
):
    """List tickets, newest first"""
    tickets, total = service.list_tickets(
        status=status,
        category_id=category_id,
        year=year,
        month=month,
        search=search,
        limit=limit,
        offset=offset,
    )
    return PaginatedResponse[TicketResponse](
        data=[TicketResponse.model_validate(t) for t in tickets],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/control-number/{control_number}", response_model=TicketResponse)
def get_ticket_by_control_number(
    control_number: str,
    service: TicketService = Depends(get_ticket_service),
):
    """Look up a ticket by its control number"""
    return TicketResponse.model_validate(service.get_by_control_number(control_number))


@router.get("/{ticket_id}", response_model=TicketResponse)
def get_ticket(ticket_id: int, service: TicketService = Depends(get_ticket_service)):
    return TicketResponse.model_validate(service.get_ticket(ticket_id))


# ==================== MANAGEMENT ====================

@router.put("/{ticket_id}", response_model=TicketEnvelope)
def update_ticket(
    ticket_id: int,
    form: TicketForm = Depends(ticket_form),
    file: Optional[UploadFile] = File(None),
    service: TicketService = Depends(get_ticket_service),
):
    """
    Update a ticket

    Only the fields sent are changed. The control number is never
    regenerated. A new file replaces the old one once the update commits.
    """
    ticket = service.update_ticket(ticket_id, form, _incoming_file(file))
    return TicketEnvelope(
        message="Ticket updated successfully",
        ticket=TicketResponse.model_validate(ticket),
    )


@router.delete("/{ticket_id}", response_model=MessageResponse)
def delete_ticket(ticket_id: int, service: TicketService = Depends(get_ticket_service)):
    """Delete a ticket with its remarks and stored file"""
    service.delete_ticket(ticket_id)
    return MessageResponse(message="Ticket deleted successfully")
