# server/routes/remark_routes.py
"""Remark thread routes. Remarks are listed in creation order."""
from typing import List

from fastapi import APIRouter, Depends

from dependencies import get_ticket_service
from schemas.ticket import RemarkEnvelope, RemarkRequest, RemarkResponse
from services.ticket_service import TicketService

router = APIRouter(prefix="/api/remarks", tags=["Remarks"])


@router.get("/{ticket_id}", response_model=List[RemarkResponse])
def list_remarks(ticket_id: int, service: TicketService = Depends(get_ticket_service)):
    return [RemarkResponse.model_validate(r) for r in service.list_remarks(ticket_id)]


@router.post("/{ticket_id}", response_model=RemarkEnvelope, status_code=201)
def add_remark(
    ticket_id: int,
    request: RemarkRequest,
    service: TicketService = Depends(get_ticket_service),
):
    """Append a remark; it becomes the ticket's current remark"""
    remark = service.add_remark(ticket_id, request.body, request.added_by)
    return RemarkEnvelope(
        message="Remark added successfully",
        remark=RemarkResponse.model_validate(remark),
    )


@router.put("/{remark_id}", response_model=RemarkEnvelope)
def edit_remark(
    remark_id: int,
    request: RemarkRequest,
    service: TicketService = Depends(get_ticket_service),
):
    """Edit a remark's body without changing its position"""
    remark = service.edit_remark(remark_id, request.body)
    return RemarkEnvelope(
        message="Remark updated successfully",
        remark=RemarkResponse.model_validate(remark),
    )
