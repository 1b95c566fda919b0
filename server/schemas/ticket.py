from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import List, Optional

from models.ticket import RepairLevel, TicketStatus
from schemas.common import CamelModel


class TicketForm(BaseModel):
    """Raw intake/update form values; parsed and validated by TicketService."""
    description: Optional[str] = None
    location: Optional[str] = None
    reported_by: Optional[str] = None
    item: Optional[str] = Field(None, description="Category id")
    end_user: Optional[str] = None
    level_of_repair: Optional[str] = None
    remarks: Optional[str] = Field(None, description="Seeds (create) or appends (update) a remark")
    status: Optional[str] = None
    target_date: Optional[str] = None
    date_received: Optional[str] = None
    date_accomplished: Optional[str] = None


class RemarkRequest(BaseModel):
    """Add or edit a remark. `addedBy` only applies when adding."""
    body: Optional[str] = None
    added_by: Optional[str] = Field(None, alias="addedBy")

    model_config = ConfigDict(populate_by_name=True)


class RemarkResponse(CamelModel):
    """Remark response."""
    id: int
    ticket_id: int
    body: str
    added_by: Optional[str]
    created_at: datetime
    updated_at: Optional[datetime]


class TicketResponse(CamelModel):
    """Ticket response."""
    id: int
    control_number: str
    category_id: int
    category_code: Optional[str]
    category_name: Optional[str]
    location: str
    level_of_repair: Optional[RepairLevel]
    description: str
    reported_by: str
    end_user: Optional[str]
    status: TicketStatus
    received_at: datetime
    accomplished_at: Optional[datetime]
    target_date: Optional[datetime]
    report_year: int
    report_month: int
    file_url: Optional[str]
    current_remark: Optional[str]
    remarks: List[RemarkResponse] = []
    created_at: datetime
    updated_at: datetime


class TicketEnvelope(BaseModel):
    """Create/update response."""
    message: str
    ticket: TicketResponse


class RemarkEnvelope(BaseModel):
    """Remark create/update response."""
    message: str
    remark: RemarkResponse
