# server/dependencies.py
from fastapi import Depends
from sqlalchemy.orm import Session

from core.config import UPLOAD_DIR
from core.database import get_db
from services.file_storage import FileStorage, LocalFileStorage
from services.ticket_service import TicketService


def get_storage() -> FileStorage:
    """Storage backing the /files static mount."""
    return LocalFileStorage(UPLOAD_DIR)


def get_ticket_service(
    db: Session = Depends(get_db),
    storage: FileStorage = Depends(get_storage),
) -> TicketService:
    """Ticket service bound to the request's session."""
    return TicketService(db, storage)
