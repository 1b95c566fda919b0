from .category_service import CategoryService, LocationService
from .control_number_service import ControlNumberAllocator
from .file_storage import FileStorage, LocalFileStorage
from .file_validation_service import FileTrustValidator, IncomingFile
from .ticket_service import TicketService

__all__ = [
    "CategoryService",
    "LocationService",
    "ControlNumberAllocator",
    "FileStorage",
    "LocalFileStorage",
    "FileTrustValidator",
    "IncomingFile",
    "TicketService",
]
