# server/utils/exceptions.py
"""Custom exceptions for the maintenance desk"""
import enum
from typing import Any, Dict, List, Optional


class MaintenanceDeskException(Exception):
    """Base exception for the maintenance desk"""

    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500):
        self.message = message
        self.code = code
        self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Extra fields merged into the error response body"""
        return {}


class ValidationError(MaintenanceDeskException):
    """Missing or invalid input fields"""
    def __init__(self, message: str, fields: Optional[List[str]] = None):
        super().__init__(message, "VALIDATION_ERROR", 400)
        self.fields = fields or []

    def to_dict(self) -> Dict[str, Any]:
        return {"fields": self.fields}


class NotFoundError(MaintenanceDeskException):
    """Resource not found"""
    def __init__(self, message: str):
        super().__init__(message, "NOT_FOUND", 404)


class ConflictError(MaintenanceDeskException):
    """Resource conflict (e.g., duplicate)"""
    def __init__(self, message: str):
        super().__init__(message, "CONFLICT", 409)


class CategoryNotFoundError(MaintenanceDeskException):
    """Ticket references a category that does not exist"""
    def __init__(self, category_id: Any):
        super().__init__(f"Category not found: {category_id}", "CATEGORY_NOT_FOUND", 400)
        self.category_id = category_id


class FileRejectReason(str, enum.Enum):
    """Why an uploaded file was refused."""
    INVALID_FORMAT = "InvalidFormat"
    TOO_LARGE = "TooLarge"
    MIME_MISMATCH = "MimeMismatch"
    CONTENT_MISMATCH = "ContentMismatch"
    UNRECOGNIZED_CONTENT = "UnrecognizedContent"


FILE_REJECT_MESSAGES = {
    FileRejectReason.INVALID_FORMAT: "Invalid file format. Only .jpg, .jpeg and .png images are allowed",
    FileRejectReason.TOO_LARGE: "File must be less than 5MB",
    FileRejectReason.MIME_MISMATCH: "Declared content type does not match the file extension",
    FileRejectReason.CONTENT_MISMATCH: "File content does not match its extension",
    FileRejectReason.UNRECOGNIZED_CONTENT: "File content is not a recognized image",
}


class FileRejectedError(MaintenanceDeskException):
    """Uploaded file failed validation"""
    def __init__(self, reason: FileRejectReason, message: Optional[str] = None):
        super().__init__(message or FILE_REJECT_MESSAGES[reason], "FILE_REJECTED", 422)
        self.reason = reason

    def to_dict(self) -> Dict[str, Any]:
        return {"reason": self.reason.value}
