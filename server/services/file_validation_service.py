# server/services/file_validation_service.py
"""
Upload validation chain for ticket photos.

The extension and the declared content type are client-controlled, so the
bytes are written first and then identified from their magic numbers.
Every rejected upload is removed from storage before the error propagates.

Chain (each step terminal):
1. Extension allow-list
2. Size cap (before any disk I/O)
3. Declared content-type cross-check
4. Provisional write under a collision-resistant name
5. Content sniffing of the stored bytes
6. Content verification against the declared extension
"""
import os
import time
import uuid
from dataclasses import dataclass
from typing import Callable, Optional

import filetype

from core.config import MAX_UPLOAD_SIZE
from core.logger import get_logger
from services.file_storage import FileStorage
from utils.exceptions import FileRejectedError, FileRejectReason

logger = get_logger(__name__)

# Declared extension -> MIME types accepted for it
ALLOWED_TYPES = {
    ".jpg": {"image/jpeg", "image/pjpeg"},
    ".jpeg": {"image/jpeg", "image/pjpeg"},
    ".png": {"image/png"},
}

# Extensions reported by the sniffer that may be stored at all
ALLOWED_SNIFFED_EXTENSIONS = {"jpg", "jpeg", "png"}

SNIFF_BYTES = 8192


@dataclass
class IncomingFile:
    """Raw upload as received from the client."""
    filename: str
    content: bytes
    size: Optional[int] = None
    content_type: Optional[str] = None

    @property
    def declared_size(self) -> int:
        return self.size if self.size is not None else len(self.content)


def _timestamp_millis() -> int:
    return int(time.time() * 1000)


class FileTrustValidator:
    """Turns an upload into a stored filename or raises FileRejectedError."""

    def __init__(
        self,
        storage: FileStorage,
        max_size: int = MAX_UPLOAD_SIZE,
        clock: Callable[[], int] = _timestamp_millis,
    ):
        self.storage = storage
        self.max_size = max_size
        self.clock = clock

    def validate(self, upload: IncomingFile) -> str:
        """Run the full chain. Returns the stored filename."""
        ext = os.path.splitext(upload.filename or "")[1].lower()
        if ext not in ALLOWED_TYPES:
            self._reject(upload, FileRejectReason.INVALID_FORMAT)

        if upload.declared_size > self.max_size or len(upload.content) > self.max_size:
            self._reject(upload, FileRejectReason.TOO_LARGE)

        declared_type = self._declared_mime(upload.content_type)
        if declared_type and declared_type not in ALLOWED_TYPES[ext]:
            self._reject(upload, FileRejectReason.MIME_MISMATCH)

        stored_name = self.generate_filename(ext)

        try:
            self.storage.save(stored_name, upload.content)
            kind = filetype.guess(self.storage.read(stored_name, SNIFF_BYTES))
            if kind is None:
                self._reject(upload, FileRejectReason.UNRECOGNIZED_CONTENT)
            if kind.extension not in ALLOWED_SNIFFED_EXTENSIONS or kind.mime not in ALLOWED_TYPES[ext]:
                self._reject(
                    upload,
                    FileRejectReason.CONTENT_MISMATCH,
                    detail=f"sniffed {kind.mime}",
                )
        except BaseException:
            self.discard(stored_name)
            raise

        logger.info(f"✓ Upload accepted: {upload.filename} -> {stored_name}")
        return stored_name

    def generate_filename(self, ext: str) -> str:
        """{unixTimestampMillis}-{uuid4}{ext}"""
        return f"{self.clock()}-{uuid.uuid4()}{ext}"

    def discard(self, stored_name: Optional[str]) -> None:
        """Remove a stored file, logging instead of raising on failure."""
        if not stored_name:
            return
        try:
            self.storage.delete(stored_name)
        except Exception as e:
            logger.error(f"Failed to delete stored file {stored_name}: {e}", exc_info=True)

    @staticmethod
    def _declared_mime(content_type: Optional[str]) -> Optional[str]:
        if not content_type:
            return None
        return content_type.split(";", 1)[0].strip().lower() or None

    @staticmethod
    def _reject(upload: IncomingFile, reason: FileRejectReason, detail: str = "") -> None:
        logger.warning(
            f"Upload rejected ({reason.value}): {upload.filename}"
            + (f" [{detail}]" if detail else "")
        )
        raise FileRejectedError(reason)
