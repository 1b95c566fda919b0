# server/services/file_storage.py
"""Storage for uploaded ticket assets (save / read / delete / exists)"""
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Union

from core.logger import get_logger

logger = get_logger(__name__)


class FileStorage(ABC):
    """Interface for the upload directory. Names are bare filenames, never paths."""

    @abstractmethod
    def save(self, name: str, content: bytes) -> None:
        raise NotImplementedError

    @abstractmethod
    def read(self, name: str, size: int = -1) -> bytes:
        raise NotImplementedError

    @abstractmethod
    def delete(self, name: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def exists(self, name: str) -> bool:
        raise NotImplementedError


class LocalFileStorage(FileStorage):
    """Stores files in a local directory that is also served as static files"""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    def _path(self, name: str) -> Path:
        file_name = os.path.basename(name)
        if not file_name or file_name != name or file_name in (".", ".."):
            raise ValueError(f"Invalid stored file name: {name!r}")
        return self.root / file_name

    def save(self, name: str, content: bytes) -> None:
        path = self._path(name)
        self.root.mkdir(parents=True, exist_ok=True)
        # "xb" refuses to overwrite an existing asset
        with open(path, "xb") as f:
            try:
                f.write(content)
            except BaseException:
                f.close()
                path.unlink(missing_ok=True)
                raise
        logger.info(f"✓ File saved locally: {path}")

    def read(self, name: str, size: int = -1) -> bytes:
        with open(self._path(name), "rb") as f:
            return f.read(size)

    def delete(self, name: str) -> bool:
        """Delete a stored file. Returns False when it was already gone."""
        path = self._path(name)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        logger.info(f"✓ Local file deleted: {path}")
        return True

    def exists(self, name: str) -> bool:
        try:
            return self._path(name).is_file()
        except ValueError:
            return False
