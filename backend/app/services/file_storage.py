"""File storage for uploaded workbook binaries"""
import logging
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from app.config import settings

logger = logging.getLogger(__name__)


@dataclass
class StoredFile:
    file_name: str
    path: Path
    size: int


class FileStorage:
    """Writes uploads under a root directory and removes them again"""

    def __init__(self, root: Optional[Path] = None):
        self.root = Path(root) if root else settings.upload_path

    def save(self, content: bytes, original_name: str) -> StoredFile:
        """Write bytes to a unique file name that keeps the original extension"""
        self.root.mkdir(parents=True, exist_ok=True)
        extension = Path(original_name or "").suffix.lower()
        file_name = f"file-{uuid.uuid4().hex}{extension}"
        path = self.root / file_name
        with open(path, "wb") as f:
            f.write(content)
        logger.info(f"Stored upload {original_name} as {path} ({len(content)} bytes)")
        return StoredFile(file_name=file_name, path=path, size=len(content))

    def delete(self, path: str) -> bool:
        """Remove a stored file. Returns False if it was already gone."""
        file_path = Path(path)
        if not file_path.exists():
            return False
        try:
            file_path.unlink()
        except OSError as e:
            logger.error(f"Error deleting file {path}: {e}")
            return False
        return True
