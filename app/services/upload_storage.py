"""
Disk storage for uploaded post images.
"""

import logging
import uuid
from pathlib import Path
from typing import Optional, Union

from fastapi import Request

from app.core.config import settings

logger = logging.getLogger(__name__)


class UploadStorage:
    """
    Stores uploaded files under one directory with generated names.

    ``ensure()`` has to be called once at startup before files are saved.
    """

    def __init__(self, directory: Union[str, Path], url_prefix: str = "/uploads"):
        self.directory = Path(directory).resolve()
        self.url_prefix = "/" + url_prefix.strip("/")

    def ensure(self) -> "UploadStorage":
        """Create the upload directory if it does not exist yet."""
        self.directory.mkdir(parents=True, exist_ok=True)
        logger.info("Upload directory ready at %s", self.directory)
        return self

    @staticmethod
    def generate_filename(original_filename: Optional[str]) -> str:
        suffix = Path(original_filename or "").suffix.lower()
        return f"{uuid.uuid4().hex}{suffix}"

    def path_for(self, filename: str) -> Path:
        # Only bare names are stored; drop any directory part.
        return self.directory / Path(filename).name

    def save(self, data: bytes, original_filename: Optional[str]) -> str:
        """
        Write ``data`` to a new file and return the generated file name.
        """
        filename = self.generate_filename(original_filename)
        self.path_for(filename).write_bytes(data)
        logger.info("Stored upload %s (%d bytes)", filename, len(data))
        return filename

    def delete(self, filename: Optional[str]) -> bool:
        """
        Delete a stored file. Failures are logged and reported as False.
        """
        if not filename:
            return False
        path = self.path_for(filename)
        try:
            path.unlink()
        except FileNotFoundError:
            logger.warning("Upload %s was already missing", filename)
            return False
        except OSError as e:
            logger.warning("Failed to delete upload %s: %s", filename, str(e))
            return False
        return True

    def url_for(self, filename: Optional[str]) -> Optional[str]:
        if not filename:
            return None
        return f"{self.url_prefix}/{filename}"


def get_upload_storage(request: Request) -> UploadStorage:
    """Return the storage set up for this application at startup."""
    return request.app.state.upload_storage


# Default storage for the running application
upload_storage = UploadStorage(settings.UPLOAD_DIR, settings.UPLOAD_URL_PREFIX)
