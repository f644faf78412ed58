"""
Local filesystem storage for file payloads and their thumbnails.
"""

import logging
import uuid
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)


class LocalStorage:
    """Stores payloads under a storage root, one file per generated name.

    The on-disk name is a fresh UUID and never derives from the user-supplied
    file name. Thumbnails live next to their original as ``<path>_<width>``.
    """

    def __init__(self, folder_path: Union[str, Path]):
        self.folder_path = Path(folder_path)

    def save(self, content: bytes) -> str:
        """Write a payload under a new unique name and return its absolute path."""
        self.folder_path.mkdir(parents=True, exist_ok=True)
        local_path = (self.folder_path / str(uuid.uuid4())).resolve()
        local_path.write_bytes(content)
        logger.info(f"Stored {len(content)} bytes at {local_path}")
        return str(local_path)

    @staticmethod
    def thumbnail_path(local_path: str, width: int) -> str:
        return f"{local_path}_{width}"

    def save_thumbnail(self, local_path: str, width: int, content: bytes) -> str:
        path = self.thumbnail_path(local_path, width)
        Path(path).write_bytes(content)
        return path

    @staticmethod
    def read(path: str) -> bytes:
        """Read a stored payload; raises FileNotFoundError when it is missing."""
        return Path(path).read_bytes()
