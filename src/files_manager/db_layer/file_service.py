"""
File metadata service.
Handles file and folder documents, their visibility, and payload storage.
"""

import base64
import binascii
import logging
import mimetypes
from typing import Dict, Any, List, Optional, Tuple, Union

from database.schemas import FileType, ROOT_PARENT_ID
from files_manager.errors import IsFolder, NotFound, ValidationError

logger = logging.getLogger(__name__)

FILES_PAGE_SIZE = 20
THUMBNAIL_WIDTHS = (500, 250, 100)
DEFAULT_CONTENT_TYPE = "application/octet-stream"


def normalize_parent_id(parent_id: Union[int, str, None]) -> Union[int, str]:
    """Collapse every spelling of the root (None, '', 0, '0') into ROOT_PARENT_ID."""
    if parent_id is None or isinstance(parent_id, bool):
        return ROOT_PARENT_ID
    if str(parent_id).strip() in ("", "0"):
        return ROOT_PARENT_ID
    return str(parent_id)


def guess_content_type(name: str) -> str:
    content_type, _ = mimetypes.guess_type(name)
    return content_type or DEFAULT_CONTENT_TYPE


class FileService:
    """Service for managing file documents and their stored payloads"""

    def __init__(self, adapter, storage):
        self.adapter = adapter
        self.storage = storage

    def _owned(self, requester_id: Optional[str], file_id: str) -> Dict[str, Any]:
        document = self.adapter.get_document('files', file_id)
        if not document or requester_id is None or document["userId"] != str(requester_id):
            raise NotFound()
        return document

    def _resolve_parent(self, owner_id: str, parent_id: Union[int, str]) -> None:
        if parent_id == ROOT_PARENT_ID:
            return
        parent = self.adapter.get_document('files', parent_id)
        if not parent or parent["userId"] != owner_id:
            raise ValidationError("Parent not found")
        if parent["type"] != FileType.FOLDER.value:
            raise ValidationError("Parent is not a folder")

    def create(
        self,
        owner_id: str,
        name: Optional[str],
        file_type: Optional[str],
        parent_id: Union[int, str, None] = ROOT_PARENT_ID,
        is_public: bool = False,
        data: Optional[str] = None
    ) -> Dict[str, Any]:
        """Create a folder, or a file/image whose base64 payload is written to disk"""
        if not name:
            raise ValidationError("Missing name")
        if file_type not in [t.value for t in FileType]:
            raise ValidationError("Missing type")
        if file_type != FileType.FOLDER.value and not data:
            raise ValidationError("Missing data")

        owner_id = str(owner_id)
        parent_id = normalize_parent_id(parent_id)
        self._resolve_parent(owner_id, parent_id)

        document = {
            "userId": owner_id,
            "name": name,
            "type": file_type,
            "isPublic": bool(is_public),
            "parentId": parent_id,
        }

        if file_type != FileType.FOLDER.value:
            try:
                payload = base64.b64decode(data, validate=True)
            except (binascii.Error, ValueError):
                raise ValidationError("Invalid data")
            document["localPath"] = self.storage.save(payload)

        file_id = self.adapter.create_document('files', document)
        logger.info(f"Created {file_type} {file_id} for user {owner_id}")
        return {"id": file_id, **document}

    def get(self, requester_id: str, file_id: str) -> Dict[str, Any]:
        """Return a record owned by the requester"""
        return self._owned(requester_id, file_id)

    def list(self, requester_id: str, parent_id: Union[int, str, None] = ROOT_PARENT_ID, page: int = 0) -> List[Dict[str, Any]]:
        """List the requester's records under one parent, FILES_PAGE_SIZE per page"""
        query = {"userId": str(requester_id), "parentId": normalize_parent_id(parent_id)}
        page = max(0, page)
        return self.adapter.query_documents(
            'files', query, limit=FILES_PAGE_SIZE, offset=page * FILES_PAGE_SIZE
        )

    def set_visibility(self, requester_id: str, file_id: str, is_public: bool) -> Dict[str, Any]:
        document = self._owned(requester_id, file_id)
        if not self.adapter.update_fields('files', document["id"], {"isPublic": is_public}):
            raise NotFound()
        document["isPublic"] = is_public
        logger.info(f"Set isPublic={is_public} on file {file_id}")
        return document

    def read_content(self, requester_id: Optional[str], file_id: str, size: Optional[int] = None) -> Tuple[bytes, str]:
        """Return the payload (or one of its thumbnails) and its content type.

        Public records are readable by anyone, private ones only by their
        owner. Sizes other than THUMBNAIL_WIDTHS fall back to the original.
        """
        document = self.adapter.get_document('files', file_id)
        if not document:
            raise NotFound()
        if not document["isPublic"] and document["userId"] != (str(requester_id) if requester_id else None):
            raise NotFound()
        if document["type"] == FileType.FOLDER.value:
            raise IsFolder()

        path = document["localPath"]
        if size in THUMBNAIL_WIDTHS:
            path = self.storage.thumbnail_path(path, size)

        try:
            content = self.storage.read(path)
        except OSError:
            raise NotFound()
        return content, guess_content_type(document["name"])

    def count_files(self) -> int:
        return self.adapter.count_documents('files')
