import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, Response, status

from database.schemas import FileType
from files_manager.adapters.queue import THUMBNAIL_TASK_TYPE, BaseQueue
from files_manager.db_layer import FileService
from files_manager.dependencies import (
    get_current_user_id,
    get_file_service,
    get_optional_user_id,
    get_queue,
)
from files_manager.schemas import FileCreateRequest, FileRecord

logger = logging.getLogger(__name__)

router = APIRouter()


def parse_int(value: Optional[str], default: Optional[int] = None) -> Optional[int]:
    """Lenient integer parsing for query strings; junk reads as the default."""
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


@router.post(
    "/files",
    response_model=FileRecord,
    status_code=status.HTTP_201_CREATED,
    response_model_exclude_none=True,
)
async def create_file(
    body: FileCreateRequest,
    user_id: str = Depends(get_current_user_id),
    file_service: FileService = Depends(get_file_service),
    queue: BaseQueue = Depends(get_queue),
) -> FileRecord:
    """
    Create a folder, or upload a file or image from its base64 payload.

    Images are queued for thumbnail generation once stored.
    """
    record = file_service.create(
        owner_id=user_id,
        name=body.name,
        file_type=body.type,
        parent_id=body.parentId,
        is_public=body.isPublic,
        data=body.data,
    )

    if record["type"] == FileType.IMAGE.value:
        task = {
            "task_type": THUMBNAIL_TASK_TYPE,
            "userId": user_id,
            "fileId": record["id"],
            "attempts": 0,
        }
        if not await queue.add_task(task):
            logger.warning(f"Could not queue thumbnails for image {record['id']}")

    return FileRecord.from_document(record)


@router.get("/files/{file_id}", response_model=FileRecord, response_model_exclude_none=True)
async def get_file(
    file_id: str = Path(..., description="ID of the file or folder"),
    user_id: str = Depends(get_current_user_id),
    file_service: FileService = Depends(get_file_service),
) -> FileRecord:
    return FileRecord.from_document(file_service.get(user_id, file_id))


@router.get("/files", response_model=List[FileRecord], response_model_exclude_none=True)
async def list_files(
    parentId: Optional[str] = Query(None, description="Folder to list; root when omitted or 0"),
    page: Optional[str] = Query(None, description="Zero-based page of 20 records"),
    user_id: str = Depends(get_current_user_id),
    file_service: FileService = Depends(get_file_service),
) -> List[FileRecord]:
    """List the caller's files under one parent, 20 per page."""
    documents = file_service.list(user_id, parent_id=parentId, page=parse_int(page, 0))
    return [FileRecord.from_document(doc) for doc in documents]


@router.put("/files/{file_id}/publish", response_model=FileRecord, response_model_exclude_none=True)
async def publish_file(
    file_id: str,
    user_id: str = Depends(get_current_user_id),
    file_service: FileService = Depends(get_file_service),
) -> FileRecord:
    return FileRecord.from_document(file_service.set_visibility(user_id, file_id, True))


@router.put("/files/{file_id}/unpublish", response_model=FileRecord, response_model_exclude_none=True)
async def unpublish_file(
    file_id: str,
    user_id: str = Depends(get_current_user_id),
    file_service: FileService = Depends(get_file_service),
) -> FileRecord:
    return FileRecord.from_document(file_service.set_visibility(user_id, file_id, False))


@router.get("/files/{file_id}/data", response_class=Response)
async def get_file_data(
    file_id: str,
    size: Optional[str] = Query(None, description="Thumbnail width: 500, 250 or 100"),
    user_id: Optional[str] = Depends(get_optional_user_id),
    file_service: FileService = Depends(get_file_service),
) -> Response:
    """
    Return the raw content of a file, or one of its thumbnails.

    Public files are readable without a token. Unsupported sizes return the
    original content.
    """
    content, content_type = file_service.read_content(user_id, file_id, parse_int(size))
    return Response(content=content, media_type=content_type)
