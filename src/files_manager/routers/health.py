from fastapi import APIRouter, Depends, Request

from files_manager.db_layer import FileService, UserService
from files_manager.dependencies import get_file_service, get_user_service
from files_manager.schemas import StatsResponse, StatusResponse

router = APIRouter()


@router.get("/status", response_model=StatusResponse)
async def get_status(request: Request) -> StatusResponse:
    """
    Report whether the session store and the document store are reachable.
    """
    return StatusResponse(
        redis=request.app.state.session_store.is_alive(),
        db=request.app.state.metadata_store.is_alive(),
    )


@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    user_service: UserService = Depends(get_user_service),
    file_service: FileService = Depends(get_file_service),
) -> StatsResponse:
    """Count users and files."""
    return StatsResponse(users=user_service.count_users(), files=file_service.count_files())
