from fastapi import APIRouter, Depends, status

from files_manager.db_layer import UserService
from files_manager.dependencies import get_current_user_id, get_user_service
from files_manager.errors import Unauthorized
from files_manager.schemas import UserCreateRequest, UserResponse

router = APIRouter()


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    body: UserCreateRequest,
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    """
    Register a new user.

    Returns:
        UserResponse: the new user's id and email
    """
    user = user_service.create_user(body.email, body.password)
    return UserResponse(**user)


@router.get("/users/me", response_model=UserResponse)
async def get_me(
    user_id: str = Depends(get_current_user_id),
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    """Return the user behind the session token."""
    user = user_service.get_user(user_id)
    if user is None:
        # Session outlived its user
        raise Unauthorized()
    return UserResponse(**user)
