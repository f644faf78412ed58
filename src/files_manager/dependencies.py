"""FastAPI dependencies that hand the per-app services to route handlers."""
from typing import Optional

from fastapi import Depends, Header, Request

from files_manager.adapters.queue import BaseQueue
from files_manager.db_layer import AuthService, FileService, UserService


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_file_service(request: Request) -> FileService:
    return request.app.state.file_service


def get_queue(request: Request) -> BaseQueue:
    return request.app.state.queue


def get_token(x_token: Optional[str] = Header(None)) -> Optional[str]:
    """The session token travels in the ``X-Token`` header."""
    return x_token


def get_current_user_id(
    token: Optional[str] = Depends(get_token),
    auth_service: AuthService = Depends(get_auth_service),
) -> str:
    """Resolve the caller, or fail with 401."""
    return auth_service.authenticate(token)


def get_optional_user_id(
    token: Optional[str] = Depends(get_token),
    auth_service: AuthService = Depends(get_auth_service),
) -> Optional[str]:
    """Resolve the caller when a valid token is sent; anonymous otherwise."""
    return auth_service.resolve(token)
