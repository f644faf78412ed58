from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from files_manager.db_layer import AuthService
from files_manager.dependencies import get_auth_service, get_token
from files_manager.errors import Unauthorized
from files_manager.schemas import TokenResponse

router = APIRouter()

basic_auth = HTTPBasic(auto_error=False)


@router.get("/connect", response_model=TokenResponse)
async def connect(
    credentials: Optional[HTTPBasicCredentials] = Depends(basic_auth),
    auth_service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    """
    Sign in with HTTP Basic credentials and receive a session token.

    The token is valid for 24 hours and is sent back in the X-Token header.
    """
    if credentials is None:
        raise Unauthorized()
    token = auth_service.login(credentials.username, credentials.password)
    return TokenResponse(token=token)


@router.get("/disconnect", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def disconnect(
    token: Optional[str] = Depends(get_token),
    auth_service: AuthService = Depends(get_auth_service),
) -> Response:
    """Revoke the session token."""
    auth_service.logout(token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
