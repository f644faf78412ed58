"""
Files Manager Database Layer

Services that implement users, sessions and file metadata on top of the
document store, session store and local payload storage adapters.
"""

from .user_service import UserService
from .auth_service import AuthService
from .file_service import FileService

__all__ = ['UserService', 'AuthService', 'FileService']
