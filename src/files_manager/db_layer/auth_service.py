"""
Token based authentication on top of the session store.
"""

import logging
import uuid
from typing import Optional

from files_manager.errors import Unauthorized

logger = logging.getLogger(__name__)

SESSION_TTL_SECONDS = 24 * 60 * 60


class AuthService:
    """Issues, resolves and revokes session tokens.

    A session is the key ``auth_<token>`` holding the user ID, with an expiry.
    """

    def __init__(self, user_service, session_store, ttl_seconds: int = SESSION_TTL_SECONDS):
        self.user_service = user_service
        self.session_store = session_store
        self.ttl_seconds = ttl_seconds

    @staticmethod
    def session_key(token: str) -> str:
        return f"auth_{token}"

    def login(self, email: Optional[str], password: Optional[str]) -> str:
        if not email or password is None:
            raise Unauthorized()

        user_id = self.user_service.verify_credentials(email, password)
        if user_id is None:
            raise Unauthorized()

        token = str(uuid.uuid4())
        self.session_store.set(self.session_key(token), user_id, self.ttl_seconds)
        logger.info(f"Issued session token for user {user_id}")
        return token

    def authenticate(self, token: Optional[str]) -> str:
        if not token:
            raise Unauthorized()
        user_id = self.session_store.get(self.session_key(token))
        if not user_id:
            raise Unauthorized()
        return user_id

    def resolve(self, token: Optional[str]) -> Optional[str]:
        """Like authenticate, but anonymous callers resolve to None."""
        if not token:
            return None
        return self.session_store.get(self.session_key(token)) or None

    def logout(self, token: Optional[str]) -> None:
        user_id = self.authenticate(token)
        self.session_store.delete(self.session_key(token))
        logger.info(f"Revoked session token for user {user_id}")
