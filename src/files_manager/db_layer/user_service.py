"""
User service for registration and credential checks.
"""

import logging
from typing import Dict, Any, Optional

from werkzeug.security import generate_password_hash, check_password_hash

from database.errors import DuplicateDocumentError
from files_manager.errors import ValidationError

logger = logging.getLogger(__name__)


class UserService:
    """Service for managing user documents"""

    def __init__(self, adapter):
        self.adapter = adapter

    @staticmethod
    def to_public(document: Dict[str, Any]) -> Dict[str, Any]:
        """Strip everything but the fields a client may see"""
        return {"id": document["id"], "email": document["email"]}

    def create_user(self, email: Optional[str], password: Optional[str]) -> Dict[str, Any]:
        """Register a new user; emails are unique"""
        if not email:
            raise ValidationError("Missing email")
        if not password:
            raise ValidationError("Missing password")

        if self.adapter.find_one('users', {"email": email}):
            raise ValidationError("Already exist")

        try:
            user_id = self.adapter.create_document('users', {
                "email": email,
                "password": generate_password_hash(password),
            })
        except DuplicateDocumentError:
            # Lost a race against a concurrent registration of the same email
            raise ValidationError("Already exist")

        logger.info(f"Registered user {user_id}")
        return {"id": user_id, "email": email}

    def get_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        document = self.adapter.get_document('users', user_id)
        return self.to_public(document) if document else None

    def verify_credentials(self, email: str, password: str) -> Optional[str]:
        """Return the user ID when the email/password pair matches, else None"""
        document = self.adapter.find_one('users', {"email": email})
        if not document or not check_password_hash(document["password"], password):
            return None
        return document["id"]

    def count_users(self) -> int:
        return self.adapter.count_documents('users')
