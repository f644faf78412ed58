"""
JSON schemas for document validation.
This module defines schemas for validating documents in the users and files collections.
"""

from typing import Dict, Any
from enum import Enum
import jsonschema


class FileType(str, Enum):
    """Enumeration for the kinds of file records"""
    FOLDER = 'folder'
    FILE = 'file'
    IMAGE = 'image'


# Root sentinel for parentId
ROOT_PARENT_ID = 0


USER_JSON_SCHEMA = {
    "type": "object",
    "properties": {
        "email": {"type": "string", "minLength": 1},
        "password": {"type": "string", "minLength": 1}
    },
    "required": ["email", "password"],
    "additionalProperties": False
}

FILE_JSON_SCHEMA = {
    "type": "object",
    "properties": {
        "userId": {"type": "string", "minLength": 1},
        "name": {"type": "string", "minLength": 1},
        "type": {"type": "string", "enum": [t.value for t in FileType]},
        "isPublic": {"type": "boolean"},
        "parentId": {
            "oneOf": [
                {"type": "integer", "enum": [ROOT_PARENT_ID]},
                {"type": "string", "minLength": 1}
            ]
        },
        "localPath": {"type": "string", "minLength": 1}
    },
    "required": ["userId", "name", "type", "isPublic", "parentId"],
    "additionalProperties": False,
    # Folders never carry a payload path, stored files always do
    "if": {"properties": {"type": {"const": FileType.FOLDER.value}}},
    "then": {"not": {"required": ["localPath"]}},
    "else": {"required": ["localPath"]}
}


def validate_user_document(document: Dict[str, Any]) -> None:
    """Validate a user document against the schema"""
    jsonschema.validate(document, USER_JSON_SCHEMA)


def validate_file_document(document: Dict[str, Any]) -> None:
    """Validate a file document against the schema"""
    jsonschema.validate(document, FILE_JSON_SCHEMA)


# Schema mapping for easy access
DOCUMENT_SCHEMAS = {
    'users': USER_JSON_SCHEMA,
    'files': FILE_JSON_SCHEMA
}

DOCUMENT_VALIDATORS = {
    'users': validate_user_document,
    'files': validate_file_document
}

COLLECTIONS = tuple(DOCUMENT_SCHEMAS.keys())
