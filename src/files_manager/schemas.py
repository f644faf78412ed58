####################################
# --- Request/response schemas --- #
####################################

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from database.schemas import ROOT_PARENT_ID


class UserCreateRequest(BaseModel):
    """Request body for `POST /users`.

    Both fields are optional at the schema level so the service can report
    which one is missing with the exact error message clients expect.
    """
    email: Optional[str] = None
    password: Optional[str] = None


class UserResponse(BaseModel):
    """Public view of a user."""
    id: str
    email: str


class TokenResponse(BaseModel):
    """Response model for `GET /connect`."""
    token: str


class FileCreateRequest(BaseModel):
    """Request body for `POST /files`."""
    name: Optional[str] = None
    type: Optional[str] = None
    parentId: Union[int, str] = Field(
        ROOT_PARENT_ID,
        description="ID of the containing folder, or 0 for the root.",
    )
    isPublic: bool = False
    data: Optional[str] = Field(None, description="Base64 encoded payload, required unless type is folder.")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "hello.txt",
                "type": "file",
                "parentId": 0,
                "isPublic": False,
                "data": "SGVsbG8gd29ybGQ=",
            }
        }
    )


class FileRecord(BaseModel):
    """A file or folder as returned by the API."""
    id: str
    userId: str
    name: str
    type: str
    isPublic: bool
    parentId: Union[int, str]
    localPath: Optional[str] = None

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "id": "5f1e7cda04a394508232559d",
                "userId": "5f1e7cda04a394508232559c",
                "name": "image.png",
                "type": "image",
                "isPublic": True,
                "parentId": "5f1e881cc7ba06511e683b23",
                "localPath": "/tmp/files_manager/2a1f4fc3-687b-491a-a3d2-5808a02942c9",
            }
        },
    )

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "FileRecord":
        return cls(**document)


class StatusResponse(BaseModel):
    """Response model for `GET /status`."""
    redis: bool
    db: bool


class StatsResponse(BaseModel):
    """Response model for `GET /stats`."""
    users: int
    files: int
