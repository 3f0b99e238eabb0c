from typing import Optional
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, field_validator


def _ensure_timezone_aware_utc(value):
    if isinstance(value, datetime):
        dt = value
    else:
        dt = datetime.fromisoformat(str(value))

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


# Inputs are lenient so that missing text is reported as a 400 by the validator
class PostI(BaseModel):
    text: Optional[str] = None
    name: Optional[str] = None
    avatar: Optional[str] = None


class CommentI(PostI):
    pass


# Outputs
class Like(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    author: str


class Comment(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    author: str
    text: str
    name: Optional[str] = None
    avatar: Optional[str] = None
    created_at: datetime

    @field_validator("created_at", mode="before")
    @classmethod
    def ensure_timezone_aware_utc(cls, value):
        return _ensure_timezone_aware_utc(value)


class Post(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    author: str
    text: str
    name: Optional[str] = None
    avatar: Optional[str] = None
    created_at: datetime
    likes: list[Like] = []
    comments: list[Comment] = []

    @field_validator("created_at", mode="before")
    @classmethod
    def ensure_timezone_aware_utc(cls, value):
        return _ensure_timezone_aware_utc(value)


class DeleteResult(BaseModel):
    success: bool
