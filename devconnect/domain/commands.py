from dataclasses import dataclass, fields
from typing import Optional


class Command:
    """Marker base class for commands."""

    @classmethod
    def from_dict(cls, data: dict):
        """
        Tolerant reader: ignore extra fields when constructing commands.
        """
        allowed = {f.name for f in fields(cls) if f.init}
        filtered = {k: v for k, v in data.items() if k in allowed}
        return cls(**filtered)


@dataclass
class CreatePost(Command):
    user_id: str
    text: Optional[str]
    name: Optional[str] = None
    avatar: Optional[str] = None


@dataclass
class DeletePost(Command):
    post_id: int
    user_id: str


@dataclass
class LikePost(Command):
    post_id: int
    user_id: str


@dataclass
class UnlikePost(Command):
    post_id: int
    user_id: str


@dataclass
class AddComment(Command):
    post_id: int
    user_id: str
    text: Optional[str]
    name: Optional[str] = None
    avatar: Optional[str] = None


@dataclass
class RemoveComment(Command):
    post_id: int
    comment_id: str
    user_id: str
