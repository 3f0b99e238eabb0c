from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from devconnect.domain import events, exceptions


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CommentRemovalPolicy(str, Enum):
    anyone = "anyone"
    author_or_post_owner = "author_or_post_owner"


# --- Entities ---


@dataclass(eq=True, frozen=True)
class Profile:
    id: Optional[int]
    user_id: str
    handle: str


@dataclass(eq=True, frozen=True)
class Like:
    author: str


@dataclass(eq=True, frozen=True)
class Comment:
    id: str
    author: str
    text: str
    name: Optional[str] = None
    avatar: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)


# --- Aggregates ---


@dataclass(eq=False)
class PostAggregate:
    """A post together with its embedded likes and comments.

    Both collections are kept newest first: new entries are always inserted at
    position 0 and lookups are first-match linear scans.
    """

    id: int | None
    author: str
    text: str
    name: Optional[str] = None
    avatar: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)
    likes: List[Like] = field(default_factory=list)
    comments: List[Comment] = field(default_factory=list)
    version: int = 0
    events: List[events.Event] = field(default_factory=list, repr=False)

    @classmethod
    def create(
        cls,
        author: str,
        text: str,
        name: Optional[str] = None,
        avatar: Optional[str] = None,
    ) -> "PostAggregate":
        return cls(id=None, author=author, text=text, name=name, avatar=avatar)

    # Likes

    def has_liked(self, user_id: str) -> bool:
        return any(like.author == user_id for like in self.likes)

    def like(self, user_id: str) -> Like:
        if self.has_liked(user_id):
            raise exceptions.AlreadyLiked(f"User {user_id} already liked post {self.id}")
        like = Like(author=user_id)
        self.likes.insert(0, like)
        self.events.append(events.PostLiked(post_id=self.id, user_id=user_id))
        return like

    def unlike(self, user_id: str) -> Like:
        index = next((i for i, like in enumerate(self.likes) if like.author == user_id), None)
        if index is None:
            raise exceptions.NotLiked(f"User {user_id} has not liked post {self.id}")
        like = self.likes.pop(index)
        self.events.append(events.PostUnliked(post_id=self.id, user_id=user_id))
        return like

    # Comments

    def add_comment(
        self,
        author: str,
        text: str,
        name: Optional[str] = None,
        avatar: Optional[str] = None,
    ) -> Comment:
        if not text:
            raise exceptions.ValidationFailed({"text": "Text field is required"})
        comment = Comment(id=uuid.uuid4().hex, author=author, text=text, name=name, avatar=avatar)
        self.comments.insert(0, comment)
        self.events.append(
            events.CommentAdded(post_id=self.id, comment_id=comment.id, user_id=author)
        )
        return comment

    def find_comment(self, comment_id: str) -> Optional[Comment]:
        return next((c for c in self.comments if c.id == comment_id), None)

    def remove_comment(self, comment_id: str, removed_by: Optional[str] = None) -> Comment:
        comment = self.find_comment(comment_id)
        if comment is None:
            raise exceptions.CommentNotFound(f"Comment {comment_id} not found on post {self.id}")
        self.comments.remove(comment)
        self.events.append(
            events.CommentRemoved(
                post_id=self.id, comment_id=comment_id, user_id=removed_by or comment.author
            )
        )
        return comment

    # Authorization rules

    def can_be_deleted_by(self, user_id: str) -> bool:
        return self.author == user_id

    def can_remove_comment(
        self, user_id: str, comment: Comment, policy: CommentRemovalPolicy
    ) -> bool:
        if policy is CommentRemovalPolicy.anyone:
            return True
        return user_id in (comment.author, self.author)
