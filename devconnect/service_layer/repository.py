from __future__ import annotations

import abc
from typing import Iterable, Optional, Set

from devconnect.domain.model import PostAggregate, Profile


class AbstractProfileRepository(abc.ABC):
    def add(self, profile: Profile) -> Profile:
        return self._add(profile)

    def get_by_user(self, user_id: str) -> Optional[Profile]:
        return self._get_by_user(user_id)

    @abc.abstractmethod
    def _add(self, profile: Profile) -> Profile: ...

    @abc.abstractmethod
    def _get_by_user(self, user_id: str) -> Optional[Profile]: ...


class AbstractPostRepository(abc.ABC):
    def __init__(self) -> None:
        self.seen: Set[PostAggregate] = set()

    def add(self, post: PostAggregate) -> None:
        self._add(post)
        self.seen.add(post)

    def save(self, post: PostAggregate) -> None:
        """Write the whole aggregate back, embedded collections included."""
        self._save(post)
        self.seen.add(post)

    def delete(self, post: PostAggregate) -> None:
        self._delete(post)
        self.seen.add(post)

    def get(self, post_id: int) -> Optional[PostAggregate]:
        post = self._get(post_id)
        if post:
            self.seen.add(post)
        return post

    def list_all(self) -> Iterable[PostAggregate]:
        """All posts, newest first."""
        posts = list(self._list_all())
        self.seen.update(posts)
        return posts

    @abc.abstractmethod
    def _add(self, post: PostAggregate) -> None: ...

    @abc.abstractmethod
    def _save(self, post: PostAggregate) -> None: ...

    @abc.abstractmethod
    def _delete(self, post: PostAggregate) -> None: ...

    @abc.abstractmethod
    def _get(self, post_id: int) -> Optional[PostAggregate]: ...

    @abc.abstractmethod
    def _list_all(self) -> Iterable[PostAggregate]: ...
