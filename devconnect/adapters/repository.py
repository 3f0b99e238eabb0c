from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from devconnect.db import post_table, profile_table
from devconnect.domain import exceptions, model
from devconnect.service_layer import repository as abs_repo


def _as_utc(value) -> datetime:
    if not isinstance(value, datetime):
        value = datetime.fromisoformat(str(value))
    # SQLite hands back naive timestamps; they are stored in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class SqlAlchemyProfileRepository(abs_repo.AbstractProfileRepository):
    def __init__(self, session: Session) -> None:
        self.session = session

    def _add(self, profile: model.Profile) -> model.Profile:
        stmt = (
            profile_table.insert()
            .values(user_id=profile.user_id, handle=profile.handle)
            .returning(profile_table.c.id)
        )
        new_id = self.session.execute(stmt).scalar_one()
        return model.Profile(id=new_id, user_id=profile.user_id, handle=profile.handle)

    def _get_by_user(self, user_id: str) -> Optional[model.Profile]:
        stmt = select(profile_table).where(profile_table.c.user_id == user_id)
        row = self.session.execute(stmt).mappings().first()
        if not row:
            return None
        return model.Profile(id=row["id"], user_id=row["user_id"], handle=row["handle"])


class SqlAlchemyPostRepository(abs_repo.AbstractPostRepository):
    def __init__(self, session: Session) -> None:
        super().__init__()
        self.session = session

    def _add(self, post: model.PostAggregate) -> None:
        values = {
            "author": post.author,
            "text": post.text,
            "name": post.name,
            "avatar": post.avatar,
            "created_at": post.created_at,
            "likes": self._likes_to_documents(post),
            "comments": self._comments_to_documents(post),
            "version": post.version,
        }
        if post.id is not None:
            values["id"] = post.id
        stmt = post_table.insert().values(values).returning(post_table.c.id)
        post.id = self.session.execute(stmt).scalar_one()

    def _save(self, post: model.PostAggregate) -> None:
        if post.id is None:
            self._add(post)
            return
        # author, text and created_at are never rewritten after insert
        stmt = (
            post_table.update()
            .where(post_table.c.id == post.id, post_table.c.version == post.version)
            .values(
                likes=self._likes_to_documents(post),
                comments=self._comments_to_documents(post),
                version=post.version + 1,
            )
        )
        result = self.session.execute(stmt)
        if result.rowcount == 0:
            raise exceptions.ConcurrencyConflict(
                f"Post {post.id} was modified or removed since version {post.version}"
            )
        post.version += 1

    def _delete(self, post: model.PostAggregate) -> None:
        self.session.execute(post_table.delete().where(post_table.c.id == post.id))

    def _get(self, post_id: int) -> Optional[model.PostAggregate]:
        stmt = select(post_table).where(post_table.c.id == post_id)
        row = self.session.execute(stmt).mappings().first()
        if not row:
            return None
        return self._hydrate_post(row)

    def _list_all(self) -> Iterable[model.PostAggregate]:
        stmt = select(post_table).order_by(post_table.c.created_at.desc(), post_table.c.id.desc())
        rows = self.session.execute(stmt).mappings().all()
        return [self._hydrate_post(row) for row in rows]

    @staticmethod
    def _likes_to_documents(post: model.PostAggregate) -> list:
        return [{"author": like.author} for like in post.likes]

    @staticmethod
    def _comments_to_documents(post: model.PostAggregate) -> list:
        return [
            {
                "id": comment.id,
                "author": comment.author,
                "text": comment.text,
                "name": comment.name,
                "avatar": comment.avatar,
                "created_at": comment.created_at.isoformat(),
            }
            for comment in post.comments
        ]

    def _hydrate_post(self, row) -> model.PostAggregate:
        return model.PostAggregate(
            id=row["id"],
            author=row["author"],
            text=row["text"],
            name=row["name"],
            avatar=row["avatar"],
            created_at=_as_utc(row["created_at"]),
            likes=[model.Like(author=doc["author"]) for doc in row["likes"] or []],
            comments=[
                model.Comment(
                    id=doc["id"],
                    author=doc["author"],
                    text=doc["text"],
                    name=doc.get("name"),
                    avatar=doc.get("avatar"),
                    created_at=_as_utc(doc["created_at"]),
                )
                for doc in row["comments"] or []
            ],
            version=row["version"],
        )
