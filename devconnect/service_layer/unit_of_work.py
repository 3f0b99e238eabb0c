from __future__ import annotations

import abc
import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from devconnect.db import metadata, SessionLocal
from devconnect.domain import exceptions
from devconnect.service_layer import repository
from devconnect.adapters import repository as sql_repo

logger = logging.getLogger(__name__)


class AbstractUnitOfWork(abc.ABC):
    posts: repository.AbstractPostRepository
    profiles: repository.AbstractProfileRepository

    def __enter__(self) -> "AbstractUnitOfWork":
        return self

    def __exit__(self, *args) -> None:
        self.rollback()

    def collect_new_events(self) -> List:
        events = []
        posts = getattr(self, "posts", None)
        if posts is None:
            return events
        for agg in posts.seen:
            events.extend(agg.events)
            # clear events after collection
            agg.events.clear()
        return events

    @abc.abstractmethod
    def commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    def rollback(self) -> None:
        raise NotImplementedError


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    _schema_initialized = False

    def __init__(self, session_factory: sessionmaker | None = None) -> None:
        # Reuse the shared SessionLocal (configured in devconnect.db) by default
        self.session_factory = session_factory or SessionLocal
        self.session: Session | None = None

    def __enter__(self) -> "SqlAlchemyUnitOfWork":
        self.session = self.session_factory()
        self._ensure_schema()
        self.posts = sql_repo.SqlAlchemyPostRepository(self.session)
        self.profiles = sql_repo.SqlAlchemyProfileRepository(self.session)
        return super().__enter__()

    def __exit__(self, exc_type, exc, tb) -> None:
        super().__exit__(exc_type, exc, tb)
        if self.session:
            self.session.close()
        if isinstance(exc, SQLAlchemyError):
            logger.error("Store failure: %s", exc)
            raise exceptions.StoreFailure("Document store operation failed", cause=exc) from exc

    def commit(self) -> None:
        if self.session:
            self.session.commit()

    def rollback(self) -> None:
        if self.session:
            self.session.rollback()

    def _ensure_schema(self) -> None:
        """
        Guarantee tables exist for the configured database (helpful for SQLite dev/test).
        Runs once per process.
        """
        if self.__class__._schema_initialized:
            return
        if self.session is None:
            return
        metadata.create_all(bind=self.session.bind)
        self.__class__._schema_initialized = True


class FakeUnitOfWork(AbstractUnitOfWork):
    def __init__(
        self,
        posts_repo: repository.AbstractPostRepository,
        profiles_repo: repository.AbstractProfileRepository,
    ) -> None:
        self.posts = posts_repo
        self.profiles = profiles_repo
        self.committed = False

    def commit(self) -> None:
        self.committed = True

    def rollback(self) -> None:
        pass
