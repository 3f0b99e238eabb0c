from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from devconnect.adapters.repository import SqlAlchemyPostRepository, SqlAlchemyProfileRepository
from devconnect.db import metadata, post_table
from devconnect.domain import exceptions, model
from devconnect.domain.model import Like

pytestmark = pytest.mark.no_db


@pytest.fixture
def session():
    engine = create_engine("sqlite:///:memory:", future=True)
    metadata.create_all(engine)
    Session = sessionmaker(bind=engine, expire_on_commit=False)
    try:
        with Session() as sess:
            yield sess
    finally:
        metadata.drop_all(engine)


def test_profile_repository_lookup_by_user(session):
    repo = SqlAlchemyProfileRepository(session)

    created = repo.add(model.Profile(id=None, user_id="u1", handle="alice"))
    session.commit()

    assert created.id is not None
    assert repo.get_by_user("u1") == created
    assert repo.get_by_user("u2") is None


def test_post_repository_roundtrip(session):
    repo = SqlAlchemyPostRepository(session)
    post = model.PostAggregate.create(author="u1", text="hi", name="Alice", avatar="http://img")
    repo.add(post)
    session.commit()

    fetched = repo.get(post.id)
    assert fetched is not None
    assert fetched.author == "u1"
    assert fetched.text == "hi"
    assert fetched.name == "Alice"
    assert fetched.created_at == post.created_at
    assert fetched.likes == [] and fetched.comments == []


def test_post_repository_writes_back_embedded_collections(session):
    repo = SqlAlchemyPostRepository(session)
    post = model.PostAggregate.create(author="u1", text="hi")
    repo.add(post)
    session.commit()

    post.like("u2")
    post.like("u3")
    comment = post.add_comment(author="u2", text="welcome!", name="Bob")
    repo.save(post)
    session.commit()

    refreshed = repo.get(post.id)
    assert refreshed.likes == [Like("u3"), Like("u2")]
    assert refreshed.comments == [comment]
    assert refreshed.version == 1


def test_stale_save_raises_conflict(session):
    repo = SqlAlchemyPostRepository(session)
    post = model.PostAggregate.create(author="u1", text="hi")
    repo.add(post)
    session.commit()

    first = repo.get(post.id)
    second = repo.get(post.id)

    first.like("u2")
    repo.save(first)
    session.commit()

    second.like("u3")
    with pytest.raises(exceptions.ConcurrencyConflict):
        repo.save(second)

    assert repo.get(post.id).likes == [Like("u2")]


def test_save_never_rewrites_author(session):
    repo = SqlAlchemyPostRepository(session)
    post = model.PostAggregate.create(author="u1", text="hi")
    repo.add(post)
    session.commit()

    post.author = "intruder"
    repo.save(post)
    session.commit()

    row = session.execute(post_table.select().where(post_table.c.id == post.id)).mappings().first()
    assert row["author"] == "u1"


def test_list_all_is_newest_first_and_delete_removes(session):
    repo = SqlAlchemyPostRepository(session)
    now = datetime.now(timezone.utc)
    older = model.PostAggregate(id=None, author="u1", text="older", created_at=now - timedelta(hours=1))
    newer = model.PostAggregate(id=None, author="u2", text="newer", created_at=now)
    repo.add(older)
    repo.add(newer)
    session.commit()

    assert [p.text for p in repo.list_all()] == ["newer", "older"]

    repo.delete(newer)
    session.commit()
    assert repo.get(newer.id) is None
    assert [p.text for p in repo.list_all()] == ["older"]
