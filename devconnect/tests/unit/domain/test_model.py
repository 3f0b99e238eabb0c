import pytest

from devconnect.domain import events, exceptions
from devconnect.domain.model import Comment, CommentRemovalPolicy, Like, PostAggregate

# Pure unit tests: skip DB autouse fixture, allow async fixture plumbing via anyio
pytestmark = [pytest.mark.no_db, pytest.mark.anyio]


def make_post(**kwargs) -> PostAggregate:
    defaults = dict(id=1, author="u1", text="hello world")
    defaults.update(kwargs)
    return PostAggregate(**defaults)


def test_create_starts_with_empty_collections():
    post = PostAggregate.create(author="u1", text="hello", name="Alice", avatar="http://img")

    assert post.id is None
    assert post.likes == []
    assert post.comments == []
    assert post.created_at.tzinfo is not None
    assert post.version == 0


def test_like_inserts_newest_first():
    post = make_post()

    post.like("u2")
    post.like("u3")

    assert post.likes == [Like(author="u3"), Like(author="u2")]
    assert post.has_liked("u2")


def test_like_twice_raises_without_mutation():
    post = make_post()
    post.like("u2")

    with pytest.raises(exceptions.AlreadyLiked):
        post.like("u2")

    assert post.likes == [Like(author="u2")]


def test_unlike_removes_only_that_like_and_keeps_order():
    post = make_post(likes=[Like("u4"), Like("u3"), Like("u2")])

    removed = post.unlike("u3")

    assert removed == Like("u3")
    assert post.likes == [Like("u4"), Like("u2")]


def test_unlike_without_like_raises_and_leaves_likes_unchanged():
    post = make_post(likes=[Like("u2")])

    with pytest.raises(exceptions.NotLiked):
        post.unlike("u3")

    assert post.likes == [Like("u2")]


def test_add_comment_assigns_fresh_id_and_inserts_first():
    post = make_post()

    first = post.add_comment(author="u2", text="first")
    second = post.add_comment(author="u3", text="second", name="Carol")

    assert isinstance(second, Comment)
    assert first.id != second.id
    assert post.comments == [second, first]
    assert post.find_comment(first.id) is first


def test_add_then_remove_comment_restores_comments():
    existing = Comment(id="c1", author="u5", text="older")
    post = make_post(comments=[existing])

    comment = post.add_comment(author="u2", text="nice post")
    post.remove_comment(comment.id)

    assert post.comments == [existing]


def test_remove_missing_comment_raises():
    post = make_post()

    with pytest.raises(exceptions.CommentNotFound):
        post.remove_comment("nope")


def test_mutations_record_events():
    post = make_post()

    post.like("u2")
    post.unlike("u2")
    comment = post.add_comment(author="u2", text="hey")
    post.remove_comment(comment.id, removed_by="u1")

    assert post.events == [
        events.PostLiked(post_id=1, user_id="u2"),
        events.PostUnliked(post_id=1, user_id="u2"),
        events.CommentAdded(post_id=1, comment_id=comment.id, user_id="u2"),
        events.CommentRemoved(post_id=1, comment_id=comment.id, user_id="u1"),
    ]


def test_only_author_can_delete():
    post = make_post(author="u1")

    assert post.can_be_deleted_by("u1")
    assert not post.can_be_deleted_by("u2")


@pytest.mark.parametrize(
    "requester, policy, allowed",
    [
        ("stranger", CommentRemovalPolicy.anyone, True),
        ("stranger", CommentRemovalPolicy.author_or_post_owner, False),
        ("commenter", CommentRemovalPolicy.author_or_post_owner, True),
        ("u1", CommentRemovalPolicy.author_or_post_owner, True),
    ],
)
def test_comment_removal_policy(requester, policy, allowed):
    comment = Comment(id="c1", author="commenter", text="hi")
    post = make_post(author="u1", comments=[comment])

    assert post.can_remove_comment(requester, comment, policy) is allowed
