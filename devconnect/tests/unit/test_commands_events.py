import pytest

from devconnect.domain import commands, events


@pytest.mark.no_db
def test_command_from_dict_ignores_unknown_fields():
    payload = {
        "user_id": "u1",
        "text": "hello",
        "name": "Alice",
        "unexpected": "drop-me",
    }

    cmd = commands.CreatePost.from_dict(payload)

    assert cmd.user_id == "u1"
    assert cmd.text == "hello"
    assert cmd.name == "Alice"
    assert cmd.avatar is None
    # unknown field should not become an attribute
    assert not hasattr(cmd, "unexpected")


@pytest.mark.no_db
def test_event_from_dict_tolerant_reader():
    payload = {"post_id": 1, "comment_id": "abc", "user_id": "u2", "extra": "noise"}

    evt = events.CommentAdded.from_dict(payload)

    assert evt == events.CommentAdded(post_id=1, comment_id="abc", user_id="u2")
    assert not hasattr(evt, "extra")
