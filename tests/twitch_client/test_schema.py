import pytest
from pydantic import ValidationError

from twitch_client.schema import Cursor, RateLimit, User, Video, coerce_int


@pytest.mark.unit
def test_cursor_from_shared_token():
    cursor = Cursor.from_pagination({"cursor": "abc"})

    assert cursor.after == "abc"
    assert cursor.before == "abc"


@pytest.mark.unit
@pytest.mark.parametrize("pagination", [None, {}, {"cursor": ""}, {"cursor": None}, "abc", []])
def test_cursor_absent(pagination):
    assert Cursor.from_pagination(pagination) is None


@pytest.mark.unit
def test_cursor_explicit_directions():
    cursor = Cursor.from_pagination({"after": "a"})

    assert cursor.after == "a"
    assert cursor.before is None


@pytest.mark.unit
def test_cursor_is_frozen():
    cursor = Cursor(after="a")

    with pytest.raises(ValidationError):
        cursor.after = "b"


@pytest.mark.unit
def test_rate_limit_coerces_header_strings():
    rate_limit = RateLimit(limit="30", remaining=" 29 ", reset=None)

    assert rate_limit.model_dump() == {"limit": 30, "remaining": 29, "reset": 0}


@pytest.mark.unit
def test_coerce_int_fallbacks():
    assert coerce_int("12") == 12
    assert coerce_int(None) == 0
    assert coerce_int("n/a") == 0


@pytest.mark.unit
def test_video_requires_ids():
    with pytest.raises(ValidationError):
        Video.model_validate({"title": "no ids"})


@pytest.mark.unit
def test_video_normalizes_numeric_ids():
    video = Video.model_validate({"id": 327720797, "user_id": 12826, "view_count": "bad"})

    assert video.id == "327720797"
    assert video.user_id == "12826"
    assert video.view_count == 0
    assert video.user is None


@pytest.mark.unit
def test_user_record():
    user = User.model_validate({"id": 1, "login": "one", "view_count": "7"})

    assert user.id == "1"
    assert user.view_count == 7
