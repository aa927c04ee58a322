import pytest
import requests
from unittest.mock import MagicMock

from twitch_client.client_base import (
    BaseAPIClient,
    APIClientError,
    APIClientHTTPError,
    APIClientTimeout,
)


class FakeResponse:
    def __init__(self, status_code=200):
        self.status_code = status_code


@pytest.mark.unit
def test_base_client_sets_default_headers():
    client = BaseAPIClient(base_url="https://example.com")
    assert client.session.headers["Accept"] == "application/json"
    assert "twitch-helix-client" in client.session.headers["User-Agent"]


@pytest.mark.unit
def test_base_client_merges_custom_headers():
    client = BaseAPIClient(base_url="https://example.com/", default_headers={"Client-ID": "abc"})
    assert client.session.headers["Client-ID"] == "abc"
    assert client.base_url == "https://example.com"


@pytest.mark.unit
def test_build_url_joins_endpoint():
    client = BaseAPIClient(base_url="https://example.com/helix/")
    assert client.build_url("/videos") == "https://example.com/helix/videos"
    assert client.build_url("users") == "https://example.com/helix/users"


@pytest.mark.unit
def test_dispatch_returns_raw_response():
    client = BaseAPIClient(base_url="https://example.com", timeout=3)
    raw = FakeResponse(200)
    client.session.get = MagicMock(return_value=raw)

    response = client.dispatch("/videos", {"id": "1"})

    assert response is raw
    client.session.get.assert_called_once_with(
        "https://example.com/videos",
        params={"id": "1"},
        headers=None,
        timeout=3,
    )


@pytest.mark.unit
def test_dispatch_http_error_carries_response():
    client = BaseAPIClient(base_url="https://example.com")
    raw = FakeResponse(401)
    client.session.get = MagicMock(return_value=raw)

    with pytest.raises(APIClientHTTPError) as e:
        client.dispatch("/videos")

    assert "HTTP 401" in str(e.value)
    assert e.value.response is raw
    assert e.value.has_response()


@pytest.mark.unit
def test_dispatch_timeout_raises():
    client = BaseAPIClient(base_url="https://example.com")

    def raise_timeout(*args, **kwargs):
        raise requests.Timeout("timeout")

    client.session.get = MagicMock(side_effect=raise_timeout)

    with pytest.raises(APIClientTimeout) as e:
        client.dispatch("/videos")

    assert "timed out" in str(e.value).lower()
    assert not e.value.has_response()


@pytest.mark.unit
def test_dispatch_connection_error_has_no_response():
    client = BaseAPIClient(base_url="https://example.com")
    client.session.get = MagicMock(side_effect=requests.ConnectionError("refused"))

    with pytest.raises(APIClientError) as e:
        client.dispatch("/videos")

    assert "Request failed" in str(e.value)
    assert e.value.response is None


@pytest.mark.unit
def test_context_manager_closes_session():
    client = BaseAPIClient(base_url="https://example.com")
    client.session.close = MagicMock()

    with client as entered:
        assert entered is client

    client.session.close.assert_called_once()
