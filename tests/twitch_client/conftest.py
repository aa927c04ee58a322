import json

import pytest
import requests
from unittest.mock import MagicMock


def build_response(status_code=200, body=None, headers=None):
    """Real requests.Response with a canned body (dicts/lists are JSON encoded)."""
    response = requests.Response()
    response.status_code = status_code
    response.encoding = "utf-8"

    if body is None:
        response._content = b""
    elif isinstance(body, bytes):
        response._content = body
    elif isinstance(body, str):
        response._content = body.encode("utf-8")
    else:
        response._content = json.dumps(body).encode("utf-8")

    response.headers.update(headers or {})
    return response


@pytest.fixture
def make_response():
    return build_response


@pytest.fixture
def dispatcher():
    """Dispatcher double; set `dispatch.return_value` / `side_effect` per test."""
    fake = MagicMock()
    fake.dispatch.return_value = build_response(200, {"data": [], "total": 0})
    return fake
