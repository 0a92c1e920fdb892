import json
from unittest.mock import Mock

import pytest


def make_response(status=200, body=None, text=None):
    """A stand-in for requests.Response."""
    res = Mock()
    res.status_code = status
    res.ok = 200 <= status < 400
    if body is not None:
        res.json.return_value = body
        res.text = text if text is not None else json.dumps(body)
    else:
        res.json.side_effect = ValueError("No JSON object could be decoded")
        res.text = text or ""
    res.content = res.text.encode("utf-8")
    return res


@pytest.fixture
def session():
    http = Mock()
    http.headers = {}
    return http


@pytest.fixture
def signed_in_auth():
    auth = Mock()
    auth.id_token = "id-token-123"
    return auth
