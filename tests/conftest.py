"""
Shared fixtures.

No test talks to the network: ``requests.Session.send`` is patched and
answers with canned ``requests.Response`` objects built by ``make_response``.
"""

from unittest.mock import patch

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from recurly_client import Client


def build_response(status_code=200, body=b"", headers=None, url="https://your-subdomain.recurly.com/v2/"):
    """Build a real requests.Response with a preloaded body."""
    if isinstance(body, str):
        body = body.encode("utf-8")
    resp = requests.Response()
    resp.status_code = status_code
    resp._content = body
    resp._content_consumed = True
    resp.headers = CaseInsensitiveDict(headers or {})
    resp.reason = "OK" if status_code < 300 else "Error"
    resp.url = url
    resp.encoding = "utf-8"
    return resp


@pytest.fixture
def make_response():
    """Factory for canned HTTP responses."""
    return build_response


@pytest.fixture
def client():
    """Client bound to the test subdomain."""
    with Client("your-subdomain", "APIKEY") as c:
        yield c


@pytest.fixture
def send():
    """
    Patch Session.send.

    Set ``send.return_value`` (or ``side_effect`` for several pages) and read
    the requests sent through the ``sent`` fixture.
    """
    with patch.object(requests.Session, "send", autospec=True) as mock_send:
        mock_send.return_value = build_response(200)
        yield mock_send


@pytest.fixture
def respond(send):
    """Make the next call answer with the given status, body and headers."""

    def _respond(status_code=200, body=b"", headers=None):
        send.return_value = build_response(status_code, body, headers)
        return send

    return _respond


@pytest.fixture
def sent(send):
    """Return the PreparedRequest of a patched send call (the last by default)."""

    def _sent(index=-1):
        # autospec passes the session as the first positional argument.
        return send.call_args_list[index][0][1]

    return _sent
