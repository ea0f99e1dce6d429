"""
Tests for Client construction and request building.

Request building is pure: nothing here touches the network.
"""

import base64
import logging
from datetime import datetime, timezone
from typing import Any
from unittest.mock import Mock, patch
from urllib.parse import parse_qs, urlparse

import pytest
import requests

from recurly_client import Account, Client, ClientConfig, MarshalError, NullBool, NullInt, XmlModel, xml_field
from recurly_client.client import XML_CONTENT_TYPE


def query_of(request):
    return {k: v[0] for k, v in parse_qs(urlparse(request.url).query, keep_blank_values=True).items()}


class TestClientInitialization:
    """Test client construction."""

    def test_subdomain_and_key(self):
        client = Client("your-subdomain", "APIKEY")
        assert client.endpoint == "https://your-subdomain.recurly.com/v2/"
        assert client.config.timeout == 30.0

    def test_missing_key(self):
        with pytest.raises(ValueError):
            Client("your-subdomain")

    def test_config(self):
        config = ClientConfig(subdomain="acme", api_key="KEY", base_url="http://localhost:8080/", timeout=5.0)
        client = Client(config)
        assert client.endpoint == "http://localhost:8080/v2/"
        assert client.config is config

    def test_services_attached(self, client):
        for name in (
            "accounts", "billing", "adjustments", "plans", "add_ons",
            "coupons", "redemptions", "invoices", "subscriptions", "transactions",
        ):
            assert getattr(client, name) is not None

    def test_debug_logging(self):
        log = logging.getLogger("recurly_client.client")
        try:
            Client(ClientConfig(subdomain="acme", api_key="KEY", debug=True))
            assert log.level == logging.DEBUG
        finally:
            log.setLevel(logging.NOTSET)

    def test_context_manager_closes_owned_session(self):
        with patch.object(requests.Session, "close") as close:
            with Client("your-subdomain", "APIKEY"):
                pass
        close.assert_called_once()

    def test_shared_session_not_closed(self):
        session = Mock(spec=requests.Session)
        with Client("your-subdomain", "APIKEY", session=session):
            pass
        session.close.assert_not_called()


class TestNewRequest:
    """Test request construction."""

    def test_url_and_headers(self, client):
        request = client.new_request("get", "accounts/1")
        assert request.method == "GET"
        assert request.url == "https://your-subdomain.recurly.com/v2/accounts/1"
        assert request.headers["Accept"] == "application/xml"
        assert request.headers["User-Agent"] == client.config.user_agent
        assert "Content-Type" not in request.headers
        assert request.body is None

    def test_basic_auth(self, client):
        request = client.new_request("GET", "accounts")
        expected = base64.b64encode(b"APIKEY:").decode()
        assert request.headers["Authorization"] == f"Basic {expected}"

    def test_leading_slash(self, client):
        assert client.new_request("GET", "/plans").url == "https://your-subdomain.recurly.com/v2/plans"

    def test_body_is_encoded(self, client):
        request = client.new_request("POST", "accounts", body=Account(code="1"))
        assert request.headers["Content-Type"] == XML_CONTENT_TYPE
        assert request.body == b"<account><account_code>1</account_code></account>"

    def test_empty_body_still_sent(self, client):
        request = client.new_request("PUT", "accounts/1", body=Account())
        assert request.body == b"<account></account>"

    @pytest.mark.parametrize("method", ["GET", "DELETE", "HEAD"])
    def test_body_dropped_for_bodyless_methods(self, client, method, caplog):
        with caplog.at_level(logging.WARNING, logger="recurly_client.client"):
            request = client.new_request(method, "accounts/1", body=Account(code="1"))
        assert request.body is None
        assert "Content-Type" not in request.headers
        assert "Ignoring request body" in caplog.text

    def test_params(self, client):
        request = client.new_request(
            "GET",
            "accounts",
            {
                "per_page": 20,
                "state": "active",
                "bulk": True,
                "begin_time": datetime(2015, 1, 1, tzinfo=timezone.utc),
                "cursor": None,
                "net_terms": NullInt(),
                "tax_exempt": NullBool(False),
            },
        )
        assert query_of(request) == {
            "per_page": "20",
            "state": "active",
            "bulk": "true",
            "begin_time": "2015-01-01T00:00:00Z",
            "tax_exempt": "false",
        }

    def test_marshal_error_raised_before_send(self, client):
        class Opaque(XmlModel):
            xml_tag = "opaque"
            value: Any = xml_field("value", None)

        with patch.object(requests.Session, "send") as send:
            with pytest.raises(MarshalError):
                client.new_request("POST", "opaque", body=Opaque(value=object()))
        send.assert_not_called()
