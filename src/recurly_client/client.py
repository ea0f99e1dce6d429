"""
Recurly v2 API Client.

Builds authenticated XML requests and executes them over a shared
``requests.Session``. Resource services are exposed as attributes:

    with Client("your-subdomain", "APIKEY") as client:
        resp, account = client.accounts.get("1")
        if resp.is_error():
            for error in resp.errors:
                print(error.field, error.symbol, error.message)
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import urljoin

import requests
from requests.auth import HTTPBasicAuth

from .pager import Pager, PagerOptions
from .response import Response
from .runtime import errors
from .runtime.codec import XmlModel, decode, format_param, marshal
from .runtime.errors import UnmarshalError
from .runtime.nullable import Nullable
from .resources import (
    AccountsService,
    AddOnsService,
    AdjustmentsService,
    BillingService,
    CouponsService,
    InvoicesService,
    PlansService,
    RedemptionsService,
    SubscriptionsService,
    TransactionsService,
)

logger = logging.getLogger(__name__)

XML_CONTENT_TYPE = "application/xml; charset=utf-8"

# Methods that never carry a request body.
_BODYLESS_METHODS = frozenset({"GET", "DELETE", "HEAD"})

_CHUNK_SIZE = 8192


@dataclass
class ClientConfig:
    """Configuration for the Recurly API client."""

    subdomain: str
    api_key: str
    base_url: Optional[str] = None
    api_version: str = "v2"
    timeout: float = 30.0
    verify_ssl: bool = True
    user_agent: str = "recurly-xml-client-python/1.0.0"
    debug: bool = False

    @property
    def endpoint(self) -> str:
        """Versioned base URL that request paths are joined onto."""
        base = self.base_url or f"https://{self.subdomain}.recurly.com/"
        return f"{base.rstrip('/')}/{self.api_version}/"


class Client:
    """
    Client for the Recurly v2 XML API.

    The client holds no per-call state; a single instance may be shared by
    threads issuing independent calls. ``Pager`` instances are not shareable.
    """

    def __init__(
        self,
        config: Union[str, ClientConfig],
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the client.

        Args:
            config: A ClientConfig, or the account subdomain
            api_key: Private API key (required when ``config`` is a subdomain)
            session: Optional requests.Session for connection pooling
        """
        if isinstance(config, str):
            if not api_key:
                raise ValueError("api_key is required when a subdomain is given")
            config = ClientConfig(subdomain=config, api_key=api_key)
        self.config = config

        self.logger = logger
        if self.config.debug:
            self.logger.setLevel(logging.DEBUG)

        self._session = session or requests.Session()
        self._owns_session = session is None
        self._auth = HTTPBasicAuth(self.config.api_key, "")

        self.accounts = AccountsService(self)
        self.billing = BillingService(self)
        self.adjustments = AdjustmentsService(self)
        self.plans = PlansService(self)
        self.add_ons = AddOnsService(self)
        self.coupons = CouponsService(self)
        self.redemptions = RedemptionsService(self)
        self.invoices = InvoicesService(self)
        self.subscriptions = SubscriptionsService(self)
        self.transactions = TransactionsService(self)

    @property
    def endpoint(self) -> str:
        return self.config.endpoint

    def close(self) -> None:
        """Close the HTTP session if owned by this client."""
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> Client:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # =========================================================================
    # Request building
    # =========================================================================

    def new_request(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        body: Optional[Union[XmlModel, bytes]] = None,
    ) -> requests.PreparedRequest:
        """
        Build an authenticated request. No network I/O happens here.

        Args:
            method: HTTP method, any case
            path: Path relative to the versioned base URL, e.g. ``accounts/1``
            params: Query parameters; ``None`` values are skipped
            body: Model (or pre-encoded bytes) to send as the XML body

        Returns:
            Prepared request ready for ``do``

        Raises:
            MarshalError: If the body cannot be encoded
        """
        method = method.upper()
        url = urljoin(self.config.endpoint, path.lstrip("/"))

        headers = {
            "Accept": "application/xml",
            "User-Agent": self.config.user_agent,
        }

        data: Optional[bytes] = None
        if body is not None:
            if method in _BODYLESS_METHODS:
                self.logger.warning(f"Ignoring request body for {method} {path}")
            else:
                data = body if isinstance(body, bytes) else marshal(body)
                headers["Content-Type"] = XML_CONTENT_TYPE

        query: Dict[str, str] = {}
        for key, value in (params or {}).items():
            if value is None or (isinstance(value, Nullable) and not value.present):
                continue
            query[key] = format_param(value)

        request = requests.Request(
            method,
            url,
            headers=headers,
            params=query,
            data=data,
            auth=self._auth,
        )
        return self._session.prepare_request(request)

    # =========================================================================
    # Execution
    # =========================================================================

    def do(self, request: requests.PreparedRequest, into: Any = None) -> Response:
        """
        Execute a request.

        Args:
            request: Request built by ``new_request``
            into: Where a successful body goes. A writable object (``write``)
                receives the raw bytes; an ``XmlModel`` subclass or a decoder
                callable such as ``ListOf(Account)`` decodes it into
                ``Response.result``. ``None`` discards the body.

        Returns:
            The response. A 422 carries its validation errors in ``errors``;
            other error statuses keep the raw body in ``body`` undecoded.

        Raises:
            NetworkError: On transport failures (no response is produced)
            UnmarshalError: If a successful body cannot be decoded
        """
        if self.config.debug:
            self.logger.debug(f"Request: {request.method} {request.url}")

        try:
            resp = self._session.send(
                request,
                timeout=self.config.timeout,
                verify=self.config.verify_ssl,
                stream=True,
            )
        except requests.exceptions.Timeout as e:
            raise errors.TimeoutError(f"Request timed out: {request.method} {request.url}", cause=e) from e
        except requests.exceptions.ConnectionError as e:
            raise errors.ConnectionError(f"Connection failed: {request.method} {request.url}", cause=e) from e
        except requests.exceptions.RequestException as e:
            raise errors.NetworkError(f"Request failed: {request.method} {request.url}", cause=e) from e

        try:
            response = Response.from_http(resp)
            if self.config.debug:
                self.logger.debug(f"Response: {response.status_code} {request.method} {request.url}")

            if response.is_error():
                response.load_validation_errors(resp.content)
                return response

            if into is None:
                return response

            if hasattr(into, "write"):
                for chunk in resp.iter_content(chunk_size=_CHUNK_SIZE):
                    into.write(chunk)
                response.result = into
                return response

            content = resp.content
            if not content.strip():
                return response
            try:
                response.result = decode(content, into)
            except UnmarshalError as e:
                e.response = response
                raise
            return response
        except requests.exceptions.RequestException as e:
            raise errors.NetworkError(f"Failed reading response: {request.method} {request.url}", cause=e) from e
        finally:
            resp.close()

    def pager(self, path: str, decoder: Any, options: Optional[PagerOptions] = None) -> Pager:
        """Create a pager over a list endpoint."""
        return Pager(self, path, decoder, options)


__all__ = ["Client", "ClientConfig", "XML_CONTENT_TYPE"]
