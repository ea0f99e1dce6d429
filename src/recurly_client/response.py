"""
Response envelope returned by every API call.

A ``Response`` classifies the HTTP status, exposes pagination cursors from
the ``Link`` header and holds the validation errors of a 422 response.
Validation errors are data, not exceptions: the round trip succeeded and the
caller decides what to do with ``errors``.
"""

from __future__ import annotations
import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional
from urllib.parse import parse_qs, urlparse
import xml.etree.ElementTree as ET

import requests
from requests.structures import CaseInsensitiveDict

from .runtime.codec import XmlModel, xml_field, parse, decode_element
from .runtime.errors import UnmarshalError
from .resources.transactions import Transaction

logger = logging.getLogger(__name__)

UNPROCESSABLE_ENTITY = 422

# Matches the URL of one `<url>; rel="name"` entry of a Link header.
_PAGINATION_LINK = re.compile(r"<([^>]+)>;")


class Error(XmlModel):
    """A single field-level validation error."""

    xml_tag = "error"

    message: str = xml_field("message", "", text=True)
    field: str = xml_field("field", "", attr=True)
    symbol: str = xml_field("symbol", "", attr=True)
    description: str = xml_field("description", "")


class TransactionError(XmlModel):
    """
    A payment gateway error, standardized by Recurly.

    Present on 422 responses when creating subscriptions, updating billing
    info or processing one-time transactions.
    """

    xml_tag = "transaction_error"

    error_code: str = xml_field("error_code", "")
    error_category: str = xml_field("error_category", "")
    merchant_message: str = xml_field("merchant_message", "")
    customer_message: str = xml_field("customer_message", "")
    gateway_error_code: str = xml_field("gateway_error_code", "")


def _single_error(element: ET.Element) -> Error:
    # Some 422 bodies are one <error> with child elements instead of a list.
    description = element.findtext("description", "")
    return Error(
        message=description,
        symbol=element.findtext("symbol", ""),
        description=description,
    )


@dataclass(frozen=True)
class RateLimit:
    """Rate limit state reported by the API. Informational only."""

    limit: int
    remaining: int
    reset: Optional[datetime] = None


class Response:
    """
    Wrapper around an HTTP response.

    Attributes:
        status_code: HTTP status code
        headers: Response headers (case-insensitive)
        body: Raw body of error responses (success bodies are decoded, not kept)
        errors: Validation errors; populated only for 422 responses
        transaction: Failed transaction returned alongside a transaction error
        transaction_error: Gateway error details, if any
        result: Decoded payload of a successful response
    """

    def __init__(
        self,
        status_code: int,
        headers: Optional[Mapping[str, str]] = None,
        body: bytes = b"",
        reason: str = "",
        url: str = "",
    ):
        self.status_code = status_code
        self.headers = CaseInsensitiveDict(headers or {})
        self.body = body
        self.reason = reason
        self.url = url
        self.errors: List[Error] = []
        self.transaction: Optional[Transaction] = None
        self.transaction_error: Optional[TransactionError] = None
        self.result: Any = None

    @classmethod
    def from_http(cls, resp: requests.Response) -> "Response":
        """Wrap the status line and headers of a ``requests`` response."""
        return cls(resp.status_code, resp.headers, reason=resp.reason or "", url=resp.url or "")

    # =========================================================================
    # Status classification
    # =========================================================================

    def is_ok(self) -> bool:
        """True for 2xx responses."""
        return 200 <= self.status_code <= 299

    def is_error(self) -> bool:
        """True for any non-2xx response."""
        return not self.is_ok()

    def is_client_error(self) -> bool:
        """True for 4xx responses."""
        return 400 <= self.status_code <= 499

    def is_server_error(self) -> bool:
        """True for 5xx responses; the request may be retried later."""
        return 500 <= self.status_code <= 599

    # =========================================================================
    # Pagination
    # =========================================================================

    def _cursor(self, rel: str) -> str:
        if not self.is_ok():
            return ""
        header = self.headers.get("Link", "")
        if not header:
            return ""

        for link in header.split(","):
            if not link.strip().endswith(f'rel="{rel}"'):
                continue
            match = _PAGINATION_LINK.search(link)
            if not match:
                return ""
            try:
                query = urlparse(match.group(1)).query
            except ValueError:
                return ""
            return parse_qs(query).get("cursor", [""])[0]
        return ""

    def next(self) -> str:
        """Cursor for the next page, or an empty string on the last page."""
        return self._cursor("next")

    def prev(self) -> str:
        """Cursor for the previous page, or an empty string on the first page."""
        return self._cursor("prev")

    @property
    def records(self) -> Optional[int]:
        """Total record count from ``X-Records``, when the API sends it."""
        value = self.headers.get("X-Records")
        if value is None or not value.strip().isdigit():
            return None
        return int(value)

    @property
    def rate_limit(self) -> Optional[RateLimit]:
        limit = self.headers.get("X-RateLimit-Limit")
        remaining = self.headers.get("X-RateLimit-Remaining")
        if limit is None or remaining is None:
            return None
        try:
            reset_header = self.headers.get("X-RateLimit-Reset")
            reset = datetime.fromtimestamp(int(reset_header), tz=timezone.utc) if reset_header else None
            return RateLimit(limit=int(limit), remaining=int(remaining), reset=reset)
        except ValueError:
            logger.debug(f"Ignoring malformed rate limit headers: {limit!r}/{remaining!r}")
            return None

    # =========================================================================
    # Validation errors
    # =========================================================================

    def load_validation_errors(self, body: bytes) -> None:
        """
        Decode a 422 body into ``errors``, ``transaction`` and ``transaction_error``.

        The transaction blocks are supplementary: if they cannot be decoded a
        warning is logged and the field errors are still reported.

        Raises:
            UnmarshalError: If the error document itself cannot be decoded
        """
        self.body = body
        if self.status_code != UNPROCESSABLE_ENTITY:
            return

        try:
            root = parse(body)
            if root.tag == "error":
                self.errors = [_single_error(root)]
            else:
                self.errors = [decode_element(e, Error) for e in root.findall("error")]
        except UnmarshalError as e:
            e.response = self
            raise

        element = root.find("transaction_error")
        if element is not None:
            try:
                self.transaction_error = decode_element(element, TransactionError)
            except UnmarshalError as e:
                logger.warning(f"Could not decode transaction_error block: {e}")

        element = root.find("transaction")
        if element is not None:
            try:
                self.transaction = decode_element(element, Transaction)
            except UnmarshalError as e:
                logger.warning(f"Could not decode transaction block: {e}")

    def __repr__(self) -> str:
        return f"<Response [{self.status_code}] errors={len(self.errors)}>"


__all__ = [
    "Response",
    "Error",
    "TransactionError",
    "RateLimit",
    "UNPROCESSABLE_ENTITY",
]
