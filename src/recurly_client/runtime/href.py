"""
Hyperlinks to related resources.

Responses reference related resources with an ``href`` attribute instead of
embedding them:

    <account href="https://your-subdomain.recurly.com/v2/accounts/100"/>

``Href`` keeps the link and exposes the identifier at the end of its path.
It is read-only: the API does not accept links as input, so it is never
encoded.
"""

from __future__ import annotations
from typing import Any, Optional
from urllib.parse import urlparse
import xml.etree.ElementTree as ET

from .codec import ReadOnly, WireType


class Href(ReadOnly, WireType):
    """A link to a related resource."""

    __slots__ = ("link",)

    def __init__(self, link: Optional[str] = None):
        self.link = link or ""

    @property
    def code(self) -> str:
        """The last path segment of the link (account code, invoice number, uuid)."""
        return urlparse(self.link).path.rsplit("/", 1)[-1]

    @property
    def number(self) -> Optional[int]:
        """The identifier as an integer, for links to numbered resources such as invoices."""
        code = self.code
        return int(code) if code.isdigit() else None

    @classmethod
    def from_xml(cls, element: ET.Element) -> "Href":
        return cls(element.get("href", ""))

    @classmethod
    def coerce(cls, value: Any) -> "Href":
        if isinstance(value, cls):
            return value
        if value is None:
            return cls()
        if isinstance(value, str):
            return cls(value)
        raise ValueError(f"Href requires a string, got {type(value).__name__}")

    def __bool__(self) -> bool:
        return bool(self.link)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Href):
            return NotImplemented
        return self.link == other.link

    def __hash__(self) -> int:
        return hash(self.link)

    def __repr__(self) -> str:
        return f"Href({self.link!r})"

    def __str__(self) -> str:
        return self.code


__all__ = ["Href"]
