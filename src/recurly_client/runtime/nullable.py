"""
Nullable wire types.

The API treats a missing element and an element holding a zero value as
different instructions on partial updates: a missing ``<tax_exempt>`` leaves
the stored value alone, ``<tax_exempt>false</tax_exempt>`` sets it to false.
Plain Python ``bool``/``int`` fields cannot express that, so these wrappers
carry a ``present`` flag next to the value.

    NullBool(False)   # present, encodes <tag>false</tag>
    NullBool()        # absent, encodes nothing
"""

from __future__ import annotations
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Mapping, Optional
import xml.etree.ElementTree as ET

from .codec import WireType, is_nil, format_datetime, parse_datetime
from .errors import UnmarshalError

_UNSET = object()


class Nullable(WireType):
    """
    Base class for a value that may be absent.

    ``Nullable(value)`` is present; ``Nullable()`` is absent and holds the
    zero value of the wrapped type.
    """

    __slots__ = ("value", "present")

    zero: Any = None

    def __init__(self, value: Any = _UNSET):
        if value is _UNSET:
            self.value = self.zero
            self.present = False
        else:
            self.value = self._convert(value)
            self.present = True

    @classmethod
    def _convert(cls, value: Any) -> Any:
        return value

    @classmethod
    def _parse(cls, text: str) -> Any:
        raise NotImplementedError

    def _format(self) -> str:
        return str(self.value)

    def get(self, default: Any = None) -> Any:
        """Return the value if present, otherwise ``default``."""
        return self.value if self.present else default

    def to_xml(self, tag: str) -> Optional[ET.Element]:
        if not self.present:
            return None
        element = ET.Element(tag)
        element.text = self._format()
        return element

    @classmethod
    def from_xml(cls, element: ET.Element) -> "Nullable":
        # nil="nil" is treated as absence, not as an explicit null.
        if is_nil(element):
            return cls()
        text = element.text or ""
        try:
            return cls(cls._parse(text.strip()))
        except ValueError as e:
            raise UnmarshalError(f"Invalid {cls.__name__} value {text!r} in <{element.tag}>", cause=e) from e

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, type(self)):
            return NotImplemented
        if self.present != other.present:
            return False
        return not self.present or self.value == other.value

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.present, self.value if self.present else None))

    def __repr__(self) -> str:
        if not self.present:
            return f"{type(self).__name__}()"
        return f"{type(self).__name__}({self.value!r})"

    def __str__(self) -> str:
        return self._format() if self.present else ""


class NullInt(Nullable):
    """An integer that may be absent."""

    __slots__ = ()
    zero = 0

    @classmethod
    def _convert(cls, value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError("NullInt does not accept booleans")
        return int(value)

    @classmethod
    def _parse(cls, text: str) -> int:
        return int(text) if text else 0


class NullBool(Nullable):
    """
    A boolean that may be absent.

    Without it, an explicit ``False`` would be indistinguishable from "not
    set" and dropped from update requests.
    """

    __slots__ = ()
    zero = False

    @classmethod
    def _convert(cls, value: Any) -> bool:
        if not isinstance(value, bool):
            raise ValueError(f"NullBool requires a bool, got {type(value).__name__}")
        return value

    @classmethod
    def _parse(cls, text: str) -> bool:
        lowered = text.lower()
        if lowered in ("true", "1"):
            return True
        if lowered in ("false", "0", ""):
            return False
        raise ValueError(f"invalid boolean {text!r}")

    def _format(self) -> str:
        return "true" if self.value else "false"

    def is_(self, value: bool) -> bool:
        """Return True if present and equal to ``value``."""
        return self.present and self.value == value


class NullTime(Nullable):
    """
    A timestamp that may be absent.

    Values are normalized to UTC and sent as ``YYYY-MM-DDTHH:MM:SSZ``. Naive
    datetimes are taken to be UTC.
    """

    __slots__ = ()
    zero = None

    @classmethod
    def _convert(cls, value: Any) -> datetime:
        if isinstance(value, str):
            return parse_datetime(value)
        if not isinstance(value, datetime):
            raise ValueError(f"NullTime requires a datetime, got {type(value).__name__}")
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @classmethod
    def _parse(cls, text: str) -> datetime:
        return parse_datetime(text)

    @classmethod
    def from_xml(cls, element: ET.Element) -> "NullTime":
        if not (element.text or "").strip():
            return cls()
        return super().from_xml(element)

    def _format(self) -> str:
        return format_datetime(self.value)


class UnitAmount(WireType):
    """
    Amounts in minor units keyed by currency code, e.g. ``UnitAmount(USD=1000)``.

    Only positive amounts are kept; an empty UnitAmount is not encoded.
    """

    __slots__ = ("amounts",)

    def __init__(self, amounts: Optional[Mapping[str, int]] = None, **currencies: int):
        merged: Dict[str, Any] = dict(amounts or {})
        merged.update(currencies)
        self.amounts: Dict[str, int] = {}
        for currency, amount in merged.items():
            if isinstance(amount, bool):
                raise ValueError("UnitAmount amounts must be integers")
            amount = int(amount)
            if amount > 0:
                self.amounts[currency.upper()] = amount

    @classmethod
    def coerce(cls, value: Any) -> "UnitAmount":
        if isinstance(value, cls):
            return value
        if value is None:
            return cls()
        if isinstance(value, Mapping):
            return cls(value)
        raise ValueError(f"UnitAmount requires a mapping, got {type(value).__name__}")

    def get(self, currency: str, default: int = 0) -> int:
        return self.amounts.get(currency.upper(), default)

    def __getitem__(self, currency: str) -> int:
        return self.get(currency)

    def __iter__(self) -> Iterator[str]:
        return iter(self.amounts)

    def __len__(self) -> int:
        return len(self.amounts)

    def to_xml(self, tag: str) -> Optional[ET.Element]:
        if not self.amounts:
            return None
        element = ET.Element(tag)
        for currency, amount in self.amounts.items():
            ET.SubElement(element, currency).text = str(amount)
        return element

    @classmethod
    def from_xml(cls, element: ET.Element) -> "UnitAmount":
        if is_nil(element):
            return cls()
        amounts: Dict[str, int] = {}
        for child in element:
            text = (child.text or "").strip()
            if not text:
                continue
            try:
                amounts[child.tag] = int(text)
            except ValueError as e:
                raise UnmarshalError(f"Invalid amount {text!r} in <{element.tag}><{child.tag}>", cause=e) from e
        return cls(amounts)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, UnitAmount):
            return NotImplemented
        return self.amounts == other.amounts

    def __hash__(self) -> int:
        return hash(tuple(sorted(self.amounts.items())))

    def __repr__(self) -> str:
        inner = ", ".join(f"{c}={a}" for c, a in self.amounts.items())
        return f"UnitAmount({inner})"


__all__ = [
    "Nullable",
    "NullInt",
    "NullBool",
    "NullTime",
    "UnitAmount",
]
