"""
Recurly XML Encoding/Decoding

This module converts pydantic models to and from the XML documents exchanged
with the Recurly v2 API.

A field's XML path is its alias. ``a>b`` addresses a nested element, so
``details>account`` reads ``<details><account>...</account></details>`` and a
list field aliased ``line_items>adjustment`` collects every ``<adjustment>``
below ``<line_items>``. Field flags travel in ``json_schema_extra`` (see
``xml_field``).

Empty values (``""``, ``0``, ``False``, ``None``, elements without content)
are omitted on encode, mirroring the API's partial update semantics. Types
that need a different rule implement ``WireType``.
"""

from __future__ import annotations
import logging
import types
from datetime import datetime, timezone
from typing import Any, Callable, ClassVar, Dict, List, Optional, Tuple, Type, TypeVar, Union, get_args, get_origin
import xml.etree.ElementTree as ET

from pydantic import BaseModel, ConfigDict, Field, GetCoreSchemaHandler, ValidationError
from pydantic_core import CoreSchema, core_schema

from .errors import MarshalError, UnmarshalError

logger = logging.getLogger(__name__)

DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
DATETIME_PARSE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

M = TypeVar("M", bound="XmlModel")

_SKIP = object()


def is_nil(element: ET.Element) -> bool:
    """Return True if the element carries the explicit null marker."""
    return element.get("nil", "").lower() in ("nil", "true")


def format_datetime(value: datetime) -> str:
    """Format a datetime in the wire profile, normalized to UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(DATETIME_FORMAT)


def parse_datetime(text: str) -> datetime:
    """Parse a wire datetime (``Z`` or a numeric offset) into an aware UTC datetime."""
    return datetime.strptime(text.strip(), DATETIME_PARSE_FORMAT).astimezone(timezone.utc)


def format_param(value: Any) -> str:
    """Format a query parameter value the way values are written on the wire."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return format_datetime(value)
    return str(value)


class WireType:
    """
    Base class for values that control their own XML representation.

    ``to_xml`` returns the element to emit, or None to emit nothing.
    ``from_xml`` builds a value from a present element.
    """

    def to_xml(self, tag: str) -> Optional[ET.Element]:
        raise NotImplementedError

    @classmethod
    def from_xml(cls, element: ET.Element) -> Any:
        raise NotImplementedError

    @classmethod
    def coerce(cls, value: Any) -> Any:
        """Convert a plain Python value into this type."""
        if isinstance(value, cls):
            return value
        if value is None:
            return cls()
        return cls(value)

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        source_type: Any,
        handler: GetCoreSchemaHandler,
    ) -> CoreSchema:
        return core_schema.no_info_plain_validator_function(cls._validate)

    @classmethod
    def _validate(cls, value: Any, _info=None) -> Any:
        try:
            return cls.coerce(value)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid {cls.__name__}: {value!r} ({e})") from e


class ReadOnly:
    """Mixin for values decoded from responses but never sent back."""

    def to_xml(self, tag: str) -> Optional[ET.Element]:
        return None


def xml_field(
    alias: str,
    default: Any = None,
    *,
    default_factory: Optional[Callable[[], Any]] = None,
    attr: bool = False,
    text: bool = False,
    read_only: bool = False,
    keep_empty: bool = False,
    write_as: Optional[str] = None,
    skip: bool = False,
) -> Any:
    """
    Declare a model field bound to an XML element or attribute.

    Args:
        alias: Element path (``a>b`` for nesting) or attribute name
        default: Default value
        default_factory: Factory for mutable defaults
        attr: Bind to an attribute of the model's element
        text: Bind to the character data of the model's element
        read_only: Decode only; never encoded
        keep_empty: Encode even when the value is empty
        write_as: Path used when encoding, if it differs from ``alias``
        skip: Not bound to XML at all; the value is set by the caller
    """
    extra: Dict[str, Any] = {}
    if attr:
        extra["xml_attr"] = True
    if text:
        extra["xml_text"] = True
    if read_only:
        extra["read_only"] = True
    if keep_empty:
        extra["keep_empty"] = True
    if write_as:
        extra["write_as"] = write_as
    if skip:
        extra["xml_skip"] = True

    if default_factory is not None:
        return Field(default_factory=default_factory, alias=alias, json_schema_extra=extra or None)
    return Field(default=default, alias=alias, json_schema_extra=extra or None)


class XmlModel(BaseModel):
    """Base class for every model exchanged with the API."""

    model_config = ConfigDict(populate_by_name=True)

    # Root element name; empty when the element name is chosen by the container.
    xml_tag: ClassVar[str] = ""

    def encode(self) -> bytes:
        """Encode this model as an XML document."""
        return marshal(self)

    @classmethod
    def decode(cls: Type[M], data: Union[bytes, str]) -> M:
        """Decode an XML document into this model."""
        return unmarshal(data, cls)


# =============================================================================
# Annotation helpers
# =============================================================================

def _unwrap_optional(annotation: Any) -> Tuple[Any, bool]:
    origin = get_origin(annotation)
    if origin is Union or (hasattr(types, "UnionType") and origin is types.UnionType):
        args = [a for a in get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return args[0], True
    return annotation, False


def _list_item_type(annotation: Any) -> Optional[Any]:
    if get_origin(annotation) in (list, List):
        args = get_args(annotation)
        return args[0] if args else str
    return None


def _field_extra(field: Any) -> Dict[str, Any]:
    extra = field.json_schema_extra
    return extra if isinstance(extra, dict) else {}


def _is_subclass(annotation: Any, base: type) -> bool:
    return isinstance(annotation, type) and issubclass(annotation, base)


# =============================================================================
# Encoding
# =============================================================================

def _format_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return format_datetime(value)
    return str(value)


def _encode_value(value: Any, tag: str, keep_empty: bool) -> Optional[ET.Element]:
    if value is None or isinstance(value, ReadOnly):
        return None
    if isinstance(value, WireType):
        return value.to_xml(tag)
    if isinstance(value, XmlModel):
        return encode_element(value, tag, keep_empty=keep_empty)
    if isinstance(value, (bool, int, float, str, datetime)):
        if not value and not keep_empty:
            return None
        element = ET.Element(tag)
        element.text = _format_scalar(value)
        return element
    raise MarshalError(f"Cannot encode value of type {type(value).__name__} as <{tag}>")


def _encode_field(element: ET.Element, model: BaseModel, name: str, field: Any) -> None:
    extra = _field_extra(field)
    if extra.get("read_only") or extra.get("xml_skip"):
        return

    value = getattr(model, name)
    path = extra.get("write_as") or field.alias or name
    keep_empty = bool(extra.get("keep_empty"))

    if extra.get("xml_attr"):
        if value is not None and (value != "" or keep_empty):
            element.set(path, _format_scalar(value))
        return
    if extra.get("xml_text"):
        if value is not None:
            element.text = _format_scalar(value)
        return

    *wrappers, tag = path.split(">")
    _, optional = _unwrap_optional(field.annotation)

    if isinstance(value, list):
        children = [c for c in (_encode_value(v, tag, True) for v in value) if c is not None]
        # An explicitly supplied empty list on an optional field is sent as
        # its empty wrapper so the API clears the collection.
        force = optional and not value and bool(wrappers)
    else:
        child = _encode_value(value, tag, keep_empty)
        children = [child] if child is not None else []
        force = False

    if not children and not force:
        return

    parent = element
    for wrapper in wrappers:
        parent = ET.SubElement(parent, wrapper)
    parent.extend(children)


def encode_element(model: BaseModel, tag: Optional[str] = None, keep_empty: bool = False) -> Optional[ET.Element]:
    """
    Encode a model as an element.

    Args:
        model: Model to encode
        tag: Element name (defaults to the model's ``xml_tag``)
        keep_empty: Return the element even if it has no content

    Returns:
        The element, or None when it is empty and ``keep_empty`` is False
    """
    tag = tag or getattr(model, "xml_tag", "")
    if not tag:
        raise MarshalError(f"No element name for {type(model).__name__}")

    element = ET.Element(tag)
    for name, field in type(model).model_fields.items():
        _encode_field(element, model, name, field)

    if not keep_empty and len(element) == 0 and not element.text and not element.attrib:
        return None
    return element


def marshal(model: BaseModel, tag: Optional[str] = None) -> bytes:
    """
    Encode a model as an XML document.

    Raises:
        MarshalError: If the model cannot be encoded
    """
    try:
        element = encode_element(model, tag, keep_empty=True)
        return ET.tostring(element, encoding="unicode", short_empty_elements=False).encode("utf-8")
    except MarshalError:
        raise
    except (TypeError, ValueError) as e:
        raise MarshalError(f"Failed to encode {type(model).__name__}: {e}", cause=e) from e


# =============================================================================
# Decoding
# =============================================================================

def _decode_scalar(text: str, annotation: Any, tag: str) -> Any:
    try:
        if annotation is bool:
            lowered = text.strip().lower()
            if lowered in ("true", "1"):
                return True
            if lowered in ("false", "0", ""):
                return False
            raise ValueError(f"invalid boolean {text!r}")
        if annotation is int:
            return int(text.strip()) if text.strip() else 0
        if annotation is float:
            return float(text.strip()) if text.strip() else 0.0
        if annotation is datetime:
            return parse_datetime(text) if text.strip() else _SKIP
        if annotation is str or annotation is Any:
            return text
    except ValueError as e:
        raise UnmarshalError(f"Invalid value {text!r} for <{tag}>", cause=e) from e
    raise UnmarshalError(f"Unsupported field type {annotation!r} for <{tag}>")


def _decode_value(child: ET.Element, annotation: Any) -> Any:
    annotation, _ = _unwrap_optional(annotation)
    if _is_subclass(annotation, WireType):
        return annotation.from_xml(child)
    if is_nil(child):
        return _SKIP
    if _is_subclass(annotation, XmlModel):
        return decode_element(child, annotation)
    return _decode_scalar(child.text or "", annotation, child.tag)


def decode_element(element: ET.Element, cls: Type[M]) -> M:
    """
    Decode an element into a model.

    Elements missing from the payload keep the field default; unknown
    elements are ignored.

    Raises:
        UnmarshalError: If a value cannot be parsed
    """
    data: Dict[str, Any] = {}
    for name, field in cls.model_fields.items():
        extra = _field_extra(field)
        if extra.get("xml_skip"):
            continue
        path = field.alias or name
        annotation, _ = _unwrap_optional(field.annotation)

        if extra.get("xml_attr"):
            raw = element.get(path)
            if raw is not None:
                value = _decode_scalar(raw, annotation, f"{element.tag} @{path}")
                if value is not _SKIP:
                    data[name] = value
            continue
        if extra.get("xml_text"):
            data[name] = element.text or ""
            continue

        *wrappers, tag = path.split(">")
        container: Optional[ET.Element] = element
        for wrapper in wrappers:
            container = container.find(wrapper)
            if container is None:
                break
        if container is None:
            continue

        item_type = _list_item_type(annotation)
        if item_type is not None:
            values = [_decode_value(child, item_type) for child in container.findall(tag)]
            data[name] = [v for v in values if v is not _SKIP]
            continue

        child = container.find(tag)
        if child is None:
            continue
        value = _decode_value(child, annotation)
        if value is not _SKIP:
            data[name] = value

    try:
        return cls.model_validate(data)
    except ValidationError as e:
        raise UnmarshalError(f"Invalid <{element.tag}> for {cls.__name__}: {e}", cause=e) from e


def parse(data: Union[bytes, str]) -> ET.Element:
    """
    Parse an XML document into its root element.

    Raises:
        UnmarshalError: If the document is not well formed
    """
    try:
        return ET.fromstring(data)
    except ET.ParseError as e:
        raise UnmarshalError(f"Malformed XML: {e}", cause=e) from e


def unmarshal(data: Union[bytes, str], cls: Type[M]) -> M:
    """
    Decode an XML document into a model.

    Raises:
        UnmarshalError: If the document is malformed, has an unexpected root
            element or holds values that cannot be parsed
    """
    root = parse(data)
    if cls.xml_tag and root.tag != cls.xml_tag:
        raise UnmarshalError(f"Expected element <{cls.xml_tag}> but have <{root.tag}>")
    return decode_element(root, cls)


class ListOf:
    """Decoder for collection documents such as ``<accounts><account/>...</accounts>``."""

    def __init__(self, cls: Type[XmlModel]):
        self.cls = cls

    def __call__(self, root: ET.Element) -> List[XmlModel]:
        return [decode_element(child, self.cls) for child in root.findall(self.cls.xml_tag)]

    def __repr__(self) -> str:
        return f"ListOf({self.cls.__name__})"


def decode(data: Union[bytes, str], into: Any) -> Any:
    """
    Decode a document with a model class or a decoder callable.

    Args:
        data: Raw XML
        into: ``XmlModel`` subclass, or a callable taking the root element

    Returns:
        Decoded value
    """
    if _is_subclass(into, XmlModel):
        return unmarshal(data, into)
    if callable(into):
        return into(parse(data))
    raise UnmarshalError(f"Cannot decode into {into!r}")


__all__ = [
    "DATETIME_FORMAT",
    "WireType",
    "ReadOnly",
    "XmlModel",
    "ListOf",
    "xml_field",
    "is_nil",
    "format_datetime",
    "parse_datetime",
    "format_param",
    "encode_element",
    "decode_element",
    "marshal",
    "unmarshal",
    "parse",
    "decode",
]
