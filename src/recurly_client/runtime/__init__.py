"""Runtime helpers for the Recurly client: errors, XML codec and wire types."""

from .errors import RecurlyError
from .codec import XmlModel, ListOf, xml_field, marshal, unmarshal
from .nullable import NullInt, NullBool, NullTime, UnitAmount
from .href import Href

__all__ = [
    "RecurlyError",
    "XmlModel",
    "ListOf",
    "xml_field",
    "marshal",
    "unmarshal",
    "NullInt",
    "NullBool",
    "NullTime",
    "UnitAmount",
    "Href",
]
