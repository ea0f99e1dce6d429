"""
Recurly Python Client

This package provides a typed client for the Recurly v2 subscription-billing
XML API and a parser for its webhook notifications.
"""

# Runtime: errors, codec and wire types
from .runtime.errors import *
from .runtime.codec import XmlModel, ListOf, xml_field, marshal, unmarshal
from .runtime.nullable import NullInt, NullBool, NullTime, UnitAmount
from .runtime.href import Href

# Client
from .client import Client, ClientConfig
from .response import Response, Error, TransactionError, RateLimit
from .pager import Pager, PagerOptions

# Resources
from .resources import *

# Webhooks
from . import webhooks

__version__ = "1.0.0"
__all__ = [
    # Client
    "Client",
    "ClientConfig",
    "Response",
    "Error",
    "TransactionError",
    "RateLimit",
    "Pager",
    "PagerOptions",

    # Wire types
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

    # Errors
    "ErrorCode",
    "RecurlyError",
    "NetworkError",
    "ConnectionError",
    "TimeoutError",
    "EncodingError",
    "MarshalError",
    "UnmarshalError",
    "PaginationError",
    "UnknownNotificationError",

    # Resources
    "Account",
    "Address",
    "Note",
    "Billing",
    "Adjustment",
    "TaxDetail",
    "Plan",
    "AddOn",
    "Coupon",
    "Redemption",
    "Invoice",
    "Subscription",
    "SubscriptionAddOn",
    "NewSubscription",
    "UpdateSubscription",
    "SubscriptionNotes",
    "Transaction",
    "CVVResult",
    "AVSResult",

    # Webhooks
    "webhooks",

    "__version__",
]
