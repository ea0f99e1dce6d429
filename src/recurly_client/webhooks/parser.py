"""
Webhook dispatch.

The root element name of a webhook payload identifies the notification.
``parse`` reads that name first, picks the notification shape from a fixed
table and only then decodes the whole payload into it:

    notification = parse(request.body)
    if notification.type == "successful_payment_notification":
        record_payment(notification.account.code, notification.transaction)

Sites that have not enabled credit invoices receive the older invoice and
dunning layouts; use ``parse_legacy`` for them. Verifying that a payload
really comes from Recurly is left to the caller.
"""

from __future__ import annotations
import hashlib
import io
import logging
from types import MappingProxyType
from typing import IO, Dict, Iterable, Mapping, Tuple, Type, Union
import xml.etree.ElementTree as ET

from ..runtime.codec import decode_element, parse as parse_xml
from ..runtime.errors import UnknownNotificationError, UnmarshalError
from .models import (
    AccountNotification,
    ChargeInvoiceNotification,
    CreditInvoiceNotification,
    CreditPaymentNotification,
    InvoiceNotification,
    LegacyDunningEventNotification,
    NewDunningEventNotification,
    Notification,
    PaymentNotification,
    SubscriptionNotification,
)

logger = logging.getLogger(__name__)

ACCOUNT_NOTIFICATIONS = (
    "new_account_notification",
    "canceled_account_notification",
    "billing_info_updated_notification",
)

SUBSCRIPTION_NOTIFICATIONS = (
    "reactivated_account_notification",
    "new_subscription_notification",
    "updated_subscription_notification",
    "renewed_subscription_notification",
    "expired_subscription_notification",
    "canceled_subscription_notification",
    "prerenewal_notification",
    "new_shipping_address_notification",
)

CHARGE_INVOICE_NOTIFICATIONS = (
    "new_charge_invoice_notification",
    "processing_charge_invoice_notification",
    "past_due_charge_invoice_notification",
    "paid_charge_invoice_notification",
    "failed_charge_invoice_notification",
    "reopened_charge_invoice_notification",
    "updated_charge_invoice_notification",
    "closed_invoice_notification",
    "past_due_invoice_notification",
    "updated_invoice_notification",
    "pending_invoice_notification",
)

CREDIT_INVOICE_NOTIFICATIONS = (
    "new_credit_invoice_notification",
    "processing_credit_invoice_notification",
    "closed_credit_invoice_notification",
    "voided_credit_invoice_notification",
    "reopened_credit_invoice_notification",
    "open_credit_invoice_notification",
)

CREDIT_PAYMENT_NOTIFICATIONS = (
    "new_credit_payment_notification",
    "voided_credit_payment_notification",
)

PAYMENT_NOTIFICATIONS = (
    "scheduled_payment_notification",
    "processing_payment_notification",
    "successful_payment_notification",
    "failed_payment_notification",
    "successful_refund_notification",
    "void_payment_notification",
)

DUNNING_EVENT_NOTIFICATIONS = (
    "new_dunning_event_notification",
)

LEGACY_INVOICE_NOTIFICATIONS = (
    "new_invoice_notification",
    "processing_invoice_notification",
    "closed_invoice_notification",
    "past_due_invoice_notification",
)


def _table(*families: Tuple[Iterable[str], Type[Notification]]) -> Mapping[str, Type[Notification]]:
    table: Dict[str, Type[Notification]] = {}
    for names, cls in families:
        for name in names:
            table[name] = cls
    return MappingProxyType(table)


NOTIFICATIONS = _table(
    (ACCOUNT_NOTIFICATIONS, AccountNotification),
    (SUBSCRIPTION_NOTIFICATIONS, SubscriptionNotification),
    (CHARGE_INVOICE_NOTIFICATIONS, ChargeInvoiceNotification),
    (CREDIT_INVOICE_NOTIFICATIONS, CreditInvoiceNotification),
    (CREDIT_PAYMENT_NOTIFICATIONS, CreditPaymentNotification),
    (PAYMENT_NOTIFICATIONS, PaymentNotification),
    (DUNNING_EVENT_NOTIFICATIONS, NewDunningEventNotification),
)

LEGACY_NOTIFICATIONS = _table(
    (ACCOUNT_NOTIFICATIONS, AccountNotification),
    (SUBSCRIPTION_NOTIFICATIONS, SubscriptionNotification),
    (LEGACY_INVOICE_NOTIFICATIONS, InvoiceNotification),
    (CREDIT_INVOICE_NOTIFICATIONS, CreditInvoiceNotification),
    (CREDIT_PAYMENT_NOTIFICATIONS, CreditPaymentNotification),
    (PAYMENT_NOTIFICATIONS, PaymentNotification),
    (DUNNING_EVENT_NOTIFICATIONS, LegacyDunningEventNotification),
)

Payload = Union[bytes, str, IO[bytes]]


def _read(raw: Payload) -> bytes:
    if isinstance(raw, bytes):
        return raw
    if isinstance(raw, str):
        return raw.encode("utf-8")
    return raw.read()


def root_name(data: bytes) -> str:
    """
    Return the root element name without decoding the rest of the document.

    Raises:
        UnmarshalError: If the payload is not XML
    """
    try:
        for _event, element in ET.iterparse(io.BytesIO(data), events=("start",)):
            return element.tag
    except ET.ParseError as e:
        raise UnmarshalError(f"Malformed webhook payload: {e}", cause=e) from e
    raise UnmarshalError("Empty webhook payload")


def _dispatch(raw: Payload, table: Mapping[str, Type[Notification]]) -> Notification:
    data = _read(raw)
    name = root_name(data)

    cls = table.get(name)
    if cls is None:
        logger.warning(f"Unknown webhook notification: {name}")
        raise UnknownNotificationError(name)

    notification = decode_element(parse_xml(data), cls)
    return notification.model_copy(update={"type": name, "id": hashlib.md5(data).hexdigest()})


def parse(raw: Payload) -> Notification:
    """
    Parse a webhook payload.

    Args:
        raw: Payload as bytes, text or a binary stream

    Returns:
        The notification, with ``type`` set to the root element name

    Raises:
        UnknownNotificationError: If the root element names no known notification
        UnmarshalError: If the payload cannot be decoded
    """
    return _dispatch(raw, NOTIFICATIONS)


def parse_legacy(raw: Payload) -> Notification:
    """Parse a webhook payload using the pre-credit-invoice layouts."""
    return _dispatch(raw, LEGACY_NOTIFICATIONS)


__all__ = [
    "NOTIFICATIONS",
    "LEGACY_NOTIFICATIONS",
    "parse",
    "parse_legacy",
    "root_name",
]
