"""Webhook notification parsing."""

from .models import (
    Notification,
    AccountNotification,
    SubscriptionNotification,
    ChargeInvoiceNotification,
    CreditInvoiceNotification,
    CreditPaymentNotification,
    PaymentNotification,
    NewDunningEventNotification,
    InvoiceNotification,
    LegacyDunningEventNotification,
)
from .parser import NOTIFICATIONS, LEGACY_NOTIFICATIONS, parse, parse_legacy

__all__ = [
    "Notification",
    "AccountNotification",
    "SubscriptionNotification",
    "ChargeInvoiceNotification",
    "CreditInvoiceNotification",
    "CreditPaymentNotification",
    "PaymentNotification",
    "NewDunningEventNotification",
    "InvoiceNotification",
    "LegacyDunningEventNotification",
    "NOTIFICATIONS",
    "LEGACY_NOTIFICATIONS",
    "parse",
    "parse_legacy",
]
