"""
Webhook notification shapes.

Webhook payloads carry point-in-time snapshots that differ from the
resource documents of the API: accounts are abbreviated, transactions
reference invoices by number, and invoices come in charge, credit and
legacy layouts. Notifications are immutable once parsed.
"""

from __future__ import annotations
from typing import List, Optional

from pydantic import ConfigDict

from ..resources import subscriptions
from ..runtime.codec import XmlModel, xml_field
from ..runtime.nullable import NullBool, NullInt, NullTime

TRANSACTION_FAILURE_TYPE_DECLINED = "declined"
TRANSACTION_FAILURE_TYPE_DUPLICATE = "duplicate_transaction"


class Snapshot(XmlModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


# =============================================================================
# Snapshots
# =============================================================================

class Account(Snapshot):
    xml_tag = "account"

    code: str = xml_field("account_code", "")
    username: str = xml_field("username", "")
    email: str = xml_field("email", "")
    first_name: str = xml_field("first_name", "")
    last_name: str = xml_field("last_name", "")
    company_name: str = xml_field("company_name", "")
    phone: str = xml_field("phone", "")


class Transaction(Snapshot):
    xml_tag = "transaction"

    uuid: str = xml_field("id", "")
    invoice_number: int = xml_field("invoice_number", 0)
    subscription_uuid: str = xml_field("subscription_id", "")
    action: str = xml_field("action", "")
    amount_in_cents: int = xml_field("amount_in_cents", 0)
    status: str = xml_field("status", "")
    message: str = xml_field("message", "")
    gateway_error_codes: str = xml_field("gateway_error_codes", "")
    failure_type: str = xml_field("failure_type", "")
    reference: str = xml_field("reference", "")
    source: str = xml_field("source", "")
    test: NullBool = xml_field("test", default_factory=NullBool)
    voidable: NullBool = xml_field("voidable", default_factory=NullBool)
    refundable: NullBool = xml_field("refundable", default_factory=NullBool)


class Invoice(Snapshot):
    """Invoice layout sent before credit invoices were enabled on a site."""

    xml_tag = "invoice"

    subscription_uuid: str = xml_field("subscription_id", "")
    uuid: str = xml_field("uuid", "")
    state: str = xml_field("state", "")
    invoice_number_prefix: str = xml_field("invoice_number_prefix", "")
    invoice_number: int = xml_field("invoice_number", 0)
    po_number: str = xml_field("po_number", "")
    vat_number: str = xml_field("vat_number", "")
    total_in_cents: int = xml_field("total_in_cents", 0)
    currency: str = xml_field("currency", "")
    created_at: NullTime = xml_field("date", default_factory=NullTime)
    closed_at: NullTime = xml_field("closed_at", default_factory=NullTime)
    net_terms: NullInt = xml_field("net_terms", default_factory=NullInt)
    collection_method: str = xml_field("collection_method", "")


class ChargeInvoice(Snapshot):
    xml_tag = "invoice"

    subscription_uuids: List[str] = xml_field("subscription_ids>subscription_id", default_factory=list)
    uuid: str = xml_field("uuid", "")
    state: str = xml_field("state", "")
    origin: str = xml_field("origin", "")
    invoice_number_prefix: str = xml_field("invoice_number_prefix", "")
    invoice_number: int = xml_field("invoice_number", 0)
    po_number: str = xml_field("po_number", "")
    vat_number: str = xml_field("vat_number", "")
    balance_in_cents: int = xml_field("balance_in_cents", 0)
    total_in_cents: int = xml_field("total_in_cents", 0)
    tax_in_cents: int = xml_field("tax_in_cents", 0)
    discount_in_cents: int = xml_field("discount_in_cents", 0)
    subtotal_in_cents: int = xml_field("subtotal_in_cents", 0)
    subtotal_before_discount_in_cents: int = xml_field("subtotal_before_discount_in_cents", 0)
    currency: str = xml_field("currency", "")
    created_at: NullTime = xml_field("created_at", default_factory=NullTime)
    updated_at: NullTime = xml_field("updated_at", default_factory=NullTime)
    closed_at: NullTime = xml_field("closed_at", default_factory=NullTime)
    due_on: NullTime = xml_field("due_on", default_factory=NullTime)
    net_terms: NullInt = xml_field("net_terms", default_factory=NullInt)
    collection_method: str = xml_field("collection_method", "")
    customer_notes: str = xml_field("customer_notes", "")
    terms_and_conditions: str = xml_field("terms_and_conditions", "")


class CreditInvoice(Snapshot):
    xml_tag = "invoice"

    subscription_uuids: List[str] = xml_field("subscription_ids>subscription_id", default_factory=list)
    uuid: str = xml_field("uuid", "")
    state: str = xml_field("state", "")
    origin: str = xml_field("origin", "")
    invoice_number_prefix: str = xml_field("invoice_number_prefix", "")
    invoice_number: int = xml_field("invoice_number", 0)
    balance_in_cents: int = xml_field("balance_in_cents", 0)
    total_in_cents: int = xml_field("total_in_cents", 0)
    currency: str = xml_field("currency", "")
    created_at: NullTime = xml_field("created_at", default_factory=NullTime)
    closed_at: NullTime = xml_field("closed_at", default_factory=NullTime)


class CreditPayment(Snapshot):
    xml_tag = "credit_payment"

    uuid: str = xml_field("uuid", "")
    action: str = xml_field("action", "")
    amount_in_cents: int = xml_field("amount_in_cents", 0)
    original_invoice_number: int = xml_field("original_invoice_number", 0)
    applied_to_invoice_number: int = xml_field("applied_to_invoice_number", 0)
    original_credit_payment_uuid: str = xml_field("original_credit_payment_uuid", "")
    refund_transaction_uuid: str = xml_field("refund_transaction_uuid", "")
    created_at: NullTime = xml_field("created_at", default_factory=NullTime)
    voided_at: NullTime = xml_field("voided_at", default_factory=NullTime)


class Plan(subscriptions.NestedPlan):
    model_config = ConfigDict(frozen=True)


class SubscriptionAddOn(subscriptions.SubscriptionAddOn):
    model_config = ConfigDict(frozen=True)


class Subscription(subscriptions.Subscription):
    """
    Subscription snapshot.

    Same layout as an API subscription, frozen along with its plan and add-ons.
    """

    model_config = ConfigDict(frozen=True)

    plan: Optional[Plan] = xml_field("plan")
    subscription_add_ons: List[SubscriptionAddOn] = xml_field(
        "subscription_add_ons>subscription_add_on", default_factory=list
    )


# =============================================================================
# Notifications
# =============================================================================

class Notification(Snapshot):
    """
    Base class of every notification.

    Attributes:
        type: Root element name of the payload, e.g. ``new_account_notification``
        id: Hex MD5 of the raw payload, usable to detect redelivery
        account: Account snapshot
    """

    type: str = xml_field("type", "", skip=True)
    id: str = xml_field("id", "", skip=True)
    account: Account = xml_field("account", default_factory=Account)


class AccountNotification(Notification):
    pass


class SubscriptionNotification(Notification):
    subscription: Subscription = xml_field("subscription", default_factory=Subscription)


class ChargeInvoiceNotification(Notification):
    invoice: ChargeInvoice = xml_field("invoice", default_factory=ChargeInvoice)


class CreditInvoiceNotification(Notification):
    invoice: CreditInvoice = xml_field("invoice", default_factory=CreditInvoice)


class CreditPaymentNotification(Notification):
    credit_payment: CreditPayment = xml_field("credit_payment", default_factory=CreditPayment)


class PaymentNotification(Notification):
    transaction: Transaction = xml_field("transaction", default_factory=Transaction)


class NewDunningEventNotification(Notification):
    invoice: ChargeInvoice = xml_field("invoice", default_factory=ChargeInvoice)
    subscription: Subscription = xml_field("subscription", default_factory=Subscription)


class InvoiceNotification(Notification):
    """Legacy invoice notification."""

    invoice: Invoice = xml_field("invoice", default_factory=Invoice)


class LegacyDunningEventNotification(Notification):
    invoice: Invoice = xml_field("invoice", default_factory=Invoice)
    subscription: Subscription = xml_field("subscription", default_factory=Subscription)


__all__ = [
    "Account",
    "Transaction",
    "Invoice",
    "ChargeInvoice",
    "CreditInvoice",
    "CreditPayment",
    "Plan",
    "SubscriptionAddOn",
    "Subscription",
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
]
