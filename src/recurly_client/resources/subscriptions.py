"""
Subscriptions.

Reads return ``Subscription``. Writes use dedicated shapes:
``NewSubscription`` to create or preview, ``UpdateSubscription`` to change
an existing subscription and ``SubscriptionNotes`` to edit its notes.
"""

from __future__ import annotations
from datetime import datetime
from typing import List, Optional, Tuple, TYPE_CHECKING

from ..pager import Pager, PagerOptions
from ..runtime.codec import XmlModel, xml_field
from ..runtime.href import Href
from ..runtime.nullable import NullInt, NullTime
from .accounts import Account
from .base import Params, Service

if TYPE_CHECKING:
    from ..response import Response

SUBSCRIPTION_STATE_ACTIVE = "active"
SUBSCRIPTION_STATE_CANCELED = "canceled"
SUBSCRIPTION_STATE_EXPIRED = "expired"
SUBSCRIPTION_STATE_FUTURE = "future"
SUBSCRIPTION_STATE_IN_TRIAL = "in_trial"
SUBSCRIPTION_STATE_LIVE = "live"
SUBSCRIPTION_STATE_PAST_DUE = "past_due"

REFUND_PARTIAL = "partial"
REFUND_FULL = "full"
REFUND_NONE = "none"


class NestedPlan(XmlModel):
    xml_tag = "plan"

    code: str = xml_field("plan_code", "")
    name: str = xml_field("name", "")


class SubscriptionAddOn(XmlModel):
    xml_tag = "subscription_add_on"

    code: str = xml_field("add_on_code", "", keep_empty=True)
    unit_amount_in_cents: int = xml_field("unit_amount_in_cents", 0, keep_empty=True)
    quantity: int = xml_field("quantity", 0)


class UpdateSubscription(XmlModel):
    """
    Changes to an existing subscription.

    ``timeframe`` is ``now`` or ``renewal``. Leaving ``subscription_add_ons``
    as None keeps the current add-ons; an empty list removes them all.
    """

    xml_tag = "subscription"

    timeframe: str = xml_field("timeframe", "")
    plan_code: str = xml_field("plan_code", "")
    quantity: int = xml_field("quantity", 0)
    unit_amount_in_cents: int = xml_field("unit_amount_in_cents", 0)
    collection_method: str = xml_field("collection_method", "")
    net_terms: NullInt = xml_field("net_terms", default_factory=NullInt)
    po_number: str = xml_field("po_number", "")
    subscription_add_ons: Optional[List[SubscriptionAddOn]] = xml_field("subscription_add_ons>subscription_add_on")


class Subscription(XmlModel):
    xml_tag = "subscription"

    plan: Optional[NestedPlan] = xml_field("plan")
    account: Href = xml_field("account", default_factory=Href)
    invoice: Href = xml_field("invoice", default_factory=Href)
    uuid: str = xml_field("uuid", "")
    state: str = xml_field("state", "")
    unit_amount_in_cents: int = xml_field("unit_amount_in_cents", 0)
    currency: str = xml_field("currency", "")
    quantity: int = xml_field("quantity", 0)
    activated_at: NullTime = xml_field("activated_at", default_factory=NullTime)
    canceled_at: NullTime = xml_field("canceled_at", default_factory=NullTime)
    expires_at: NullTime = xml_field("expires_at", default_factory=NullTime)
    current_period_started_at: NullTime = xml_field("current_period_started_at", default_factory=NullTime)
    current_period_ends_at: NullTime = xml_field("current_period_ends_at", default_factory=NullTime)
    trial_started_at: NullTime = xml_field("trial_started_at", default_factory=NullTime)
    trial_ends_at: NullTime = xml_field("trial_ends_at", default_factory=NullTime)
    tax_in_cents: int = xml_field("tax_in_cents", 0)
    tax_type: str = xml_field("tax_type", "")
    tax_region: str = xml_field("tax_region", "")
    tax_rate: float = xml_field("tax_rate", 0.0)
    po_number: str = xml_field("po_number", "")
    net_terms: NullInt = xml_field("net_terms", default_factory=NullInt)
    collection_method: str = xml_field("collection_method", "")
    subscription_add_ons: List[SubscriptionAddOn] = xml_field(
        "subscription_add_ons>subscription_add_on", default_factory=list
    )

    @property
    def account_code(self) -> str:
        return self.account.code

    @property
    def invoice_number(self) -> Optional[int]:
        return self.invoice.number

    def make_update(self) -> UpdateSubscription:
        """
        Start an update that keeps the current net terms and add-ons.

        An update that omits add-ons would otherwise remove them.
        """
        return UpdateSubscription(
            net_terms=self.net_terms,
            subscription_add_ons=[a.model_copy() for a in self.subscription_add_ons],
        )


class NewSubscription(XmlModel):
    """A subscription to create. ``account`` may be new or existing."""

    xml_tag = "subscription"

    plan_code: str = xml_field("plan_code", "", keep_empty=True)
    account: Account = xml_field("account", default_factory=Account, keep_empty=True)
    subscription_add_ons: Optional[List[SubscriptionAddOn]] = xml_field("subscription_add_ons>subscription_add_on")
    coupon_code: str = xml_field("coupon_code", "")
    unit_amount_in_cents: int = xml_field("unit_amount_in_cents", 0)
    currency: str = xml_field("currency", "", keep_empty=True)
    quantity: int = xml_field("quantity", 0)
    trial_ends_at: NullTime = xml_field("trial_ends_at", default_factory=NullTime)
    starts_at: NullTime = xml_field("starts_at", default_factory=NullTime)
    total_billing_cycles: int = xml_field("total_billing_cycles", 0)
    first_renewal_date: NullTime = xml_field("first_renewal_date", default_factory=NullTime)
    collection_method: str = xml_field("collection_method", "")
    net_terms: NullInt = xml_field("net_terms", default_factory=NullInt)
    po_number: str = xml_field("po_number", "")
    bulk: bool = xml_field("bulk", False)
    terms_and_conditions: str = xml_field("terms_and_conditions", "")
    customer_notes: str = xml_field("customer_notes", "")
    vat_reverse_charge_notes: str = xml_field("vat_reverse_charge_notes", "")
    bank_account_authorized_at: NullTime = xml_field("bank_account_authorized_at", default_factory=NullTime)


class SubscriptionNotes(XmlModel):
    xml_tag = "subscription"

    terms_and_conditions: str = xml_field("terms_and_conditions", "")
    customer_notes: str = xml_field("customer_notes", "")
    vat_reverse_charge_notes: str = xml_field("vat_reverse_charge_notes", "")


class SubscriptionsService(Service):
    def list(self, params: Optional[Params] = None) -> Tuple["Response", List[Subscription]]:
        return self._list("subscriptions", Subscription, params)

    def pager(self, options: Optional[PagerOptions] = None) -> Pager:
        return self._pager("subscriptions", Subscription, options)

    def list_account(self, account_code: str, params: Optional[Params] = None) -> Tuple["Response", List[Subscription]]:
        return self._list(f"accounts/{account_code}/subscriptions", Subscription, params)

    def get(self, uuid: str) -> Tuple["Response", Optional[Subscription]]:
        return self._call("GET", f"subscriptions/{uuid}", Subscription)

    def create(self, subscription: NewSubscription) -> Tuple["Response", Optional[Subscription]]:
        return self._call("POST", "subscriptions", Subscription, body=subscription)

    def preview(self, subscription: NewSubscription) -> Tuple["Response", Optional[Subscription]]:
        """Return the subscription that ``create`` would produce, without creating it."""
        return self._call("POST", "subscriptions/preview", Subscription, body=subscription)

    def update(self, uuid: str, update: UpdateSubscription) -> Tuple["Response", Optional[Subscription]]:
        """Change a subscription. Use ``Subscription.make_update`` to keep add-ons."""
        return self._call("PUT", f"subscriptions/{uuid}", Subscription, body=update)

    def update_notes(self, uuid: str, notes: SubscriptionNotes) -> Tuple["Response", Optional[Subscription]]:
        return self._call("PUT", f"subscriptions/{uuid}/notes", Subscription, body=notes)

    def preview_change(self, uuid: str, update: UpdateSubscription) -> Tuple["Response", Optional[Subscription]]:
        return self._call("POST", f"subscriptions/{uuid}/preview", Subscription, body=update)

    def cancel(self, uuid: str) -> Tuple["Response", Optional[Subscription]]:
        """Cancel at the end of the current term."""
        return self._call("PUT", f"subscriptions/{uuid}/cancel", Subscription)

    def reactivate(self, uuid: str) -> Tuple["Response", Optional[Subscription]]:
        """Reactivate a canceled subscription before it expires."""
        return self._call("PUT", f"subscriptions/{uuid}/reactivate", Subscription)

    def _terminate(self, uuid: str, refund_type: str) -> Tuple["Response", Optional[Subscription]]:
        return self._call("PUT", f"subscriptions/{uuid}/terminate", Subscription, {"refund_type": refund_type})

    def terminate_with_partial_refund(self, uuid: str) -> Tuple["Response", Optional[Subscription]]:
        """Expire now, refunding the unused part of the term."""
        return self._terminate(uuid, REFUND_PARTIAL)

    def terminate_with_full_refund(self, uuid: str) -> Tuple["Response", Optional[Subscription]]:
        return self._terminate(uuid, REFUND_FULL)

    def terminate_without_refund(self, uuid: str) -> Tuple["Response", Optional[Subscription]]:
        return self._terminate(uuid, REFUND_NONE)

    def postpone(self, uuid: str, next_renewal_date: datetime, bulk: bool = False) -> Tuple["Response", Optional[Subscription]]:
        """
        Move the next renewal to ``next_renewal_date``.

        ``bulk`` skips the API's safeguard against accidental double
        postponement when postponing many subscriptions.
        """
        params = {"next_renewal_date": next_renewal_date, "bulk": bulk}
        return self._call("PUT", f"subscriptions/{uuid}/postpone", Subscription, params)


__all__ = [
    "Subscription",
    "SubscriptionAddOn",
    "NestedPlan",
    "NewSubscription",
    "UpdateSubscription",
    "SubscriptionNotes",
    "SubscriptionsService",
]
