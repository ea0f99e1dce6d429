"""Resource models and services."""

from .accounts import Account, Address, Note, AccountsService
from .billing import Billing, BillingService
from .adjustments import Adjustment, TaxDetail, AdjustmentsService
from .plans import Plan, PlansService
from .add_ons import AddOn, AddOnsService
from .coupons import Coupon, CouponsService
from .redemptions import Redemption, RedeemRequest, RedemptionsService
from .transactions import Transaction, CVVResult, AVSResult, TransactionsService
from .invoices import Invoice, InvoicesService
from .subscriptions import (
    Subscription,
    SubscriptionAddOn,
    NestedPlan,
    NewSubscription,
    UpdateSubscription,
    SubscriptionNotes,
    SubscriptionsService,
)

__all__ = [
    "Account",
    "Address",
    "Note",
    "AccountsService",
    "Billing",
    "BillingService",
    "Adjustment",
    "TaxDetail",
    "AdjustmentsService",
    "Plan",
    "PlansService",
    "AddOn",
    "AddOnsService",
    "Coupon",
    "CouponsService",
    "Redemption",
    "RedeemRequest",
    "RedemptionsService",
    "Transaction",
    "CVVResult",
    "AVSResult",
    "TransactionsService",
    "Invoice",
    "InvoicesService",
    "Subscription",
    "SubscriptionAddOn",
    "NestedPlan",
    "NewSubscription",
    "UpdateSubscription",
    "SubscriptionNotes",
    "SubscriptionsService",
]
