"""Billing info: the payment method stored on an account."""

from __future__ import annotations
from typing import Optional, Tuple, TYPE_CHECKING

from ..runtime.codec import XmlModel, xml_field
from .base import Service

if TYPE_CHECKING:
    from ..response import Response

CARD_TYPE_AMERICAN_EXPRESS = "american_express"
CARD_TYPE_DISCOVER = "discover"
CARD_TYPE_MASTER = "master"
CARD_TYPE_VISA = "visa"


class Billing(XmlModel):
    """
    Billing info for a single account.

    Create or update with a recurly.js ``token`` (recommended), or with card
    or bank account fields.
    """

    xml_tag = "billing_info"

    payment_type: str = xml_field("type", "", attr=True)

    first_name: str = xml_field("first_name", "")
    last_name: str = xml_field("last_name", "")
    company: str = xml_field("company", "")
    address: str = xml_field("address1", "")
    address2: str = xml_field("address2", "")
    city: str = xml_field("city", "")
    state: str = xml_field("state", "")
    zip: str = xml_field("zip", "")
    country: str = xml_field("country", "")
    phone: str = xml_field("phone", "")
    vat_number: str = xml_field("vat_number", "")
    ip_address: str = xml_field("ip_address", "")
    ip_address_country: str = xml_field("ip_address_country", "")

    # Credit card
    first_six: str = xml_field("first_six", "")
    last_four: str = xml_field("last_four", "")
    card_type: str = xml_field("card_type", "")
    number: str = xml_field("number", "")
    month: int = xml_field("month", 0)
    year: int = xml_field("year", 0)
    verification_value: str = xml_field("verification_value", "")

    # PayPal / Amazon
    paypal_agreement_id: str = xml_field("paypal_billing_agreement_id", "")
    amazon_agreement_id: str = xml_field("amazon_billing_agreement_id", "")

    # Bank account
    name_on_account: str = xml_field("name_on_account", "")
    routing_number: str = xml_field("routing_number", "")
    account_number: str = xml_field("account_number", "")
    account_type: str = xml_field("account_type", "")

    currency: str = xml_field("currency", "")
    token: str = xml_field("token_id", "")

    def kind(self) -> str:
        """Return ``card``, ``bank`` or an empty string when neither is complete."""
        if self.first_six and self.last_four and self.month > 0 and self.year > 0:
            return "card"
        if self.name_on_account and self.routing_number and self.account_number:
            return "bank"
        return ""


class BillingService(Service):
    """Billing info of an account, at ``accounts/{code}/billing_info``."""

    def get(self, account_code: str) -> Tuple["Response", Optional[Billing]]:
        return self._call("GET", f"accounts/{account_code}/billing_info", Billing)

    def create(self, account_code: str, billing: Billing) -> Tuple["Response", Optional[Billing]]:
        return self._call("POST", f"accounts/{account_code}/billing_info", Billing, body=billing)

    def update(self, account_code: str, billing: Billing) -> Tuple["Response", Optional[Billing]]:
        return self._call("PUT", f"accounts/{account_code}/billing_info", Billing, body=billing)

    def clear(self, account_code: str) -> "Response":
        """Remove stored billing info. Active subscriptions go past due at renewal."""
        return self._delete(f"accounts/{account_code}/billing_info")


__all__ = ["Billing", "BillingService"]
