"""
Accounts.

Billing info embedded in an account document is dropped on every read:
it is managed through ``BillingService``. It may still be set on a create
request to attach billing info in one call.
"""

from __future__ import annotations
from datetime import datetime
from typing import List, Optional, Tuple, TYPE_CHECKING

from ..pager import Pager, PagerOptions
from ..runtime.codec import XmlModel, xml_field
from ..runtime.nullable import NullBool, NullTime
from .base import Params, Service
from .billing import Billing

if TYPE_CHECKING:
    from ..response import Response

ACCOUNT_STATE_ACTIVE = "active"
ACCOUNT_STATE_CLOSED = "closed"


class Address(XmlModel):
    """Postal address embedded in other resources."""

    xml_tag = "address"

    address: str = xml_field("address1", "")
    address2: str = xml_field("address2", "")
    city: str = xml_field("city", "")
    state: str = xml_field("state", "")
    zip: str = xml_field("zip", "")
    country: str = xml_field("country", "")
    phone: str = xml_field("phone", "")


class Account(XmlModel):
    """A customer account."""

    xml_tag = "account"

    code: str = xml_field("account_code", "")
    state: str = xml_field("state", "")
    username: str = xml_field("username", "")
    email: str = xml_field("email", "")
    first_name: str = xml_field("first_name", "")
    last_name: str = xml_field("last_name", "")
    company_name: str = xml_field("company_name", "")
    vat_number: str = xml_field("vat_number", "")
    tax_exempt: NullBool = xml_field("tax_exempt", default_factory=NullBool)
    billing_info: Optional[Billing] = xml_field("billing_info")
    address: Optional[Address] = xml_field("address")
    accept_language: str = xml_field("accept_language", "")
    hosted_login_token: str = xml_field("hosted_login_token", "", read_only=True)
    created_at: NullTime = xml_field("created_at", default_factory=NullTime, read_only=True)


class Note(XmlModel):
    """A note attached to an account."""

    xml_tag = "note"

    message: str = xml_field("message", "")
    created_at: Optional[datetime] = xml_field("created_at", read_only=True)


def _without_billing(account: Optional[Account]) -> Optional[Account]:
    if account is not None:
        account.billing_info = None
    return account


class AccountsService(Service):
    """Operations on ``accounts``."""

    def list(self, params: Optional[Params] = None) -> Tuple["Response", List[Account]]:
        """Return one page of accounts."""
        response, accounts = self._list("accounts", Account, params)
        for account in accounts:
            _without_billing(account)
        return response, accounts

    def pager(self, options: Optional[PagerOptions] = None) -> Pager:
        """Return a pager over all accounts."""
        return self._pager("accounts", Account, options)

    def get(self, code: str) -> Tuple["Response", Optional[Account]]:
        response, account = self._call("GET", f"accounts/{code}", Account)
        return response, _without_billing(account)

    def create(self, account: Account) -> Tuple["Response", Optional[Account]]:
        """Create an account, optionally with billing info."""
        response, created = self._call("POST", "accounts", Account, body=account)
        return response, _without_billing(created)

    def update(self, code: str, account: Account) -> Tuple["Response", Optional[Account]]:
        """
        Update an account.

        Send a new Account holding only the changes; unset fields are left
        alone by the API.
        """
        response, updated = self._call("PUT", f"accounts/{code}", Account, body=account)
        return response, _without_billing(updated)

    def close(self, code: str) -> "Response":
        """Close an account, canceling its subscriptions and removing billing info."""
        return self._delete(f"accounts/{code}")

    def reopen(self, code: str) -> "Response":
        response, _ = self._call("PUT", f"accounts/{code}/reopen")
        return response

    def list_notes(self, code: str) -> Tuple["Response", List[Note]]:
        """Return the notes on an account, newest first."""
        return self._list(f"accounts/{code}/notes", Note)


__all__ = ["Account", "Address", "Note", "AccountsService"]
