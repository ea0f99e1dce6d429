"""
Transactions.

A transaction is decoded with its account under ``<details><account>`` and
links to its invoice and subscription. When sent, only the writable fields
go out and the account is written directly as ``<account>``.
"""

from __future__ import annotations
from typing import List, Optional, Tuple, TYPE_CHECKING

from ..pager import Pager, PagerOptions
from ..runtime.codec import XmlModel, xml_field
from ..runtime.href import Href
from ..runtime.nullable import NullBool, NullTime
from .accounts import Account
from .base import Params, Service

if TYPE_CHECKING:
    from ..response import Response

TRANSACTION_STATUS_SUCCESS = "success"
TRANSACTION_STATUS_FAILED = "failed"
TRANSACTION_STATUS_VOID = "void"


class TransactionResult(XmlModel):
    """A gateway check result: a code attribute and a message."""

    code: str = xml_field("code", "", attr=True)
    message: str = xml_field("message", "", text=True)


class CVVResult(TransactionResult):
    xml_tag = "cvv_result"

    def is_match(self) -> bool:
        return self.code in ("M", "Y")

    def is_no_match(self) -> bool:
        return self.code == "N"

    def not_processed(self) -> bool:
        return self.code == "P"

    def should_have_been_present(self) -> bool:
        return self.code == "S"

    def unable_to_process(self) -> bool:
        return self.code == "U"


class AVSResult(TransactionResult):
    xml_tag = "avs_result"


class Transaction(XmlModel):
    """A payment, refund or verification."""

    xml_tag = "transaction"

    invoice: Href = xml_field("invoice", default_factory=Href)
    subscription: Href = xml_field("subscription", default_factory=Href)
    uuid: str = xml_field("uuid", "", read_only=True)
    action: str = xml_field("action", "")
    amount_in_cents: int = xml_field("amount_in_cents", 0, keep_empty=True)
    tax_in_cents: int = xml_field("tax_in_cents", 0)
    currency: str = xml_field("currency", "", keep_empty=True)
    status: str = xml_field("status", "")
    payment_method: str = xml_field("payment_method", "")
    reference: str = xml_field("reference", "")
    source: str = xml_field("source", "")
    recurring: NullBool = xml_field("recurring", default_factory=NullBool)
    test: bool = xml_field("test", False)
    voidable: NullBool = xml_field("voidable", default_factory=NullBool)
    refundable: NullBool = xml_field("refundable", default_factory=NullBool)
    ip_address: str = xml_field("ip_address", "")
    cvv_result: Optional[CVVResult] = xml_field("cvv_result", read_only=True)
    avs_result: Optional[AVSResult] = xml_field("avs_result", read_only=True)
    avs_result_street: str = xml_field("avs_result_street", "", read_only=True)
    avs_result_postal: str = xml_field("avs_result_postal", "", read_only=True)
    created_at: NullTime = xml_field("created_at", default_factory=NullTime, read_only=True)
    account: Account = xml_field("details>account", default_factory=Account, keep_empty=True, write_as="account")

    @property
    def invoice_number(self) -> Optional[int]:
        return self.invoice.number

    @property
    def subscription_uuid(self) -> str:
        return self.subscription.code


class TransactionsService(Service):
    def list(self, params: Optional[Params] = None) -> Tuple["Response", List[Transaction]]:
        return self._list("transactions", Transaction, params)

    def pager(self, options: Optional[PagerOptions] = None) -> Pager:
        return self._pager("transactions", Transaction, options)

    def list_account(self, account_code: str, params: Optional[Params] = None) -> Tuple["Response", List[Transaction]]:
        return self._list(f"accounts/{account_code}/transactions", Transaction, params)

    def get(self, uuid: str) -> Tuple["Response", Optional[Transaction]]:
        return self._call("GET", f"transactions/{uuid}", Transaction)

    def create(self, transaction: Transaction) -> Tuple["Response", Optional[Transaction]]:
        """
        Create a one-time transaction.

        A declined card comes back as a 422 with ``transaction_error`` and the
        failed ``transaction`` set on the response.
        """
        return self._call("POST", "transactions", Transaction, body=transaction)


__all__ = [
    "Transaction",
    "TransactionResult",
    "CVVResult",
    "AVSResult",
    "TransactionsService",
]
