"""
Invoices.

Most invoice fields are set by Recurly and never sent back. Only the
posting options (``po_number``, ``net_terms``, ``collection_method`` and the
notes) are written when invoicing pending charges.
"""

from __future__ import annotations
import io
from typing import IO, List, Optional, Tuple, TYPE_CHECKING

from ..pager import Pager, PagerOptions
from ..runtime.codec import XmlModel, xml_field
from ..runtime.href import Href
from ..runtime.nullable import NullInt, NullTime
from .accounts import Address
from .adjustments import Adjustment
from .base import Params, Service
from .transactions import Transaction

if TYPE_CHECKING:
    from ..response import Response

INVOICE_STATE_OPEN = "open"
INVOICE_STATE_COLLECTED = "collected"
INVOICE_STATE_FAILED = "failed"
INVOICE_STATE_PAST_DUE = "past_due"

DEFAULT_PDF_LANGUAGE = "English"


class Invoice(XmlModel):
    xml_tag = "invoice"

    account: Href = xml_field("account", default_factory=Href)
    address: Optional[Address] = xml_field("address", read_only=True)
    subscription: Href = xml_field("subscription", default_factory=Href)
    original_invoice: Href = xml_field("original_invoice", default_factory=Href)
    uuid: str = xml_field("uuid", "", read_only=True)
    state: str = xml_field("state", "", read_only=True)
    invoice_number_prefix: str = xml_field("invoice_number_prefix", "", read_only=True)
    invoice_number: int = xml_field("invoice_number", 0, read_only=True)
    po_number: str = xml_field("po_number", "")
    vat_number: str = xml_field("vat_number", "", read_only=True)
    subtotal_in_cents: int = xml_field("subtotal_in_cents", 0, read_only=True)
    tax_in_cents: int = xml_field("tax_in_cents", 0, read_only=True)
    total_in_cents: int = xml_field("total_in_cents", 0, read_only=True)
    currency: str = xml_field("currency", "", read_only=True)
    created_at: NullTime = xml_field("created_at", default_factory=NullTime, read_only=True)
    closed_at: NullTime = xml_field("closed_at", default_factory=NullTime, read_only=True)
    tax_type: str = xml_field("tax_type", "", read_only=True)
    tax_region: str = xml_field("tax_region", "", read_only=True)
    tax_rate: float = xml_field("tax_rate", 0.0, read_only=True)
    net_terms: NullInt = xml_field("net_terms", default_factory=NullInt)
    collection_method: str = xml_field("collection_method", "")
    terms_and_conditions: str = xml_field("terms_and_conditions", "")
    customer_notes: str = xml_field("customer_notes", "")
    vat_reverse_charge_notes: str = xml_field("vat_reverse_charge_notes", "")
    line_items: List[Adjustment] = xml_field("line_items>adjustment", default_factory=list, read_only=True)
    transactions: List[Transaction] = xml_field("transactions>transaction", default_factory=list, read_only=True)

    @property
    def account_code(self) -> str:
        return self.account.code

    @property
    def subscription_uuid(self) -> str:
        return self.subscription.code

    @property
    def original_invoice_number(self) -> Optional[int]:
        return self.original_invoice.number


class InvoicesService(Service):
    def list(self, params: Optional[Params] = None) -> Tuple["Response", List[Invoice]]:
        return self._list("invoices", Invoice, params)

    def pager(self, options: Optional[PagerOptions] = None) -> Pager:
        return self._pager("invoices", Invoice, options)

    def list_account(self, account_code: str, params: Optional[Params] = None) -> Tuple["Response", List[Invoice]]:
        return self._list(f"accounts/{account_code}/invoices", Invoice, params)

    def get(self, invoice_number: int) -> Tuple["Response", Optional[Invoice]]:
        return self._call("GET", f"invoices/{invoice_number}", Invoice)

    def get_pdf(
        self,
        invoice_number: int,
        language: str = DEFAULT_PDF_LANGUAGE,
        sink: Optional[IO[bytes]] = None,
    ) -> Tuple["Response", IO[bytes]]:
        """
        Download an invoice as PDF.

        Args:
            invoice_number: Invoice number
            language: PDF language, sent as ``Accept-Language``
            sink: Writable binary stream; a BytesIO is used if omitted

        Returns:
            The response and the sink holding the PDF bytes
        """
        request = self._client.new_request("GET", f"invoices/{invoice_number}")
        request.headers["Accept"] = "application/pdf"
        request.headers["Accept-Language"] = language or DEFAULT_PDF_LANGUAGE

        if sink is None:
            sink = io.BytesIO()
        response = self._client.do(request, sink)
        return response, sink

    def preview(self, account_code: str) -> Tuple["Response", Optional[Invoice]]:
        """Preview the invoice that pending charges would produce."""
        return self._call("POST", f"accounts/{account_code}/invoices/preview", Invoice)

    def create(self, account_code: str, invoice: Optional[Invoice] = None) -> Tuple["Response", Optional[Invoice]]:
        """Invoice the pending charges of an account."""
        return self._call("POST", f"accounts/{account_code}/invoices", Invoice, body=invoice or Invoice())

    def mark_paid(self, invoice_number: int) -> Tuple["Response", Optional[Invoice]]:
        """Mark an invoice as paid successfully."""
        return self._call("PUT", f"invoices/{invoice_number}/mark_successful", Invoice)

    def mark_failed(self, invoice_number: int) -> Tuple["Response", Optional[Invoice]]:
        return self._call("PUT", f"invoices/{invoice_number}/mark_failed", Invoice)


__all__ = ["Invoice", "InvoicesService"]
