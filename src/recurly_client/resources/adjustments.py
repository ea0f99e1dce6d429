"""Adjustments: one-time charges and credits on an account."""

from __future__ import annotations
from typing import List, Optional, Tuple, TYPE_CHECKING

from ..runtime.codec import XmlModel, xml_field
from ..runtime.href import Href
from ..runtime.nullable import NullBool, NullTime
from .base import Params, Service

if TYPE_CHECKING:
    from ..response import Response


class TaxDetail(XmlModel):
    xml_tag = "tax_detail"

    name: str = xml_field("name", "")
    tax_type: str = xml_field("type", "")
    tax_rate: float = xml_field("tax_rate", 0.0)
    tax_in_cents: int = xml_field("tax_in_cents", 0)


class Adjustment(XmlModel):
    """A charge (positive amount) or credit (negative amount)."""

    xml_tag = "adjustment"

    account: Href = xml_field("account", default_factory=Href)
    invoice: Href = xml_field("invoice", default_factory=Href)
    uuid: str = xml_field("uuid", "")
    state: str = xml_field("state", "")
    description: str = xml_field("description", "")
    accounting_code: str = xml_field("accounting_code", "")
    product_code: str = xml_field("product_code", "")
    origin: str = xml_field("origin", "")
    unit_amount_in_cents: int = xml_field("unit_amount_in_cents", 0, keep_empty=True)
    quantity: int = xml_field("quantity", 0)
    original_adjustment_uuid: str = xml_field("original_adjustment_uuid", "")
    discount_in_cents: int = xml_field("discount_in_cents", 0)
    tax_in_cents: int = xml_field("tax_in_cents", 0)
    total_in_cents: int = xml_field("total_in_cents", 0)
    currency: str = xml_field("currency", "", keep_empty=True)
    taxable: NullBool = xml_field("taxable", default_factory=NullBool)
    tax_code: str = xml_field("tax_code", "")
    tax_type: str = xml_field("tax_type", "")
    tax_region: str = xml_field("tax_region", "")
    tax_rate: float = xml_field("tax_rate", 0.0)
    tax_exempt: NullBool = xml_field("tax_exempt", default_factory=NullBool)
    tax_details: Optional[List[TaxDetail]] = xml_field("tax_details>tax_detail")
    start_date: NullTime = xml_field("start_date", default_factory=NullTime)
    end_date: NullTime = xml_field("end_date", default_factory=NullTime)
    created_at: NullTime = xml_field("created_at", default_factory=NullTime, read_only=True)


class AdjustmentsService(Service):
    def list(self, account_code: str, params: Optional[Params] = None) -> Tuple["Response", List[Adjustment]]:
        """Return the adjustments of an account."""
        return self._list(f"accounts/{account_code}/adjustments", Adjustment, params)

    def get(self, uuid: str) -> Tuple["Response", Optional[Adjustment]]:
        return self._call("GET", f"adjustments/{uuid}", Adjustment)

    def create(self, account_code: str, adjustment: Adjustment) -> Tuple["Response", Optional[Adjustment]]:
        """Create a charge or credit on an account."""
        return self._call("POST", f"accounts/{account_code}/adjustments", Adjustment, body=adjustment)

    def delete(self, uuid: str) -> "Response":
        """Delete a pending adjustment."""
        return self._delete(f"adjustments/{uuid}")


__all__ = ["Adjustment", "TaxDetail", "AdjustmentsService"]
