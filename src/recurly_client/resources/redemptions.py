"""Coupon redemptions."""

from __future__ import annotations
from typing import Optional, Tuple, Union, TYPE_CHECKING

from ..runtime.codec import XmlModel, xml_field
from ..runtime.href import Href
from ..runtime.nullable import NullBool, NullTime
from .base import Service

if TYPE_CHECKING:
    from ..response import Response


class Redemption(XmlModel):
    """A coupon applied to an account."""

    xml_tag = "redemption"

    coupon: Href = xml_field("coupon", default_factory=Href)
    account: Href = xml_field("account", default_factory=Href)
    single_use: NullBool = xml_field("single_use", default_factory=NullBool)
    total_discounted_in_cents: int = xml_field("total_discounted_in_cents", 0)
    currency: str = xml_field("currency", "")
    state: str = xml_field("state", "")
    created_at: NullTime = xml_field("created_at", default_factory=NullTime, read_only=True)


class RedeemRequest(XmlModel):
    """Body of a redeem call."""

    xml_tag = "redemption"

    account_code: str = xml_field("account_code", "", keep_empty=True)
    currency: str = xml_field("currency", "", keep_empty=True)


class RedemptionsService(Service):
    def get_for_account(self, account_code: str) -> Tuple["Response", Optional[Redemption]]:
        """Return the active redemption on an account."""
        return self._call("GET", f"accounts/{account_code}/redemption", Redemption)

    def get_for_invoice(self, invoice_number: Union[int, str]) -> Tuple["Response", Optional[Redemption]]:
        return self._call("GET", f"invoices/{invoice_number}/redemption", Redemption)

    def redeem(self, code: str, account_code: str, currency: str) -> Tuple["Response", Optional[Redemption]]:
        """Redeem coupon ``code`` on an account."""
        body = RedeemRequest(account_code=account_code, currency=currency)
        return self._call("POST", f"coupons/{code}/redeem", Redemption, body=body)

    def delete(self, account_code: str) -> "Response":
        """Remove the active redemption from an account."""
        return self._delete(f"accounts/{account_code}/redemption")


__all__ = ["Redemption", "RedeemRequest", "RedemptionsService"]
