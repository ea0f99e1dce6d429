"""Coupons."""

from __future__ import annotations
from typing import List, Optional, Tuple, TYPE_CHECKING

from ..pager import Pager, PagerOptions
from ..runtime.codec import XmlModel, xml_field
from ..runtime.nullable import NullBool, NullInt, NullTime, UnitAmount
from .base import Params, Service

if TYPE_CHECKING:
    from ..response import Response

DISCOUNT_TYPE_PERCENT = "percent"
DISCOUNT_TYPE_DOLLARS = "dollars"


class Coupon(XmlModel):
    """
    A coupon.

    ``discount_type`` selects between ``discount_percent`` and the
    multi-currency ``discount_in_cents``. ``plan_codes`` limits the coupon to
    some plans unless ``applies_to_all_plans`` is set.
    """

    xml_tag = "coupon"

    code: str = xml_field("coupon_code", "", keep_empty=True)
    name: str = xml_field("name", "", keep_empty=True)
    hosted_description: str = xml_field("hosted_description", "")
    invoice_description: str = xml_field("invoice_description", "")
    state: str = xml_field("state", "", read_only=True)
    discount_type: str = xml_field("discount_type", "", keep_empty=True)
    discount_percent: int = xml_field("discount_percent", 0)
    discount_in_cents: UnitAmount = xml_field("discount_in_cents", default_factory=UnitAmount)
    redeem_by_date: NullTime = xml_field("redeem_by_date", default_factory=NullTime)
    single_use: NullBool = xml_field("single_use", default_factory=NullBool)
    applies_for_months: NullInt = xml_field("applies_for_months", default_factory=NullInt)
    max_redemptions: NullInt = xml_field("max_redemptions", default_factory=NullInt)
    applies_to_all_plans: NullBool = xml_field("applies_to_all_plans", default_factory=NullBool)
    created_at: NullTime = xml_field("created_at", default_factory=NullTime, read_only=True)
    plan_codes: Optional[List[str]] = xml_field("plan_codes>plan_code")


class CouponsService(Service):
    def list(self, params: Optional[Params] = None) -> Tuple["Response", List[Coupon]]:
        return self._list("coupons", Coupon, params)

    def pager(self, options: Optional[PagerOptions] = None) -> Pager:
        return self._pager("coupons", Coupon, options)

    def get(self, code: str) -> Tuple["Response", Optional[Coupon]]:
        return self._call("GET", f"coupons/{code}", Coupon)

    def create(self, coupon: Coupon) -> Tuple["Response", Optional[Coupon]]:
        return self._call("POST", "coupons", Coupon, body=coupon)

    def delete(self, code: str) -> "Response":
        """Deactivate a coupon. Existing redemptions are not affected."""
        return self._delete(f"coupons/{code}")


__all__ = ["Coupon", "CouponsService"]
