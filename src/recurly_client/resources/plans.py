"""Subscription plans."""

from __future__ import annotations
from typing import List, Optional, Tuple, TYPE_CHECKING

from ..pager import Pager, PagerOptions
from ..runtime.codec import XmlModel, xml_field
from ..runtime.nullable import NullBool, NullTime, UnitAmount
from .base import Params, Service

if TYPE_CHECKING:
    from ..response import Response


class Plan(XmlModel):
    """A plan. Prices are multi-currency ``UnitAmount`` values."""

    xml_tag = "plan"

    code: str = xml_field("plan_code", "")
    name: str = xml_field("name", "", keep_empty=True)
    description: str = xml_field("description", "")
    success_url: str = xml_field("success_url", "")
    cancel_url: str = xml_field("cancel_url", "")
    display_donation_amounts: NullBool = xml_field("display_donation_amounts", default_factory=NullBool)
    display_quantity: NullBool = xml_field("display_quantity", default_factory=NullBool)
    display_phone_number: NullBool = xml_field("display_phone_number", default_factory=NullBool)
    bypass_hosted_confirmation: NullBool = xml_field("bypass_hosted_confirmation", default_factory=NullBool)
    unit_name: str = xml_field("unit_name", "")
    payment_page_tos_link: str = xml_field("payment_page_tos_link", "")
    interval_unit: str = xml_field("plan_interval_unit", "")
    interval_length: int = xml_field("plan_interval_length", 0)
    trial_interval_unit: str = xml_field("trial_interval_unit", "")
    trial_interval_length: int = xml_field("trial_interval_length", 0)
    total_billing_cycles: int = xml_field("total_billing_cycles", 0)
    accounting_code: str = xml_field("accounting_code", "")
    created_at: NullTime = xml_field("created_at", default_factory=NullTime, read_only=True)
    tax_exempt: NullBool = xml_field("tax_exempt", default_factory=NullBool)
    tax_code: str = xml_field("tax_code", "")
    unit_amount_in_cents: UnitAmount = xml_field("unit_amount_in_cents", default_factory=UnitAmount)
    setup_fee_in_cents: UnitAmount = xml_field("setup_fee_in_cents", default_factory=UnitAmount)


class PlansService(Service):
    def list(self, params: Optional[Params] = None) -> Tuple["Response", List[Plan]]:
        return self._list("plans", Plan, params)

    def pager(self, options: Optional[PagerOptions] = None) -> Pager:
        return self._pager("plans", Plan, options)

    def get(self, code: str) -> Tuple["Response", Optional[Plan]]:
        return self._call("GET", f"plans/{code}", Plan)

    def create(self, plan: Plan) -> Tuple["Response", Optional[Plan]]:
        return self._call("POST", "plans", Plan, body=plan)

    def update(self, code: str, plan: Plan) -> Tuple["Response", Optional[Plan]]:
        """Update a plan. Changes apply to new subscriptions only."""
        return self._call("PUT", f"plans/{code}", Plan, body=plan)

    def delete(self, code: str) -> "Response":
        """Expire a plan; existing subscriptions keep it."""
        return self._delete(f"plans/{code}")


__all__ = ["Plan", "PlansService"]
