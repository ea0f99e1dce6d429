"""Plan add-ons."""

from __future__ import annotations
from typing import List, Optional, Tuple, TYPE_CHECKING

from ..runtime.codec import XmlModel, xml_field
from ..runtime.nullable import NullBool, NullInt, NullTime, UnitAmount
from .base import Params, Service

if TYPE_CHECKING:
    from ..response import Response


class AddOn(XmlModel):
    xml_tag = "add_on"

    code: str = xml_field("add_on_code", "")
    name: str = xml_field("name", "")
    default_quantity: NullInt = xml_field("default_quantity", default_factory=NullInt)
    display_quantity_on_hosted_page: NullBool = xml_field("display_quantity_on_hosted_page", default_factory=NullBool)
    tax_code: str = xml_field("tax_code", "")
    unit_amount_in_cents: UnitAmount = xml_field("unit_amount_in_cents", default_factory=UnitAmount)
    accounting_code: str = xml_field("accounting_code", "")
    created_at: NullTime = xml_field("created_at", default_factory=NullTime, read_only=True)


class AddOnsService(Service):
    """Add-ons of a plan, at ``plans/{plan_code}/add_ons``."""

    def list(self, plan_code: str, params: Optional[Params] = None) -> Tuple["Response", List[AddOn]]:
        return self._list(f"plans/{plan_code}/add_ons", AddOn, params)

    def get(self, plan_code: str, code: str) -> Tuple["Response", Optional[AddOn]]:
        return self._call("GET", f"plans/{plan_code}/add_ons/{code}", AddOn)

    def create(self, plan_code: str, add_on: AddOn) -> Tuple["Response", Optional[AddOn]]:
        return self._call("POST", f"plans/{plan_code}/add_ons", AddOn, body=add_on)

    def update(self, plan_code: str, code: str, add_on: AddOn) -> Tuple["Response", Optional[AddOn]]:
        return self._call("PUT", f"plans/{plan_code}/add_ons/{code}", AddOn, body=add_on)

    def delete(self, plan_code: str, code: str) -> "Response":
        return self._delete(f"plans/{plan_code}/add_ons/{code}")


__all__ = ["AddOn", "AddOnsService"]
