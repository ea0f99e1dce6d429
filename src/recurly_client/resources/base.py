"""Common plumbing for resource services."""

from __future__ import annotations
from typing import Any, List, Mapping, Optional, Tuple, Type, Union, TYPE_CHECKING

from ..pager import Pager, PagerOptions
from ..runtime.codec import ListOf, XmlModel

if TYPE_CHECKING:
    from ..client import Client
    from ..response import Response

Params = Union[PagerOptions, Mapping[str, Any]]


def query(params: Optional[Params]) -> Optional[Mapping[str, Any]]:
    """Normalize list parameters to a mapping."""
    if params is None:
        return None
    if isinstance(params, PagerOptions):
        return params.to_dict()
    return params


class Service:
    """Base class for a resource service bound to a client."""

    def __init__(self, client: "Client"):
        self._client = client

    def _call(
        self,
        method: str,
        path: str,
        into: Any = None,
        params: Optional[Params] = None,
        body: Optional[XmlModel] = None,
    ) -> Tuple["Response", Any]:
        request = self._client.new_request(method, path, query(params), body)
        response = self._client.do(request, into)
        return response, response.result

    def _list(self, path: str, cls: Type[XmlModel], params: Optional[Params] = None) -> Tuple["Response", List[Any]]:
        response, items = self._call("GET", path, ListOf(cls), params)
        return response, items or []

    def _delete(self, path: str, params: Optional[Params] = None) -> "Response":
        response, _ = self._call("DELETE", path, params=params)
        return response

    def _pager(self, path: str, cls: Type[XmlModel], options: Optional[PagerOptions] = None) -> Pager:
        return self._client.pager(path, ListOf(cls), options)


__all__ = ["Service", "Params", "query"]
