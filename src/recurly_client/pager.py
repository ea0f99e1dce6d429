"""
Cursor pagination.

List endpoints return one page per request and a ``Link`` header pointing
at the next page. The cursor in that link is opaque: ``Pager`` only echoes
it back as the ``cursor`` query parameter.

    pager = client.accounts.pager(PagerOptions(state="active"))
    while pager.has_more():
        for account in pager.fetch():
            ...

Pages are fetched strictly in order. A pager holds cursor state and must
not be driven from several threads at once.
"""

from __future__ import annotations
import logging
from datetime import datetime
from typing import Any, Callable, Dict, Iterator, List, Optional, TYPE_CHECKING

from pydantic import BaseModel, Field

from .runtime.codec import format_param
from .runtime.errors import ErrorCode, PaginationError

if TYPE_CHECKING:
    from .client import Client
    from .response import Response

logger = logging.getLogger(__name__)

# Largest page size the API allows.
MAX_PER_PAGE = 200


class PagerOptions(BaseModel):
    """
    Query options for list endpoints.

    All options are optional; unset ones are not sent.
    """
    per_page: Optional[int] = Field(default=None, ge=1, le=MAX_PER_PAGE, description="Records per page")
    sort: Optional[str] = Field(default=None, description="Sort field, e.g. created_at or updated_at")
    order: Optional[str] = Field(default=None, description="asc or desc")
    begin_time: Optional[datetime] = Field(default=None, description="Only records on or after this time")
    end_time: Optional[datetime] = Field(default=None, description="Only records on or before this time")
    state: Optional[str] = Field(default=None, description="Resource state filter")
    cursor: Optional[str] = Field(default=None, description="Cursor to start from")

    model_config = {"populate_by_name": True}

    def to_dict(self) -> Dict[str, str]:
        """Convert to query parameters."""
        result: Dict[str, str] = {}
        for name in type(self).model_fields:
            value = getattr(self, name)
            if value is None or value == "":
                continue
            result[name] = format_param(value)
        return result


class Pager:
    """
    Sequential iterator over the pages of a list endpoint.

    Args:
        client: Client used to issue requests
        path: List endpoint path, e.g. ``accounts``
        decoder: Decoder for one page, e.g. ``ListOf(Account)``
        options: Initial query options
    """

    def __init__(
        self,
        client: "Client",
        path: str,
        decoder: Callable[..., List[Any]],
        options: Optional[PagerOptions] = None,
    ):
        self._client = client
        self._path = path
        self._decoder = decoder
        self._options = options.model_copy() if options else PagerOptions()
        self._cursor = self._options.cursor or ""
        self._done = False
        self._count: Optional[int] = None
        self.last_response: Optional["Response"] = None

    @property
    def cursor(self) -> str:
        """Cursor for the next fetch; empty before the first page."""
        return self._cursor

    def has_more(self) -> bool:
        """True until a page comes back empty or without a next cursor."""
        return not self._done

    def _params(self, with_cursor: bool = True) -> Dict[str, str]:
        params = self._options.to_dict()
        params.pop("cursor", None)
        if with_cursor and self._cursor:
            params["cursor"] = self._cursor
        return params

    def fetch(self) -> List[Any]:
        """
        Fetch the next page.

        Returns:
            Decoded records of the page

        Raises:
            PaginationError: If there are no more pages or the API returns an
                error status
        """
        if self._done:
            raise PaginationError("no more results", ErrorCode.NO_MORE_RESULTS)

        request = self._client.new_request("GET", self._path, self._params())
        response = self._client.do(request, self._decoder)
        self.last_response = response

        if response.is_error():
            raise PaginationError(
                f"Fetching {self._path} failed with status {response.status_code}",
                details={"status_code": response.status_code, "cursor": self._cursor},
                response=response,
            )

        results = response.result or []
        self._cursor = response.next()
        if not self._cursor or not results:
            self._done = True
        logger.debug(f"Fetched {len(results)} records from {self._path}, next cursor {self._cursor!r}")
        return results

    def fetch_all(self) -> List[Any]:
        """Fetch every remaining page using the largest page size."""
        self._options = self._options.model_copy(update={"per_page": MAX_PER_PAGE})
        results: List[Any] = []
        while self.has_more():
            results.extend(self.fetch())
        return results

    def count(self) -> int:
        """
        Total number of records matching the options.

        Issues a ``HEAD`` request the first time and caches the ``X-Records``
        header.

        Raises:
            PaginationError: On an error status or a missing count header
        """
        if self._count is not None:
            return self._count

        request = self._client.new_request("HEAD", self._path, self._params(with_cursor=False))
        response = self._client.do(request)
        if response.is_error():
            raise PaginationError(
                f"Counting {self._path} failed with status {response.status_code}",
                details={"status_code": response.status_code},
                response=response,
            )
        if response.records is None:
            raise PaginationError(f"Missing X-Records header for {self._path}", response=response)

        self._count = response.records
        return self._count

    def __iter__(self) -> Iterator[Any]:
        """Iterate over records of the remaining pages."""
        while self.has_more():
            yield from self.fetch()


__all__ = ["Pager", "PagerOptions", "MAX_PER_PAGE"]
