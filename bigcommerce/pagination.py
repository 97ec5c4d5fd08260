"""Fetch-all traversal over page-numbered list endpoints.

A traversal requests page 1, 2, ... N in order, appends every page's items
and stops once the server reports ``current_page >= total_pages``.
Failures feed a single retry counter shared by the whole traversal. What
happens while the budget is not yet spent depends on ``RetryMode``:

* ``ABANDON``: stop and hand back the pages fetched so far with no error.
  The failed page is never requested again. This is the default.
* ``REATTEMPT``: request the same page again.

Once the counter exceeds ``max_retries`` the traversal stops and returns
the partial collection together with the error that ended it.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, Iterator, List, Mapping, Optional, Protocol, TypeVar
from urllib.parse import urlencode

from .envelope import Page, decode_page
from .exceptions import ApiRequestError, NoContentError, RemoteError

logger = logging.getLogger(__name__)

T = TypeVar('T')


class RetryMode(str, Enum):
    ABANDON = 'abandon'
    REATTEMPT = 'reattempt'


@dataclass(frozen=True)
class RetryPolicy:
    max_retries: int = 1
    mode: RetryMode = RetryMode.ABANDON
    retry_remote_errors: bool = True


class Transport(Protocol):
    def send(self, method: str, path: str, body: Optional[bytes] = None, *, timeout: Optional[float] = None) -> Any:
        ...


@dataclass
class FetchResult(Generic[T]):
    """Items gathered by one traversal, plus the error that ended it early (if any).

    ``abandoned`` is set when a failure within budget stopped the traversal
    quietly: ``error`` is None but later pages were never fetched.
    """
    items: List[T] = field(default_factory=list)
    error: Optional[ApiRequestError] = None
    pages: int = 0
    attempts: int = 0
    retries: int = 0
    abandoned: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def complete(self) -> bool:
        return self.error is None and not self.abandoned

    def raise_for_error(self) -> List[T]:
        if self.error is not None:
            self.error.partial = self.items
            raise self.error
        return self.items

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]


def page_path(endpoint: str, page: int, query_args: Optional[Mapping[str, Any]] = None) -> str:
    """``endpoint?page=N&k=v`` with filter operators (``id:in=1,2``) left readable."""
    params = [('page', str(page))]
    params.extend((k, str(v)) for k, v in (query_args or {}).items())
    sep = '&' if '?' in endpoint else '?'
    return endpoint + sep + urlencode(params, safe=':,')


def fetch_page(transport: Transport, endpoint: str, target: Any, page: int,
               query_args: Optional[Mapping[str, Any]] = None) -> Page:
    resp = transport.send('GET', page_path(endpoint, page, query_args))
    return decode_page(resp.body, resp.status_code, target)


def fetch_all(transport: Transport, endpoint: str, target: Any,
              query_args: Optional[Mapping[str, Any]] = None,
              policy: RetryPolicy = RetryPolicy()) -> FetchResult:
    result: FetchResult = FetchResult()
    page = 1
    while True:
        result.attempts += 1
        try:
            current = fetch_page(transport, endpoint, target, page, query_args)
        except NoContentError as e:
            logger.warning('%s page %d: no content, stopping with %d items', endpoint, page, len(result.items))
            result.error = e
            return result
        except ApiRequestError as e:
            result.retries += 1
            if result.retries > policy.max_retries:
                logger.warning('Max retries reached on %s page %d: %s', endpoint, page, e)
                result.error = e
                return result
            if isinstance(e, RemoteError) and not policy.retry_remote_errors:
                logger.warning('%s page %d: remote error %s', endpoint, page, e)
                result.error = e
                return result
            if policy.mode is RetryMode.REATTEMPT:
                logger.info('%s page %d failed (%s), retry %d/%d', endpoint, page, e,
                            result.retries, policy.max_retries)
                continue
            logger.warning('%s page %d failed (%s); returning %d items fetched so far',
                           endpoint, page, e, len(result.items))
            result.abandoned = True
            return result
        result.items.extend(current.items)
        result.pages += 1
        if not current.has_more or page >= current.pagination.total_pages:
            return result
        page += 1
