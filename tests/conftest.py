import json
from typing import Any, List, Optional
from unittest.mock import MagicMock

import pytest

from bigcommerce import BigCommerceClient, ClientConfig
from bigcommerce.base_client import TransportResponse


def envelope(items: List[Any], current_page: int = 1, total_pages: int = 1, status: int = 0, title: str = '') -> bytes:
    body = {
        'data': items,
        'meta': {'pagination': {
            'total': len(items), 'count': len(items), 'per_page': 50,
            'current_page': current_page, 'total_pages': total_pages, 'links': {},
        }},
    }
    if status:
        body = {'status': status, 'title': title, 'type': 'https://developer.bigcommerce.com/api-docs'}
    return json.dumps(body).encode('utf-8')


class FakeTransport:
    """Scripted transport: each send() pops the next response or raises it."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def send(self, method, path, body=None, *, timeout=None):
        self.calls.append((method, path, body))
        nxt = self.responses.pop(0)
        if isinstance(nxt, Exception):
            raise nxt
        return nxt

    @property
    def pages(self):
        return [int(path.split('page=')[1].split('&')[0]) for _, path, _ in self.calls]


def ok_page(items, current_page, total_pages) -> TransportResponse:
    return TransportResponse(envelope(items, current_page, total_pages), 200)


def http_response(body: Any = b'', status_code: int = 200) -> MagicMock:
    if not isinstance(body, bytes):
        body = json.dumps(body).encode('utf-8')
    resp = MagicMock()
    resp.content = body
    resp.status_code = status_code
    resp.__enter__.return_value = resp
    resp.__exit__.return_value = False
    return resp


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(store_hash='abc123', access_token='token-xyz', client_id='client-1', max_retries=1)


@pytest.fixture
def session() -> MagicMock:
    return MagicMock()


@pytest.fixture
def client(config, session) -> BigCommerceClient:
    return BigCommerceClient(config, session=session)


def sent(session: MagicMock, idx: int = 0):
    """(method, url, decoded json body or None) of the idx-th request."""
    call = session.request.call_args_list[idx]
    method, url = call.args[0], call.args[1]
    data: Optional[bytes] = call.kwargs.get('data')
    return method, url, json.loads(data) if data else None
