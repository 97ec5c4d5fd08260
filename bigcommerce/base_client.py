from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Dict, Optional

import requests

from .exceptions import TransportError

logger = logging.getLogger(__name__)

JSON_HEADERS = {
    'Accept': 'application/json',
    'Content-Type': 'application/json',
}


@dataclass(frozen=True)
class TransportResponse:
    body: bytes
    status_code: int


class BaseClient:
    """Signed HTTP transport: one request in, raw body and status out.

    Non-2xx statuses are returned as data; only network failures raise.
    """
    BASE_URL: str = ''

    def __init__(self, base_url: str = '', headers: Optional[Dict[str, str]] = None, timeout: float = 30.0,
                 session: Optional[requests.Session] = None):
        self.BASE_URL = base_url or self.BASE_URL
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers: Dict[str, str] = dict(JSON_HEADERS)
        self.headers.update(headers or {})

    def url_for(self, path: str) -> str:
        if path.startswith('http'):
            return path
        return self.BASE_URL.rstrip('/') + '/' + path.lstrip('/')

    def send(self, method: str, path: str, body: Optional[bytes] = None, *,
             timeout: Optional[float] = None) -> TransportResponse:
        url = self.url_for(path)
        logger.debug('%s %s', method.upper(), path)
        try:
            with self.session.request(method.upper(), url, data=body or None, headers=self.headers,
                                      timeout=timeout if timeout is not None else self.timeout) as resp:
                content = resp.content
                status = resp.status_code
        except requests.RequestException as e:
            raise TransportError(f"Network error on {method.upper()} {path}: {e}") from e
        return TransportResponse(body=content, status_code=status)

    def close(self) -> None:
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
