from __future__ import annotations
import logging
from typing import Any, Mapping, Optional

import requests

from .base_client import BaseClient
from .catalog import CatalogMixin
from .channels import ChannelsMixin
from .checkouts import CheckoutsMixin
from .config import ClientConfig
from .envelope import decode_single, encode_payload
from .exceptions import NoContentError
from .gift_certificates import GiftCertificatesMixin
from .pagination import FetchResult, fetch_all
from .tax import TaxMixin

logger = logging.getLogger(__name__)


class BigCommerceClient(CatalogMixin, ChannelsMixin, CheckoutsMixin, GiftCertificatesMixin, TaxMixin, BaseClient):
    """Store API client (``/stores/{hash}/v2`` and ``/v3``).

    Holds only immutable configuration; every call owns its own state.
    """

    def __init__(self, config: ClientConfig, session: Optional[requests.Session] = None):
        super().__init__(
            base_url=config.base_url,
            headers={
                'X-Auth-Token': config.access_token,
                'X-Auth-Client': config.client_id,
            },
            timeout=config.timeout,
            session=session,
        )
        self.config = config

    @classmethod
    def from_env(cls) -> 'BigCommerceClient':
        return cls(ClientConfig.from_env())

    def fetch_all(self, endpoint: str, query_args: Optional[Mapping[str, Any]] = None, target: Any = dict,
                  max_retries: Optional[int] = None) -> FetchResult:
        """Fetch every page of ``endpoint``; partial results come back with the error."""
        return fetch_all(self, endpoint, target, query_args, self.config.retry_policy(max_retries))

    def fetch_one(self, path: str, target: Any = dict, envelope: bool = True) -> Any:
        resp = self.send('GET', path)
        return decode_single(resp.body, resp.status_code, target, envelope=envelope)

    def mutate(self, method: str, path: str, payload: Any, target: Any = dict, envelope: bool = True) -> Any:
        """POST/PUT/DELETE without retries. 422 raises ``ValidationError``."""
        resp = self.send(method, path, encode_payload(payload))
        try:
            return decode_single(resp.body, resp.status_code, target, envelope=envelope)
        except NoContentError:
            return None
        except Exception:
            logger.warning('%s %s failed with HTTP %s: %s', method.upper(), path, resp.status_code,
                           resp.body[:200].decode('utf-8', errors='replace'))
            raise
