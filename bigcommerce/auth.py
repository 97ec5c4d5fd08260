from __future__ import annotations
import json
import logging
from typing import Mapping, Optional

import requests

from .base_client import BaseClient
from .config import AppConfig
from .envelope import ErrorKind, classify_error, decode_error_body, encode_payload
from .exceptions import AuthContextError, DecodeError
from .models import AuthContext, AuthTokenRequest

logger = logging.getLogger(__name__)

TOKEN_PATH = '/oauth2/token'


class BigCommerceApp(BaseClient):
    """Registered app: exchanges the install callback's code for a store token."""

    def __init__(self, config: AppConfig, session: Optional[requests.Session] = None):
        super().__init__(base_url=config.login_url, timeout=config.timeout, session=session)
        self.config = config

    @classmethod
    def from_env(cls) -> 'BigCommerceApp':
        return cls(AppConfig.from_env())

    def token_request(self, query: Mapping[str, str]) -> AuthTokenRequest:
        return AuthTokenRequest(
            client_id=self.config.client_id,
            client_secret=self.config.client_secret,
            redirect_uri=self.config.redirect_uri,
            grant_type='authorization_code',
            code=query.get('code', ''),
            scope=query.get('scope', ''),
            context=query.get('context', ''),
        )

    def get_auth_context(self, query: Mapping[str, str]) -> AuthContext:
        """Call with the callback's query parameters (``code``, ``scope``, ``context``)."""
        req = self.token_request(query)
        resp = self.send('POST', TOKEN_PATH, encode_payload(req))
        try:
            payload = json.loads(resp.body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            if not 200 <= resp.status_code < 300:
                raise classify_error(resp.status_code, resp.body) from e
            raise DecodeError(f"Failed to decode auth response: {e}", body=resp.body) from e

        body = decode_error_body(payload)
        if body.kind is ErrorKind.OAUTH:
            logger.warning('auth context rejected for %s: %s', req.context, body.shape.error)  # type: ignore[union-attr]
            raise AuthContextError(body.shape.error, body.shape.error_description)  # type: ignore[union-attr]
        if not 200 <= resp.status_code < 300:
            raise classify_error(resp.status_code, resp.body)
        try:
            return AuthContext.model_validate(payload)
        except ValueError as e:
            raise DecodeError(f"Unexpected auth response: {e}", body=resp.body) from e
