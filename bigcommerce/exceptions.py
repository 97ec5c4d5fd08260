from __future__ import annotations
from typing import Any, List, Optional


class ApiRequestError(Exception):
    """Generic API request error (not otherwise classified).

    ``partial`` holds the items a traversal had gathered when this error
    ended it; set by ``FetchResult.raise_for_error``.
    """
    partial: Optional[List[Any]] = None


class ApiAuthError(ApiRequestError):
    """Missing credentials or authorization failure (401/403)."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: bytes = b''):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class TransportError(ApiRequestError):
    """Network-level failure: DNS, refused connection, timeout, TLS."""


class NoContentError(ApiRequestError):
    """The API answered 204 No Content."""

    def __init__(self, message: str = 'no content'):
        super().__init__(message)


class DecodeError(ApiRequestError):
    """Response body is not the expected JSON shape."""

    def __init__(self, message: str, body: bytes = b''):
        super().__init__(message)
        self.body = body


class RemoteError(ApiRequestError):
    """Application-level error reported in the envelope (status != 0)."""

    def __init__(self, title: str, status: int):
        super().__init__(title)
        self.title = title
        self.status = status


class HttpStatusError(ApiRequestError):
    """Non-2xx response on a single-shot call."""

    def __init__(self, message: str, status_code: int, body: bytes = b''):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ValidationError(HttpStatusError):
    """422 Unprocessable Entity with its field messages."""

    def __init__(self, messages: List[str], body: bytes = b''):
        self.messages = list(messages)
        text = ', '.join(self.messages) if self.messages else 'unknown error'
        super().__init__(text, status_code=422, body=body)


class ApiRateLimitError(HttpStatusError):
    """Rate limiting encountered (429)."""

    def __init__(self, message: str, body: bytes = b''):
        super().__init__(message, status_code=429, body=body)


class ResourceNotFoundError(ApiRequestError):
    """A lookup by a secondary key (SKU, code) matched nothing."""


class AuthContextError(ApiRequestError):
    """OAuth authorization-code exchange was rejected."""

    def __init__(self, kind: str, description: str = ''):
        super().__init__(f"{kind}: {description}" if description else kind)
        self.kind = kind
        self.description = description
