"""Response envelope decoding and error classification.

List endpoints answer with::

    {"data": [...], "meta": {"pagination": {"current_page": 1, "total_pages": 3, ...}}}

and report application errors in the same wrapper with a nonzero
``status`` and a human readable ``title``.
"""
from __future__ import annotations
import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field, TypeAdapter
from pydantic import ValidationError as SchemaError

from .exceptions import (
    ApiAuthError,
    ApiRateLimitError,
    ApiRequestError,
    AuthContextError,
    DecodeError,
    HttpStatusError,
    NoContentError,
    RemoteError,
    ValidationError,
)
from .models import Pagination, Resource

logger = logging.getLogger(__name__)

T = TypeVar('T')

_EXCERPT = 200


@lru_cache(maxsize=None)
def _adapter(target: Any) -> TypeAdapter:
    return TypeAdapter(target)


def _excerpt(raw: bytes) -> str:
    return raw[:_EXCERPT].decode('utf-8', errors='replace')


def _load_json(raw: bytes) -> Any:
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DecodeError(f"Failed to decode JSON response: {e}", body=raw) from e


def _validate(target: Any, data: Any, raw: bytes) -> Any:
    try:
        return _adapter(target).validate_python(data)
    except SchemaError as e:
        raise DecodeError(f"Response does not match {getattr(target, '__name__', target)}: {e}", body=raw) from e


@dataclass
class Page(Generic[T]):
    items: List[T]
    pagination: Pagination = field(default_factory=Pagination)

    @property
    def has_more(self) -> bool:
        return self.pagination.has_more


def decode_page(raw: bytes, status_code: int, target: Any) -> Page:
    """Decode one page of a list endpoint into ``target`` items."""
    if status_code == 204:
        raise NoContentError()
    payload = _load_json(raw)
    if not isinstance(payload, dict):
        raise DecodeError(f"Expected a JSON object envelope, got {type(payload).__name__}", body=raw)
    status = payload.get('status') or 0
    if status != 0:
        raise RemoteError(str(payload.get('title') or f"API error status {status}"), status)

    meta = payload.get('meta')
    if meta is None:
        meta = {}
    if not isinstance(meta, dict):
        raise DecodeError('Envelope meta is not an object', body=raw)
    pagination = _validate(Pagination, meta.get('pagination') or {}, raw)
    data = payload.get('data')
    if data is None:
        data = []
    if not isinstance(data, list):
        raise DecodeError('Envelope data is not a list', body=raw)
    items = _validate(List[target], data, raw)
    logger.debug('page %s: %d items (%s/%s)', pagination.current_page, len(items),
                 pagination.current_page, pagination.total_pages)
    return Page(items=items, pagination=pagination)


def decode_single(raw: bytes, status_code: int, target: Any, envelope: bool = True) -> Any:
    """Decode a single-shot response; non-2xx statuses raise a classified error.

    ``envelope=False`` is for the v2 endpoints, whose bodies are not wrapped
    in ``data``.
    """
    if status_code == 204:
        raise NoContentError()
    if not 200 <= status_code < 300:
        raise classify_error(status_code, raw)
    payload = _load_json(raw)
    if envelope:
        if not isinstance(payload, dict):
            raise DecodeError(f"Expected a JSON object envelope, got {type(payload).__name__}", body=raw)
        payload = payload.get('data')
    return _validate(target, payload, raw)


class ErrorKind(str, Enum):
    VALIDATION = 'validation'
    REMOTE = 'remote'
    OAUTH = 'oauth'
    GENERIC = 'generic'


class _ValidationShape(BaseModel):
    errors: Dict[str, Any] = Field(min_length=1)
    title: Optional[str] = None


class _RemoteShape(BaseModel):
    status: int
    title: str = ''


class _OAuthShape(BaseModel):
    error: str = Field(min_length=1)
    error_description: str = ''


_SHAPES = (
    (ErrorKind.VALIDATION, _ValidationShape),
    (ErrorKind.OAUTH, _OAuthShape),
    (ErrorKind.REMOTE, _RemoteShape),
)


@dataclass
class ErrorBody:
    kind: ErrorKind
    shape: Optional[BaseModel] = None


def decode_error_body(payload: Any) -> ErrorBody:
    """Match an error payload against the known shapes, in order."""
    if isinstance(payload, dict):
        for kind, shape in _SHAPES:
            try:
                return ErrorBody(kind, shape.model_validate(payload))
            except SchemaError:
                continue
    return ErrorBody(ErrorKind.GENERIC)


def _messages(errors: Dict[str, Any]) -> List[str]:
    out: List[str] = []
    for value in errors.values():
        if isinstance(value, list):
            out.extend(str(v) for v in value)
        else:
            out.append(str(value))
    return out


def classify_error(status_code: int, raw: bytes) -> ApiRequestError:
    """Turn a non-2xx single-shot response into the matching exception."""
    if status_code == 422:
        payload = _load_json(raw)
        body = decode_error_body(payload)
        if body.kind is ErrorKind.VALIDATION:
            return ValidationError(_messages(body.shape.errors), body=raw)  # type: ignore[union-attr]
        return ValidationError([], body=raw)

    try:
        payload = json.loads(raw) if raw else None
    except (json.JSONDecodeError, UnicodeDecodeError):
        payload = None
    body = decode_error_body(payload)

    if status_code in (401, 403):
        return ApiAuthError(f"Auth error {status_code}: {_excerpt(raw)}", status_code=status_code, body=raw)
    if status_code == 429:
        return ApiRateLimitError(f"Rate limit hit (429): {_excerpt(raw)}", body=raw)
    if body.kind is ErrorKind.OAUTH:
        return AuthContextError(body.shape.error, body.shape.error_description)  # type: ignore[union-attr]
    if body.kind is ErrorKind.REMOTE and body.shape.status != 0:  # type: ignore[union-attr]
        return RemoteError(body.shape.title or f"HTTP {status_code}", body.shape.status)  # type: ignore[union-attr]
    return HttpStatusError(f"HTTP {status_code}: {_excerpt(raw)}", status_code=status_code, body=raw)


def _plain(obj: Any) -> Any:
    if isinstance(obj, Resource):
        return obj.to_payload()
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode='json', exclude_unset=True)
    if isinstance(obj, (list, tuple)):
        return [_plain(o) for o in obj]
    return obj


def encode_payload(obj: Any) -> bytes:
    """Serialize a request payload; models only send the fields that were set."""
    if obj is None:
        return b''
    if isinstance(obj, bytes):
        return obj
    return json.dumps(_plain(obj), ensure_ascii=False).encode('utf-8')
