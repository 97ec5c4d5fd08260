"""BigCommerce REST API client (catalog, channels, checkouts, gift certificates, tax, OAuth).

Usage example:
    from bigcommerce import BigCommerceClient
    client = BigCommerceClient.from_env()
    result = client.get_all_products({'is_visible': 'true'})
    products = result.raise_for_error()
"""
from .auth import BigCommerceApp  # noqa: F401
from .client import BigCommerceClient  # noqa: F401
from .config import AppConfig, ClientConfig  # noqa: F401
from .exceptions import (  # noqa: F401
    ApiAuthError,
    ApiRateLimitError,
    ApiRequestError,
    AuthContextError,
    DecodeError,
    HttpStatusError,
    NoContentError,
    RemoteError,
    ResourceNotFoundError,
    TransportError,
    ValidationError,
)
from .pagination import FetchResult, RetryMode, RetryPolicy  # noqa: F401
