from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .exceptions import ApiAuthError
from .pagination import RetryMode, RetryPolicy

DEFAULT_API_HOST = 'api.bigcommerce.com'
DEFAULT_LOGIN_URL = 'https://login.bigcommerce.com'


def load_env_file(env_path: Path) -> None:
    """Load KEY=VALUE lines from a local .env file into os.environ.

    Existing non-empty variables win over the file.
    """
    if not env_path.exists():
        return
    for line in env_path.read_text(encoding='utf-8').splitlines():
        line = line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        k, v = line.split('=', 1)
        k = k.strip()
        v = v.strip().strip('"').strip("'")
        if not k:
            continue
        existing = os.environ.get(k)
        if existing is None or existing.strip() == '':
            os.environ[k] = v


def env(name: str, required: bool = True) -> Optional[str]:
    val = os.getenv(name)
    if required and (val is None or val.strip() == ''):
        raise ApiAuthError(f"Missing required environment variable: {name}")
    return val


def _env_bool(name: str, default: bool) -> bool:
    val = os.getenv(name)
    if val is None or val.strip() == '':
        return default
    return val.strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass(frozen=True)
class ClientConfig:
    """Immutable store credentials and traversal settings."""
    store_hash: str
    access_token: str
    client_id: str
    max_retries: int = 1
    timeout: float = 30.0
    retry_mode: RetryMode = RetryMode.ABANDON
    retry_remote_errors: bool = True
    api_host: str = DEFAULT_API_HOST

    def __post_init__(self):
        if self.max_retries < 0:
            raise ValueError('max_retries must be >= 0')
        if not isinstance(self.retry_mode, RetryMode):
            object.__setattr__(self, 'retry_mode', RetryMode(self.retry_mode))

    @property
    def base_url(self) -> str:
        return f"https://{self.api_host}/stores/{self.store_hash}"

    def retry_policy(self, max_retries: Optional[int] = None) -> RetryPolicy:
        return RetryPolicy(
            max_retries=self.max_retries if max_retries is None else max_retries,
            mode=self.retry_mode,
            retry_remote_errors=self.retry_remote_errors,
        )

    @classmethod
    def from_env(cls) -> 'ClientConfig':
        store_hash = env('BIGCOMMERCE_STORE_HASH')
        access_token = env('BIGCOMMERCE_ACCESS_TOKEN')
        client_id = env('BIGCOMMERCE_CLIENT_ID')
        return cls(
            store_hash=store_hash,  # type: ignore[arg-type]
            access_token=access_token,  # type: ignore[arg-type]
            client_id=client_id,  # type: ignore[arg-type]
            max_retries=int(os.getenv('BIGCOMMERCE_MAX_RETRIES') or 1),
            timeout=float(os.getenv('BIGCOMMERCE_TIMEOUT') or 30),
            retry_mode=RetryMode(os.getenv('BIGCOMMERCE_RETRY_MODE') or RetryMode.ABANDON.value),
            retry_remote_errors=_env_bool('BIGCOMMERCE_RETRY_REMOTE_ERRORS', True),
            api_host=os.getenv('BIGCOMMERCE_API_HOST') or DEFAULT_API_HOST,
        )


@dataclass(frozen=True)
class AppConfig:
    """Credentials of a registered app, used for the OAuth code exchange."""
    hostname: str
    client_id: str
    client_secret: str
    login_url: str = DEFAULT_LOGIN_URL
    timeout: float = 30.0

    @property
    def redirect_uri(self) -> str:
        return f"https://{self.hostname}/auth"

    @classmethod
    def from_env(cls) -> 'AppConfig':
        return cls(
            hostname=env('BIGCOMMERCE_APP_HOSTNAME'),  # type: ignore[arg-type]
            client_id=env('BIGCOMMERCE_APP_CLIENT_ID'),  # type: ignore[arg-type]
            client_secret=env('BIGCOMMERCE_APP_CLIENT_SECRET'),  # type: ignore[arg-type]
            login_url=os.getenv('BIGCOMMERCE_LOGIN_URL') or DEFAULT_LOGIN_URL,
        )
