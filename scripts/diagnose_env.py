#!/usr/bin/env python
"""Environment & connectivity diagnostics for the BigCommerce credentials.

Usage:
  python scripts/diagnose_env.py [--probe]

Without flags runs variable presence checks. Use --probe to request one page of /v3/channels.
"""
from __future__ import annotations
import os
import sys
import textwrap
from pathlib import Path
from typing import Dict, List

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from bigcommerce import ApiRequestError, BigCommerceClient  # noqa: E402
from bigcommerce.config import load_env_file  # noqa: E402

MANDATORY: Dict[str, List[str]] = {
    'store': ['BIGCOMMERCE_STORE_HASH', 'BIGCOMMERCE_ACCESS_TOKEN', 'BIGCOMMERCE_CLIENT_ID'],
    'app': ['BIGCOMMERCE_APP_HOSTNAME', 'BIGCOMMERCE_APP_CLIENT_ID', 'BIGCOMMERCE_APP_CLIENT_SECRET'],
}

OPTIONAL = ['BIGCOMMERCE_MAX_RETRIES', 'BIGCOMMERCE_TIMEOUT', 'BIGCOMMERCE_RETRY_MODE',
            'BIGCOMMERCE_RETRY_REMOTE_ERRORS', 'BIGCOMMERCE_API_HOST', 'BIGCOMMERCE_LOGIN_URL']


def mask(val: str | None) -> str | None:
    if not val:
        return val
    if len(val) <= 6:
        return '*' * len(val)
    return val[:4] + '...' + val[-4:]


def check_presence() -> Dict[str, Dict[str, str]]:
    report: Dict[str, Dict[str, str]] = {}
    for group, keys in MANDATORY.items():
        report[group] = {k: 'OK' if (os.getenv(k) or '').strip() else 'MISSING' for k in keys}
    return report


def print_report() -> None:
    presence = check_presence()
    print('\n[VARIABLE PRESENCE]')
    widest = max(len(k) for keys in MANDATORY.values() for k in keys)
    for group, mapping in presence.items():
        print(f"- {group.upper()}:")
        for k, status in mapping.items():
            print(f"  {k.ljust(widest)} : {status:<8} {'' if status != 'OK' else mask(os.getenv(k))}")
    print('\n[OPTIONAL SETTINGS]')
    for k in OPTIONAL:
        raw = os.getenv(k)
        if raw:
            print(f"  {k} = {raw}")
    print()


def probe() -> bool:
    missing = [k for k in MANDATORY['store'] if not os.getenv(k)]
    if missing:
        print(f"[probe] Skipping connectivity test (missing: {', '.join(missing)})")
        return False
    with BigCommerceClient.from_env() as client:
        print(f"[probe] GET {client.BASE_URL}/v3/channels?page=1")
        try:
            channels, more = client.get_channels(1)
        except ApiRequestError as e:
            print(f"[probe] ERROR {type(e).__name__}: {e}")
            if (getattr(e, 'status', None) or getattr(e, 'status_code', None)) in (401, 403):
                print(textwrap.dedent("""
                    HINT 401/403: Invalid token, missing scopes, or the API account was revoked.
                """))
            return False
    print(f"[probe] OK: {len(channels)} channel(s) on page 1{' (more pages)' if more else ''}")
    return True


def main(argv: List[str]) -> int:
    load_env_file(PROJECT_ROOT / '.env')
    flags = set(a for a in argv[1:] if a.startswith('--'))
    print_report()
    if '--probe' in flags:
        return 0 if probe() else 1
    return 0


if __name__ == '__main__':
    raise SystemExit(main(sys.argv))
