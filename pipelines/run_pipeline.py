#!/usr/bin/env python
"""Export catalog snapshots (products, variants, channels) to normalized CSV.

Usage:
  python -m pipelines.run_pipeline [--resources products,variants] [--key-mode pair] [--dry-run] [--verbose]
"""
from __future__ import annotations
import argparse
import json
import logging
import uuid
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import yaml

from bigcommerce import BigCommerceClient
from bigcommerce.catalog import DEFAULT_PRODUCT_FIELDS, ProductFilter
from bigcommerce.config import load_env_file
from bigcommerce.pagination import FetchResult
from pipelines.normalization import merge_records, normalize_channels, normalize_products, normalize_variants
from pipelines.storage import (
    DATA_ROOT,
    append_run_log,
    load_snapshot,
    persist_snapshot,
    save_raw,
    sha256_json,
    utc_now_iso,
)

logger = logging.getLogger(__name__)

CONFIG_PATH = Path('config/pipeline_config.yaml')

NORMALIZERS: Dict[str, Callable[..., List[Dict[str, Any]]]] = {
    'products': normalize_products,
    'variants': normalize_variants,
    'channels': normalize_channels,
}


def load_config(path: Path = CONFIG_PATH) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open('r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def parse_args(argv: Optional[List[str]] = None):
    p = argparse.ArgumentParser(description='Export BigCommerce catalog snapshots')
    p.add_argument('--config', type=Path, default=CONFIG_PATH)
    p.add_argument('--resources', help='Comma separated resource filter (products,variants,channels)')
    p.add_argument('--run-id', default='auto')
    p.add_argument('--dry-run', action='store_true')
    p.add_argument('--key-mode', choices=['triple', 'pair'], help='Snapshot dedup mode: triple=(source,source_id,raw_hash), pair=(source,source_id) overwrite')
    p.add_argument('--verbose', action='store_true')
    return p.parse_args(argv)


def fetch_resource(client: BigCommerceClient, resource: str, res_cfg: Dict[str, Any]) -> FetchResult:
    args = {str(k): str(v) for k, v in (res_cfg.get('args') or {}).items()}
    if resource == 'products':
        fields = tuple(res_cfg.get('include_fields') or DEFAULT_PRODUCT_FIELDS)
        include = tuple(res_cfg.get('include') or ())
        return client.get_all_products(ProductFilter(include_fields=fields, include=include, args=args))
    if resource == 'variants':
        return client.get_all_variants(args)
    if resource == 'channels':
        return client.get_all_channels()
    raise ValueError(f"Unsupported resource: {resource}")


def run(client: BigCommerceClient, cfg: Dict[str, Any], resources: List[str], run_id: str,
        key_mode: str = 'triple', dry_run: bool = False, root: Path = DATA_ROOT) -> Dict[str, Any]:
    """Fetch, normalize and persist each resource; returns the run log record."""
    resource_cfg = cfg.get('resources') or {}
    stats: Dict[str, Any] = {}
    status = 'success'
    started_at = utc_now_iso()
    for resource in resources:
        result = fetch_resource(client, resource, resource_cfg.get(resource) or {})
        entry: Dict[str, Any] = {'fetched': len(result), 'pages': result.pages, 'retries': result.retries}
        if result.error is not None:
            entry['error'] = f"{type(result.error).__name__}: {result.error}"
            status = 'partial'
            logger.warning('%s: traversal ended early after %d items: %s', resource, len(result), result.error)
        elif result.abandoned:
            entry['abandoned'] = True
            status = 'partial'
            logger.warning('%s: traversal abandoned after %d items (%d retries)', resource, len(result),
                           result.retries)
        payload = [item.to_payload() for item in result]
        raw_hash = sha256_json(payload)
        raw_file = 'dry-run' if dry_run else str(save_raw(resource, payload, run_id, root))
        records = NORMALIZERS[resource](result.items, raw_file, raw_hash)
        merged, new_count, updated_count = merge_records(load_snapshot(resource, root), records, key_mode=key_mode)
        entry.update({'new': new_count, 'updated': updated_count})
        if not dry_run and (new_count > 0 or updated_count > 0):
            path = persist_snapshot(resource, merged, root)
            logger.info('Persisted %s to %s, total now %d (added %d, %d updated)',
                        resource, path, len(merged), new_count, updated_count)
        stats[resource] = entry
    return {
        'run_id': run_id,
        'started_at': started_at,
        'finished_at': utc_now_iso(),
        'status': status,
        'key_mode': key_mode,
        'resources': stats,
    }


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format='[%(levelname)s] %(message)s')
    load_env_file(Path('.env'))
    cfg = load_config(args.config)
    defaults = cfg.get('defaults') or {}
    if args.resources:
        resources = [r.strip() for r in args.resources.split(',') if r.strip()]
    else:
        resources = list((cfg.get('resources') or {}).keys()) or ['products']
    unknown = [r for r in resources if r not in NORMALIZERS]
    if unknown:
        raise SystemExit(f"Unsupported resources: {', '.join(unknown)}")
    run_id = args.run_id if args.run_id != 'auto' else uuid.uuid4().hex[:8]
    key_mode = args.key_mode or defaults.get('key_mode', 'triple')

    with BigCommerceClient.from_env() as client:
        record = run(client, cfg, resources, run_id, key_mode=key_mode, dry_run=args.dry_run)
    if not args.dry_run:
        append_run_log(record)
    logger.debug(json.dumps(record, indent=2))
    return 0 if record['status'] == 'success' else 1


if __name__ == '__main__':
    raise SystemExit(main())
