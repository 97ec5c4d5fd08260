#!/usr/bin/env python
"""CLI to fetch one BigCommerce resource into a JSON file.

Examples:
  python scripts/fetch_resource.py --resource products --arg is_visible=true --out data/products.json
  python scripts/fetch_resource.py --resource variants --arg sku=ABC-1 --out data/variants.json
  python scripts/fetch_resource.py --resource channels --out data/channels.json
  python scripts/fetch_resource.py --resource tax-zones --ids 1,2 --out data/tax_zones.json
  python scripts/fetch_resource.py --resource checkout --id 0b3c... --out data/checkout.json
  python scripts/fetch_resource.py --resource gift-certificate --code GC-123 --out data/gc.json

Options:
  --max-retries N (override configured retry budget for list traversals)
  --verbose

A list traversal that ends early still writes the items fetched so far,
then exits with status 1.
"""
from __future__ import annotations
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from bigcommerce import ApiRequestError, BigCommerceClient  # noqa: E402
from bigcommerce.config import load_env_file  # noqa: E402
from bigcommerce.models import Channel, Product, Variant  # noqa: E402

logger = logging.getLogger('fetch_resource')

LIST_RESOURCES = {
    'products': ('/v3/catalog/products', Product),
    'variants': ('/v3/catalog/variants', Variant),
    'channels': ('/v3/channels', Channel),
}


def parse_args(argv: Optional[List[str]] = None):
    p = argparse.ArgumentParser(description='Fetch BigCommerce data')
    p.add_argument('--resource', required=True,
                   choices=sorted(LIST_RESOURCES) + ['tax-zones', 'tax-rates', 'checkout', 'gift-certificate', 'product'])
    p.add_argument('--arg', action='append', default=[], help='Filter argument key=value (repeatable)')
    p.add_argument('--ids', help='Comma separated ids for tax zones/rates')
    p.add_argument('--id', help='Checkout or product id')
    p.add_argument('--code', help='Gift certificate code')
    p.add_argument('--max-retries', type=int)
    p.add_argument('--out', required=True, help='Output JSON file path')
    p.add_argument('--verbose', action='store_true')
    return p.parse_args(argv)


def _query_args(pairs: List[str]) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for pair in pairs:
        if '=' not in pair:
            raise SystemExit(f"--arg expects key=value, got {pair!r}")
        k, v = pair.split('=', 1)
        out[k.strip()] = v.strip()
    return out


def _dump(obj: Any) -> Any:
    if obj is None:
        return None
    if isinstance(obj, list):
        return [_dump(o) for o in obj]
    return obj.to_payload()


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format='[%(levelname)s] %(message)s')
    load_env_file(PROJECT_ROOT / '.env')
    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    ids = [int(x) for x in args.ids.split(',') if x.strip()] if args.ids else []
    exit_code = 0

    with BigCommerceClient.from_env() as client:
        try:
            if args.resource in LIST_RESOURCES:
                endpoint, target = LIST_RESOURCES[args.resource]
                result = client.fetch_all(endpoint, _query_args(args.arg), target, max_retries=args.max_retries)
                if result.error is not None:
                    logger.error('Traversal ended after %d items: %s', len(result), result.error)
                    exit_code = 1
                elif result.abandoned:
                    logger.error('Traversal abandoned after %d items (%d retries)', len(result), result.retries)
                    exit_code = 1
                data = _dump(result.items)
            elif args.resource == 'tax-zones':
                data = _dump(client.get_tax_zones(ids))
            elif args.resource == 'tax-rates':
                data = _dump(client.get_tax_rates(ids))
            elif args.resource == 'checkout':
                if not args.id:
                    raise SystemExit('--id required for checkout')
                data = _dump(client.get_checkout(args.id))
            elif args.resource == 'product':
                if not args.id:
                    raise SystemExit('--id required for product')
                data = _dump(client.get_product_by_id(int(args.id)))
            else:
                if not args.code:
                    raise SystemExit('--code required for gift-certificate')
                data = _dump(client.get_gift_certificate_by_code(args.code))
        except ApiRequestError as e:
            logger.error('%s: %s', type(e).__name__, e)
            return 1

    out_path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding='utf-8')
    logger.info('Wrote %s', out_path)
    return exit_code


if __name__ == '__main__':
    raise SystemExit(main())
