from __future__ import annotations
import json
from typing import Any, Dict, List, Sequence, Tuple
from datetime import datetime, timezone

import pandas as pd

from bigcommerce.models import Channel, Product, Variant

SOURCE = 'bigcommerce'


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')


def _limit_additional(obj: Dict[str, Any], max_len: int = 8000) -> str:
    raw = json.dumps(obj, ensure_ascii=False, sort_keys=True, default=str)
    if len(raw) > max_len:
        return raw[:max_len] + '...'
    return raw


def normalize_products(products: Sequence[Product], raw_file: str, raw_hash: str) -> List[Dict[str, Any]]:
    out = []
    collected_at = _now_iso()
    for p in products:
        custom_url = p.custom_url.url if p.custom_url else None
        image_url = None
        if p.images:
            thumbs = [i for i in p.images if i.is_thumbnail] or p.images
            image_url = thumbs[0].url_standard
        out.append({
            'source': SOURCE,
            'source_id': str(p.id),
            'sku': p.sku,
            'name': p.name,
            'price': p.price,
            'sale_price': p.sale_price,
            'inventory_level': p.inventory_level,
            'is_visible': p.is_visible,
            'variant_count': len(p.variants or []),
            'image_url': image_url,
            'url': custom_url,
            'collected_at': collected_at,
            'raw_hash': raw_hash,
            'raw_file': raw_file,
            'additional': _limit_additional({'brand_id': p.brand_id, 'categories': p.categories,
                                             'availability': p.availability}),
        })
    return out


def normalize_variants(variants: Sequence[Variant], raw_file: str, raw_hash: str) -> List[Dict[str, Any]]:
    out = []
    collected_at = _now_iso()
    for v in variants:
        out.append({
            'source': SOURCE,
            'source_id': str(v.id),
            'product_id': str(v.product_id),
            'sku': v.sku,
            'price': v.price if v.price is not None else v.calculated_price,
            'sale_price': v.sale_price,
            'inventory_level': v.inventory_level,
            'purchasing_disabled': v.purchasing_disabled,
            'collected_at': collected_at,
            'raw_hash': raw_hash,
            'raw_file': raw_file,
            'additional': _limit_additional({'option_values': v.option_values, 'upc': v.upc, 'mpn': v.mpn}),
        })
    return out


def normalize_channels(channels: Sequence[Channel], raw_file: str, raw_hash: str) -> List[Dict[str, Any]]:
    collected_at = _now_iso()
    return [{
        'source': SOURCE,
        'source_id': str(c.id),
        'name': c.name,
        'type': c.type,
        'platform': c.platform,
        'status': c.status,
        'is_enabled': c.is_enabled,
        'collected_at': collected_at,
        'raw_hash': raw_hash,
        'raw_file': raw_file,
    } for c in channels]


def merge_records(existing, new_records, key_mode: str = 'triple') -> Tuple[pd.DataFrame, int, int]:
    """Merge new records into an existing snapshot dataframe.

    Returns:
      (combined_df, new_count, updated_count)

    key_mode:
      - 'triple': keep multiple versions distinguished by (source, source_id, raw_hash)
      - 'pair': single latest version per (source, source_id) (older versions removed, new overwrites)
    """
    if key_mode not in ('triple', 'pair'):
        raise ValueError(f"Unknown key_mode: {key_mode}")
    df_new = pd.DataFrame(new_records)
    if existing is None or existing.empty:
        if key_mode == 'pair' and not df_new.empty:
            df_new = df_new.sort_values('collected_at').drop_duplicates(['source', 'source_id'], keep='last')
        return df_new, len(df_new), 0
    if df_new.empty:
        return existing, 0, 0

    if key_mode == 'triple':
        key_cols = ['source', 'source_id', 'raw_hash']
        existing_keys = set(tuple(r) for r in existing[key_cols].astype(str).values.tolist())
        mask = [tuple(str(row[k]) for k in key_cols) not in existing_keys for row in df_new.to_dict('records')]
        df_filtered = df_new[mask]
        combined = pd.concat([existing, df_filtered], ignore_index=True)
        return combined, len(df_filtered), 0

    pair_cols = ['source', 'source_id']
    df_new = df_new.sort_values('collected_at').drop_duplicates(pair_cols, keep='last')
    new_keys = set(tuple(r) for r in df_new[pair_cols].astype(str).values.tolist())
    existing_pairs = [tuple(r) for r in existing[pair_cols].astype(str).values.tolist()]
    existing_filtered = existing[[k not in new_keys for k in existing_pairs]]
    existing_keys = set(existing_pairs)
    truly_new = len([k for k in new_keys if k not in existing_keys])
    updated_count = len([k for k in new_keys if k in existing_keys])
    combined = pd.concat([existing_filtered, df_new], ignore_index=True)
    return combined, truly_new, updated_count
