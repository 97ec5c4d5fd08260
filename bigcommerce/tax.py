from __future__ import annotations
from typing import Iterable, List, Optional

from .models import TaxClassRate, TaxZone

TAX_ZONES_PATH = '/v3/tax/zones'
TAX_RATES_PATH = '/v3/tax/rates'


def _in_filter(name: str, ids: Iterable[int]) -> str:
    ids = [str(i) for i in ids]
    if not ids:
        return ''
    return f"?{name}:in={','.join(ids)}"


class TaxMixin:

    def get_tax_zones(self, zone_ids: Iterable[int] = ()) -> List[TaxZone]:
        return self.fetch_one(TAX_ZONES_PATH + _in_filter('id', zone_ids), Optional[List[TaxZone]]) or []

    def get_tax_rates(self, tax_zone_ids: Iterable[int] = ()) -> List[TaxClassRate]:
        return self.fetch_one(TAX_RATES_PATH + _in_filter('tax_zone_id', tax_zone_ids),
                              Optional[List[TaxClassRate]]) or []
