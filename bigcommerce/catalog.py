from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple

from .envelope import encode_payload
from .exceptions import ResourceNotFoundError
from .models import (
    ChannelAssignment,
    Metafield,
    Product,
    ProductInventory,
    ProductSalePrice,
    Variant,
    VariantInventory,
    VariantSalePrice,
)
from .pagination import FetchResult, fetch_page

logger = logging.getLogger(__name__)

PRODUCTS_PATH = '/v3/catalog/products'
VARIANTS_PATH = '/v3/catalog/variants'
CHANNEL_ASSIGNMENTS_PATH = '/v3/catalog/products/channel-assignments'

PRODUCT_SUBRESOURCES = (
    'variants', 'images', 'custom_fields', 'bulk_pricing_rules',
    'primary_image', 'modifiers', 'options', 'videos',
)
DEFAULT_PRODUCT_FIELDS = ('name', 'sku', 'custom_url', 'is_visible', 'price')


@dataclass(frozen=True)
class ProductFilter:
    """Query arguments for product listings, passed per call."""
    include_fields: Tuple[str, ...] = ()
    include: Tuple[str, ...] = ()
    args: Mapping[str, str] = field(default_factory=dict)

    def to_args(self) -> Dict[str, str]:
        out: Dict[str, str] = {}
        if self.include_fields:
            out['include_fields'] = ','.join(self.include_fields)
        if self.include:
            out['include'] = ','.join(self.include)
        out.update(self.args)
        return out


def _args(args) -> Dict[str, str]:
    if args is None:
        return {}
    if isinstance(args, ProductFilter):
        return args.to_args()
    return dict(args)


class CatalogMixin:
    """Products, variants, metafields and channel assignments."""

    def get_products(self, args=None, page: int = 1) -> Tuple[List[Product], bool]:
        """One page of products and whether more pages follow."""
        p = fetch_page(self, PRODUCTS_PATH, Product, page, _args(args))
        return p.items, p.has_more

    def get_all_products(self, args=None) -> FetchResult:
        return self.fetch_all(PRODUCTS_PATH, _args(args), Product)

    def get_variants(self, args=None, page: int = 1) -> Tuple[List[Variant], bool]:
        p = fetch_page(self, VARIANTS_PATH, Variant, page, _args(args))
        return p.items, p.has_more

    def get_all_variants(self, args=None) -> FetchResult:
        return self.fetch_all(VARIANTS_PATH, _args(args), Variant)

    def get_product_by_id(self, product_id: int) -> Product:
        path = f"{PRODUCTS_PATH}/{product_id}?include={','.join(PRODUCT_SUBRESOURCES)}"
        return self.fetch_one(path, Product)

    def get_product_metafields(self, product_id: int) -> Dict[str, Metafield]:
        """Metafields keyed by their ``key``."""
        fields = self.fetch_one(f"{PRODUCTS_PATH}/{product_id}/metafields", Optional[List[Metafield]]) or []
        return {mf.key: mf for mf in fields}

    def create_product(self, product: Product) -> Product:
        return self.mutate('POST', PRODUCTS_PATH, product, Product)

    def update_product_by_sku(self, product: Product) -> Product:
        """Update the product whose SKU matches ``product.sku``."""
        # a failed lookup raises instead of reading as "no match"
        found = self.fetch_all(PRODUCTS_PATH, {'sku': product.sku}, Product, max_retries=0)
        found.raise_for_error()
        if not found.items:
            raise ResourceNotFoundError(f"Empty response back on getting product by sku: {product.sku}")
        return self.mutate('PUT', f"{PRODUCTS_PATH}/{found.items[0].id}", product, Product)

    def update_product_inventory(self, inventory: ProductInventory) -> Product:
        return self.mutate('PUT', f"{PRODUCTS_PATH}/{inventory.id}", inventory, Product)

    def update_product_sale_price(self, sale_price: ProductSalePrice) -> Product:
        return self.mutate('PUT', f"{PRODUCTS_PATH}/{sale_price.id}", sale_price, Product)

    def update_variant_by_sku(self, variant: Variant) -> Variant:
        """Update the variant whose SKU matches; only the first search page is consulted."""
        matches, _ = self.get_variants({'sku': variant.sku}, 1)
        if not matches:
            raise ResourceNotFoundError(f"Empty response back on getting variant by sku: {variant.sku}")
        current = matches[0]
        logger.debug('payload for variant %s: %s', current.id, encode_payload(variant))
        return self.mutate('PUT', f"{PRODUCTS_PATH}/{current.product_id}/variants/{current.id}", variant, Variant)

    def update_variant_inventory(self, inventory: VariantInventory) -> Variant:
        return self.mutate('PUT', f"{PRODUCTS_PATH}/{inventory.product_id}/variants/{inventory.id}",
                           inventory, Variant)

    def update_variant_sale_price(self, sale_price: VariantSalePrice) -> Variant:
        return self.mutate('PUT', f"{PRODUCTS_PATH}/{sale_price.product_id}/variants/{sale_price.id}",
                           sale_price, Variant)

    def add_product_to_channel(self, product_id: int, channel_id: int) -> bool:
        payload = [ChannelAssignment(product_id=product_id, channel_id=channel_id)]
        resp = self.send('PUT', CHANNEL_ASSIGNMENTS_PATH, encode_payload(payload))
        return 200 <= resp.status_code < 300

    def delete_product_from_channel(self, product_id: int, channel_id: int) -> bool:
        path = f"{CHANNEL_ASSIGNMENTS_PATH}?product_id:in={product_id}&channel_id:in={channel_id}"
        resp = self.send('DELETE', path)
        return 200 <= resp.status_code < 300
